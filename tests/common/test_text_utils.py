"""Tests for noprime/common/text_utils.py"""

from noprime.common.text_utils import clean_text, encode_uri_component, truncate


class TestCleanText:
    def test_collapses_whitespace(self):
        assert clean_text("  Nike \n\t Air  ") == "Nike Air"

    def test_none_is_empty(self):
        assert clean_text(None) == ""


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("Running Shoes", 80) == "Running Shoes"

    def test_cuts_then_strips(self):
        # The cut lands on a space, which is then stripped
        assert truncate("abcd efgh", 5) == "abcd"

    def test_leading_whitespace_counts_toward_limit(self):
        assert truncate("   abcdef", 5) == "ab"

    def test_none_is_empty(self):
        assert truncate(None, 10) == ""


class TestEncodeUriComponent:
    def test_space_is_percent_20(self):
        assert encode_uri_component("a b") == "a%20b"

    def test_reserved_characters_escaped(self):
        assert encode_uri_component("a&b=c/d?e#f") == "a%26b%3Dc%2Fd%3Fe%23f"

    def test_unreserved_marks_kept(self):
        assert encode_uri_component("-_.!~*'()") == "-_.!~*'()"

    def test_quotes_and_colon(self):
        assert encode_uri_component('"Nike": x') == "%22Nike%22%3A%20x"

    def test_non_ascii_utf8(self):
        assert encode_uri_component("café") == "caf%C3%A9"
