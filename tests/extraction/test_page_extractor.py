"""Tests for noprime/extraction/page_extractor.py"""

import pytest

from noprime.extraction import PageExtractor

PRODUCT_URL = "https://www.amazon.com/dp/B0C1234567"


def extract(html: str, url: str = PRODUCT_URL):
    return PageExtractor.from_html(html, url).extract_product_info()


def page(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


TITLE = '<span id="productTitle">Thing</span>'


class TestExtractBrand:
    def test_byline_first(self):
        html = page(TITLE + '<a id="bylineInfo">Visit the Anker Store</a>'
                    '<table class="prodDetTable"><tr><th>Brand</th><td>Other</td></tr></table>')
        assert extract(html).brand == "Anker"

    def test_detail_table_second(self):
        html = page(TITLE + '<table class="prodDetTable"><tr><th>Manufacturer</th><td>Anker</td></tr></table>',
                    head='<script type="application/ld+json">{"brand": "Other"}</script>')
        assert extract(html).brand == "Anker"

    def test_json_ld_last(self):
        html = page(TITLE, head='<script type="application/ld+json">{"brand": {"name": "Anker"}}</script>')
        assert extract(html).brand == "Anker"

    def test_no_brand(self):
        assert extract(page(TITLE)).brand is None

    def test_deeply_nested_json_ld_ignored(self):
        html = page(TITLE, head='<script type="application/ld+json">' + "[" * 5000 + '</script>')
        product = extract(html)
        assert product.title == "Thing"
        assert product.brand is None


class TestExtractTitle:
    def test_missing_title_is_none(self):
        product = extract(page("<h2>Results</h2>"), "https://www.amazon.com/s?k=x")
        assert product.title is None
        assert product.is_product_page is False

    def test_url_carried(self):
        assert extract(page(TITLE)).url == PRODUCT_URL


class TestDetectBook:
    @pytest.mark.parametrize("body", [
        '<div id="wayfinding-breadcrumbs_container"><a>Books</a></div>',
        '<div id="bookDescription"></div>',
        '<ul class="a-breadcrumb"><li>Kindle Store</li></ul><div id="rpiContainer"></div>',
        '<table class="prodDetTable"><tr><th>ISBN-10</th><td>0143127748</td></tr></table>',
        '<div id="mediaTab_heading">Paperback</div>',
    ])
    def test_any_single_signal(self, body):
        assert extract(page(TITLE + body)).is_book is True

    def test_no_signal(self):
        product = extract(page(TITLE + '<a id="bylineInfo">Visit the Nike Store</a>'))
        assert product.is_book is False
        assert product.isbn is None


class TestExtractIsbn:
    BREADCRUMB = '<div id="wayfinding-breadcrumbs_container"><a>Books</a></div>'

    def test_isbn13_preferred(self):
        html = page(TITLE + '<table class="prodDetTable">'
                    '<tr><th>ISBN-10</th><td>0143127748</td></tr>'
                    '<tr><th>ISBN-13</th><td>978-0143127741</td></tr></table>')
        assert extract(html).isbn == "9780143127741"

    def test_isbn10_with_check_x(self):
        html = page(TITLE + '<table class="prodDetTable"><tr><th>ISBN-10</th><td>039335668x</td></tr></table>')
        assert extract(html).isbn == "039335668X"

    def test_from_address(self):
        html = page(TITLE + self.BREADCRUMB)
        assert extract(html, "https://www.amazon.com/Overstory-Novel/dp/039335668X/ref=sr_1_1").isbn == "039335668X"

    def test_from_gp_product_address(self):
        html = page(TITLE + self.BREADCRUMB)
        assert extract(html, "https://www.amazon.com/gp/product/0143127748?ie=UTF8").isbn == "0143127748"

    def test_asin_address_is_not_isbn(self):
        html = page(TITLE + self.BREADCRUMB)
        assert extract(html, "https://www.amazon.com/dp/B0C1234567").isbn is None

    def test_non_books_have_no_isbn(self):
        # Address looks like an ISBN-10 but nothing says book
        assert extract(page(TITLE), "https://www.amazon.com/dp/0143127748").isbn is None


class TestFixtures:
    def test_direct_brand_page(self, read_fixture):
        product = extract(read_fixture("brand_direct.html"))
        assert product.title == "Nike Air Zoom Pegasus 40 Men's Road Running Shoes"
        assert product.brand == "Nike"
        assert product.is_book is False

    def test_book_page(self, read_fixture):
        product = extract(read_fixture("book.html"), "https://www.amazon.com/dp/039335668X")
        assert product.title == "The Overstory: A Novel"
        assert product.is_book is True
        assert product.isbn == "9780393356687"

    def test_search_results_page(self, read_fixture):
        product = extract(read_fixture("not_product.html"), "https://www.amazon.com/s?k=running+shoes")
        assert product.title is None
