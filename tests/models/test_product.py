"""Tests for noprime/models/product.py"""

import pytest

from noprime.models import DetectionPayload, MatchType, ProductInfo, ResolvedMatch, StoreEntry


class TestStoreEntry:
    def test_direct_store(self):
        entry = StoreEntry(url="https://www.nike.com", search_template="https://www.nike.com/w?q={query}")
        assert entry.store is None
        assert entry.is_alternate is False

    def test_alternate_retailer(self):
        entry = StoreEntry(url="https://www.target.com", store="Target")
        assert entry.is_alternate is True

    def test_frozen(self):
        entry = StoreEntry(url="https://www.nike.com")
        with pytest.raises(AttributeError):
            entry.url = "https://example.com"


class TestResolvedMatch:
    def test_from_entry_copies_fields(self):
        entry = StoreEntry(url="https://www.target.com", search_template="https://www.target.com/s?searchTerm={query}",
                           store="Target")
        match = ResolvedMatch.from_entry("hasbro", entry)
        assert match.brand == "hasbro"
        assert match.url == entry.url
        assert match.search_template == entry.search_template
        assert match.store == "Target"
        assert match.is_alternate is True


class TestProductInfo:
    def test_defaults(self):
        product = ProductInfo(url="https://www.amazon.com/dp/B0C1234567")
        assert product.title is None
        assert product.brand is None
        assert product.is_book is False
        assert product.isbn is None

    def test_missing_title_is_not_product_page(self):
        assert ProductInfo(url="https://www.amazon.com/s?k=x").is_product_page is False
        assert ProductInfo(url="https://www.amazon.com/dp/B0C1234567", title="").is_product_page is False

    def test_title_makes_product_page(self, brand_product):
        assert brand_product.is_product_page is True

    def test_isbn_requires_book(self):
        with pytest.raises(ValueError, match="only set for books"):
            ProductInfo(url="https://www.amazon.com/dp/B0C1234567", title="X", isbn="9780393356687")

    def test_to_dict_uses_camel_case(self, book_product):
        data = book_product.to_dict()
        assert data == {
            "brand": "Richard Powers",
            "title": "The Overstory",
            "url": "https://www.amazon.com/dp/0143127748",
            "isBook": True,
            "isbn": "9780393356687",
        }

    def test_from_dict_round_trip(self, book_product):
        assert ProductInfo.from_dict(book_product.to_dict()) == book_product


class TestDetectionPayload:
    def test_to_dict_merges_product_fields(self, brand_product):
        payload = DetectionPayload(
            product=brand_product,
            redirect_url="https://www.nike.com/w?q=Air",
            match_type=MatchType.BRAND,
            store_brand="nike",
        )
        data = payload.to_dict()
        assert data["brand"] == "Nike"
        assert data["redirectUrl"] == "https://www.nike.com/w?q=Air"
        assert data["matchType"] == "brand"
        assert data["storeBrand"] == "nike"
        assert data["storeName"] is None
        assert data["secondaryUrl"] is None

    def test_from_dict(self, brand_product):
        payload = DetectionPayload(
            product=brand_product,
            redirect_url="https://duckduckgo.com/?q=x",
            match_type=MatchType.SEARCH_FALLBACK,
        )
        restored = DetectionPayload.from_dict(payload.to_dict())
        assert restored == payload
        assert restored.match_type is MatchType.SEARCH_FALLBACK

    def test_unknown_match_type_raises(self):
        with pytest.raises(ValueError):
            DetectionPayload.from_dict({"url": "u", "title": "t", "matchType": "store"})


class TestMatchType:
    def test_values(self):
        assert [m.value for m in MatchType] == ["brand", "search-fallback", "suspect-brand", "book"]

    def test_compares_to_string(self):
        assert MatchType.SUSPECT_BRAND == "suspect-brand"
