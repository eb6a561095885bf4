"""
Product and store data models.

Pure data classes for scraped product information, catalog store records
and the detection payload exchanged between pages and the coordinator.
Wire dictionaries use camelCase keys; Python attributes use snake_case.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class MatchType(str, Enum):
    """Outcome of the resolution pipeline; selects banner and badge variant."""
    BRAND = "brand"
    SEARCH_FALLBACK = "search-fallback"
    SUSPECT_BRAND = "suspect-brand"
    BOOK = "book"


@dataclass(frozen=True)
class StoreEntry:
    """
    Where a brand can be bought outside the retailer.

    Direct stores carry only url/search_template. Alternate-retailer records
    also carry the retailer's display name in `store`.
    """
    url: str
    search_template: Optional[str] = None
    store: Optional[str] = None

    @property
    def is_alternate(self) -> bool:
        return bool(self.store)


@dataclass(frozen=True)
class ResolvedMatch:
    """A store entry together with the catalog key that resolved it."""
    brand: str
    url: str
    search_template: Optional[str] = None
    store: Optional[str] = None

    @classmethod
    def from_entry(cls, brand: str, entry: StoreEntry) -> "ResolvedMatch":
        return cls(
            brand=brand,
            url=entry.url,
            search_template=entry.search_template,
            store=entry.store,
        )

    @property
    def is_alternate(self) -> bool:
        return bool(self.store)


@dataclass
class ProductInfo:
    """
    Normalized metadata scraped from one product page.

    A missing title means the page is not a product page; every consumer
    stops processing when it sees one.
    """
    url: str
    title: Optional[str] = None
    brand: Optional[str] = None
    is_book: bool = False
    isbn: Optional[str] = None

    def __post_init__(self):
        """Validate field coupling after initialization."""
        if self.isbn and not self.is_book:
            raise ValueError("ISBN is only set for books")

    @property
    def is_product_page(self) -> bool:
        return bool(self.title)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brand": self.brand,
            "title": self.title,
            "url": self.url,
            "isBook": self.is_book,
            "isbn": self.isbn,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductInfo":
        return cls(
            url=data.get("url", ""),
            title=data.get("title"),
            brand=data.get("brand"),
            is_book=bool(data.get("isBook", False)),
            isbn=data.get("isbn"),
        )


@dataclass
class DetectionPayload:
    """
    A product plus the redirect decision made for it.

    This is the record a page sends with PRODUCT_DETECTED and the record
    the coordinator caches per tab (see TabState).

    Fields beyond the product:
    - redirect_url: primary banner link
    - match_type: which banner/badge variant applies
    - store_brand: canonical catalog key, for brand matches
    - store_name: alternate retailer display name, when the match is one
    - secondary_url: extra link (local bookstore search for books)
    """
    product: ProductInfo
    redirect_url: str
    match_type: MatchType
    store_brand: Optional[str] = None
    store_name: Optional[str] = None
    secondary_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.product.to_dict()
        data.update({
            "redirectUrl": self.redirect_url,
            "matchType": self.match_type.value,
            "storeBrand": self.store_brand,
            "storeName": self.store_name,
            "secondaryUrl": self.secondary_url,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectionPayload":
        return cls(
            product=ProductInfo.from_dict(data),
            redirect_url=data.get("redirectUrl", ""),
            match_type=MatchType(data["matchType"]),
            store_brand=data.get("storeBrand"),
            store_name=data.get("storeName"),
            secondary_url=data.get("secondaryUrl"),
        )


# The coordinator's per-tab record is the last payload detected in that tab.
TabState = DetectionPayload
