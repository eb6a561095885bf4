"""
Page Extractor

Scrapes brand, title, book classification and ISBN from a retailer
product page. Each field tries an ordered list of sources and keeps the
first non-empty result:

- Title: title heading selectors
- Brand: byline link -> detail table/bullets ("Brand", "Manufacturer")
  -> JSON-LD brand
- Book: breadcrumb, book landmarks, ISBN detail field, format switcher
  (any one signal is enough)
- ISBN (books only): ISBN-13 field -> ISBN-10 field -> 10-character
  identifier in the page address
"""

import logging
import re

from bs4 import BeautifulSoup

from ..host.page import Page
from ..models import ProductInfo
from .parsers import HTMLContentParser, StructuredDataParser

logger = logging.getLogger(__name__)


class PageExtractor:
    """
    Extracts a ProductInfo record from a page.

    Usage:
        extractor = PageExtractor(page)
        product = extractor.extract_product_info()
        if product.title is None:
            ...  # not a product page
    """

    BRAND_LABELS = ("Brand", "Manufacturer")
    ISBN_LABELS = ("ISBN-13", "ISBN-10", "ISBN")

    _ISBN_CHARS = re.compile(r'[^0-9X]', re.IGNORECASE)
    _ADDRESS_ISBN = re.compile(r'/(?:dp|gp/product)/([0-9]{9}[0-9X])(?:[/?]|$)', re.IGNORECASE)

    def __init__(self, page: Page):
        """
        Initialize the extractor.

        Args:
            page: Loaded page (address + parsed DOM)
        """
        self.page = page
        self.html_parser = HTMLContentParser(page.soup)
        self.structured_parser = StructuredDataParser()

    @classmethod
    def from_html(cls, html: str, url: str) -> "PageExtractor":
        """Build an extractor for raw markup, e.g. a saved page."""
        return cls(Page(url, html))

    @property
    def soup(self) -> BeautifulSoup:
        return self.page.soup

    def extract_product_info(self) -> ProductInfo:
        """
        Scrape all product metadata from the page.

        Returns:
            ProductInfo (title None when the page is not a product page)
        """
        is_book = self.detect_book()
        product = ProductInfo(
            url=self.page.url,
            title=self.extract_title(),
            brand=self.extract_brand(),
            is_book=is_book,
            isbn=self.extract_isbn() if is_book else None,
        )
        logger.debug("Extracted %s: brand=%r title=%r book=%s isbn=%r",
                     product.url, product.brand, product.title, product.is_book, product.isbn)
        return product

    def extract_title(self):
        return self.html_parser.extract_title() or None

    def extract_brand(self):
        """
        Extract the brand / manufacturer name.

        Returns:
            Brand name or None
        """
        # 1. Byline link
        brand = self.html_parser.extract_byline_brand()
        if brand:
            return brand

        # 2. Product details table / bullets
        brand = self.html_parser.extract_detail_field(*self.BRAND_LABELS)
        if brand:
            return brand

        # 3. JSON-LD (malformed blocks are skipped by the parser)
        blocks = self.structured_parser.parse(self.soup)
        brand = self.structured_parser.extract_brand(blocks)
        return brand or None

    def detect_book(self) -> bool:
        """
        Detect whether the product is a book.

        Returns:
            True if any book signal is present
        """
        parser = self.html_parser
        return (
            parser.has_books_breadcrumb()
            or parser.has_book_landmarks()
            or bool(parser.extract_detail_field(*self.ISBN_LABELS))
            or parser.has_book_formats()
        )

    def extract_isbn(self):
        """
        Extract ISBN-13 (preferred) or ISBN-10.

        Falls back to the page address: book product IDs are often the
        ISBN-10 itself.

        Returns:
            ISBN digits (with checksum X if any) or None
        """
        for label in ("ISBN-13", "ISBN-10"):
            value = self.html_parser.extract_detail_field(label)
            if value:
                isbn = self._ISBN_CHARS.sub('', value).upper()
                if isbn:
                    return isbn

        match = self._ADDRESS_ISBN.search(self.page.path)
        if match:
            return match.group(1).upper()

        return None
