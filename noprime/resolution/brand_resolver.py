"""
Brand Resolver

Resolves a raw brand string scraped from a product page to a store, using
multiple strategies (first match wins):
1. Exact match against canonical catalog keys
2. Alias match (variant spelling -> canonical key)
3. Whole-word match of a canonical key inside the raw string
   (e.g. "Nike, Inc." -> "nike"), walking the catalog in file order
4. Alternate retailer for brands without their own store

Also builds the outbound URLs offered in the banner.
"""

import re
from typing import List, Optional, Pattern, Tuple

from ..catalog import BrandCatalog, load_brand_catalog
from ..common.constants import (
    QUERY_PLACEHOLDER,
    STORE_QUERY_MAX_CHARS,
    WEB_QUERY_MAX_CHARS,
)
from ..common.text_utils import encode_uri_component, truncate
from ..models import ResolvedMatch


class BrandResolver:
    """
    Maps noisy brand strings to catalog stores and builds redirect URLs.

    Usage:
        resolver = BrandResolver()
        match = resolver.lookup_brand("Nike, Inc.")
        url = resolver.build_redirect_url(match, "Air Zoom Pegasus 40")
        # Returns: "https://www.nike.com/w?q=Air%20Zoom%20Pegasus%2040"
    """

    WEB_SEARCH_URL = "https://duckduckgo.com/?q={query}"
    BARNES_NOBLE_ISBN_URL = "https://www.barnesandnoble.com/w/?ean={isbn}"
    BARNES_NOBLE_SEARCH_URL = "https://www.barnesandnoble.com/s/{query}"

    # Suspect-name heuristic needs at least this many letters to judge
    MIN_SUSPECT_LETTERS = 4

    def __init__(self, catalog: Optional[BrandCatalog] = None, excluded_search_term: str = "-amazon"):
        """
        Initialize the resolver.

        Args:
            catalog: Brand catalog. If None, loads from config.
            excluded_search_term: Negative term appended to web searches
                so results skip the origin retailer
        """
        self.catalog = catalog if catalog is not None else load_brand_catalog()
        self.excluded_search_term = excluded_search_term

        # A key matches as a whole word: bounded by the string edges or by a
        # non-word character (whitespace, comma, period, other punctuation).
        self._word_patterns: List[Tuple[str, Pattern]] = [
            (key, re.compile(rf"(?<!\w){re.escape(key)}(?!\w)"))
            for key in self.catalog.stores
        ]

    def lookup_brand(self, raw_brand: Optional[str]) -> Optional[ResolvedMatch]:
        """
        Resolve a raw brand string to a store.

        Args:
            raw_brand: Brand text as scraped (any case, may carry suffixes)

        Returns:
            ResolvedMatch, or None if no strategy matched

        Example:
            >>> resolver.lookup_brand("NIKE").brand
            'nike'
            >>> resolver.lookup_brand("Amazon Basics") is None
            True
        """
        if not raw_brand or not raw_brand.strip():
            return None

        key = raw_brand.strip().lower()
        stores = self.catalog.stores

        # 1. Exact
        entry = stores.get(key)
        if entry is not None:
            return ResolvedMatch.from_entry(key, entry)

        # 2. Alias (dangling aliases are not matches)
        canonical = self.catalog.aliases.get(key)
        if canonical is not None and canonical in stores:
            return ResolvedMatch.from_entry(canonical, stores[canonical])

        # 3. Whole word, first key in catalog order wins
        for catalog_key, pattern in self._word_patterns:
            if pattern.search(key):
                return ResolvedMatch.from_entry(catalog_key, stores[catalog_key])

        # 4. Alternate retailer
        entry = self.catalog.alternate_retailers.get(key)
        if entry is not None:
            return ResolvedMatch.from_entry(key, entry)

        return None

    def build_redirect_url(self, match: Optional[ResolvedMatch], product_title: Optional[str]) -> Optional[str]:
        """
        Build the store link for a resolved match.

        Deep-links into the store's search when it has a template and a
        title is known; otherwise links to the store homepage.

        Args:
            match: Result of lookup_brand()
            product_title: Product title from the page

        Returns:
            Absolute URL, or None when match is None
        """
        if match is None:
            return None

        query = truncate(product_title, STORE_QUERY_MAX_CHARS)
        if match.search_template and query:
            return match.search_template.replace(QUERY_PLACEHOLDER, encode_uri_component(query))

        return match.url

    def build_search_fallback_url(self, brand: Optional[str], product_title: Optional[str]) -> str:
        """
        Build a web search for a product whose brand has no known store.

        The query is `"<brand>" <title prefix> -<retailer>`.
        """
        parts = []
        if brand:
            parts.append(f'"{brand}"')
        if product_title:
            # Prefix kept as cut, trailing space included
            parts.append(product_title[:WEB_QUERY_MAX_CHARS])
        parts.append(self.excluded_search_term)

        return self.WEB_SEARCH_URL.replace(QUERY_PLACEHOLDER, encode_uri_component(" ".join(parts)))

    def build_barnes_noble_url(self, isbn: Optional[str], title: Optional[str]) -> str:
        """Deep-link a book by ISBN, or search the bookseller by title."""
        if isbn:
            return self.BARNES_NOBLE_ISBN_URL.format(isbn=encode_uri_component(isbn))

        query = encode_uri_component(truncate(title, STORE_QUERY_MAX_CHARS))
        return self.BARNES_NOBLE_SEARCH_URL.replace(QUERY_PLACEHOLDER, query)

    def build_local_bookstore_url(self, title: Optional[str]) -> str:
        """Web search for local bookstores carrying the title."""
        query = f'"{truncate(title, WEB_QUERY_MAX_CHARS)}" local bookstores'
        return self.WEB_SEARCH_URL.replace(QUERY_PLACEHOLDER, encode_uri_component(query))

    def is_suspect_brand(self, name: Optional[str]) -> bool:
        """
        Flag brand names that look like generated marketplace seller names.

        Cheap marketplace-only sellers often register their name in capitals
        ("BSTOEM", "TGKXT"). Legitimate all-caps brands (LEGO, ASUS) are in
        the catalog and resolve before this check is reached.

        Args:
            name: Brand name as scraped

        Returns:
            True if the name has at least four letters, all upper-case
        """
        if not name:
            return False

        letters = re.sub(r"[^a-zA-Z]", "", name)
        if len(letters) < self.MIN_SUSPECT_LETTERS:
            return False

        return letters == letters.upper()

    def is_disreputable(self, name: Optional[str]) -> bool:
        """Check a brand name against the catalog's low-trust seller list."""
        if not name:
            return False
        return name.strip().lower() in self.catalog.disreputable
