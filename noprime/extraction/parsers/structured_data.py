"""
Structured Data Parser

Extracts product information from JSON-LD structured data (schema.org).
Pages may embed several blocks, as a single object, a list, or an
"@graph" container. Blocks that fail to parse are skipped.
"""

import json
import logging
from typing import Any, Dict, List

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class StructuredDataParser:
    """
    Parses JSON-LD structured data from HTML pages.

    Usage:
        parser = StructuredDataParser()
        blocks = parser.parse(soup)
        brand = parser.extract_brand(blocks)
    """

    def parse(self, soup: BeautifulSoup) -> List[Any]:
        """
        Extract every JSON-LD block from the page.

        Args:
            soup: BeautifulSoup object of the page

        Returns:
            Parsed blocks in page order (malformed blocks omitted)
        """
        blocks = []
        for script in soup.find_all('script', type='application/ld+json'):
            text = script.string or script.get_text()
            if not text or not text.strip():
                continue
            try:
                blocks.append(json.loads(text))
            except (ValueError, RecursionError) as e:
                # ValueError covers JSONDecodeError; deep nesting overflows the decoder
                logger.debug("Skipping malformed JSON-LD block: %s", e)
                continue
        return blocks

    def extract_brand(self, blocks: List[Any]) -> str:
        """
        Extract brand name from structured data.

        The brand may be a string, a {"name": ...} object, or a nested
        {"brand": {"name": ...}} object; nodes inside lists and "@graph"
        containers are searched in order.

        Args:
            blocks: Output of parse()

        Returns:
            Brand name or empty string
        """
        for node in self._iter_nodes(blocks):
            brand = self._brand_name(node.get('brand'))
            if brand:
                return brand
        return ""

    def _iter_nodes(self, blocks: List[Any]):
        """
        Yield every dict node in blocks, expanding lists and @graph.

        Walks with an explicit stack of iterators so nesting depth is not
        bounded by the interpreter's recursion limit. Document order is kept.
        """
        stack = [iter(blocks)]
        while stack:
            block = next(stack[-1], _EXHAUSTED)
            if block is _EXHAUSTED:
                stack.pop()
            elif isinstance(block, list):
                stack.append(iter(block))
            elif isinstance(block, dict):
                yield block
                graph = block.get('@graph')
                if isinstance(graph, list):
                    stack.append(iter(graph))

    def _brand_name(self, brand_data: Any) -> str:
        if isinstance(brand_data, str):
            return self._clean_text(brand_data)
        if isinstance(brand_data, dict):
            nested = brand_data.get('brand')
            if isinstance(nested, dict) and isinstance(nested.get('name'), str):
                return self._clean_text(nested['name'])
            name = brand_data.get('name')
            if isinstance(name, str):
                return self._clean_text(name)
        return ""

    def _clean_text(self, text: str) -> str:
        """Clean and normalize text."""
        if not text:
            return ""
        return ' '.join(text.split()).strip()
