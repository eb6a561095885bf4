"""
Product metadata extraction from retailer pages.

Modules:
    page_extractor - PageExtractor (ProductInfo from a loaded page)
    parsers - Specialized parsers for different data sources
"""

from .page_extractor import PageExtractor
from .parsers import HTMLContentParser, StructuredDataParser

__all__ = [
    'PageExtractor',
    'HTMLContentParser',
    'StructuredDataParser',
]
