"""
Specialized parsers for product data extraction.

Each parser handles a specific data source:
- HTMLContentParser: HTML element extraction (title, byline, detail rows, book signals)
- StructuredDataParser: JSON-LD structured data (schema.org)
"""

from .html_parser import HTMLContentParser
from .structured_data import StructuredDataParser

__all__ = [
    'HTMLContentParser',
    'StructuredDataParser',
]
