"""
Text Utilities

Helper functions for text cleanup and query encoding.
"""

from typing import Optional
from urllib.parse import quote

# Characters left unescaped by a browser's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not text:
        return ""
    return ' '.join(text.split()).strip()


def truncate(text: Optional[str], limit: int) -> str:
    """
    Take the first `limit` characters of text, then strip surrounding whitespace.

    Args:
        text: Source text (None is treated as empty)
        limit: Maximum number of characters kept before stripping

    Returns:
        Truncated, stripped text
    """
    if not text:
        return ""
    return text[:limit].strip()


def encode_uri_component(text: str) -> str:
    """
    Percent-encode text for use as a single URL component.

    Spaces become %20 and every reserved character is escaped, so the
    result can be dropped into a path segment or a query value as is.

    Example:
        >>> encode_uri_component("Foo Bar & Co")
        'Foo%20Bar%20%26%20Co'
    """
    return quote(text, safe=_URI_COMPONENT_SAFE)
