"""
Data models for product detection.

This module contains pure data classes with no business logic.
"""

from .product import (
    DetectionPayload,
    MatchType,
    ProductInfo,
    ResolvedMatch,
    StoreEntry,
    TabState,
)

__all__ = [
    'DetectionPayload',
    'MatchType',
    'ProductInfo',
    'ResolvedMatch',
    'StoreEntry',
    'TabState',
]
