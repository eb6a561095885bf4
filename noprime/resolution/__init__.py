"""
Brand resolution and redirect classification.

Modules:
    brand_resolver - BrandResolver (catalog lookup, redirect URL builders)
    pipeline - classify_product (product -> match type + redirect)
"""

from .brand_resolver import BrandResolver
from .pipeline import classify_product

__all__ = [
    'BrandResolver',
    'classify_product',
]
