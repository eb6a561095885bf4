"""
Brand catalog data and maintenance tools.

Modules:
    brand_catalog - BrandCatalog tables, validation and loading
    link_checker - LinkChecker for periodic store URL health checks
"""

from .brand_catalog import BrandCatalog, CatalogError, load_brand_catalog
from .link_checker import LinkChecker, LinkResult, find_domain_mismatches

__all__ = [
    'BrandCatalog',
    'CatalogError',
    'load_brand_catalog',
    'LinkChecker',
    'LinkResult',
    'find_domain_mismatches',
]
