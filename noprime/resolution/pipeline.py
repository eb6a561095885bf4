"""
Detection Pipeline

Classifies an extracted product into a match type and picks its redirect:
1. Books go to booksellers (Barnes & Noble, local bookstore search)
2. Catalog matches go to the brand's store or an alternate retailer
3. Low-trust or generated-looking seller names get the suspect banner
4. Everything else gets a web search
Catalog resolution runs before the suspect check, so capitalized brands
that are in the catalog (LEGO, ASUS) are never flagged.
"""

import logging
from typing import Optional

from ..models import DetectionPayload, MatchType, ProductInfo
from .brand_resolver import BrandResolver

logger = logging.getLogger(__name__)


def classify_product(product: ProductInfo, resolver: BrandResolver) -> Optional[DetectionPayload]:
    """
    Run resolution and classification for one product.

    Args:
        product: Output of PageExtractor.extract_product_info()
        resolver: Brand resolver

    Returns:
        DetectionPayload, or None if the page is not a product page
    """
    if not product.is_product_page:
        return None

    if product.is_book:
        return DetectionPayload(
            product=product,
            redirect_url=resolver.build_barnes_noble_url(product.isbn, product.title),
            match_type=MatchType.BOOK,
            secondary_url=resolver.build_local_bookstore_url(product.title),
        )

    match = resolver.lookup_brand(product.brand)
    if match is not None:
        logger.debug("Brand %r resolved to %r", product.brand, match.brand)
        return DetectionPayload(
            product=product,
            redirect_url=resolver.build_redirect_url(match, product.title),
            match_type=MatchType.BRAND,
            store_brand=match.brand,
            store_name=match.store,
        )

    fallback_url = resolver.build_search_fallback_url(product.brand, product.title)
    if resolver.is_disreputable(product.brand) or resolver.is_suspect_brand(product.brand):
        match_type = MatchType.SUSPECT_BRAND
    else:
        match_type = MatchType.SEARCH_FALLBACK

    logger.debug("Brand %r unresolved, classified as %s", product.brand, match_type.value)
    return DetectionPayload(
        product=product,
        redirect_url=fallback_url,
        match_type=match_type,
    )
