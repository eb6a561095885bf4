"""
Per-page controller.

Modules:
    page_controller - PageController state machine
    banner - BannerRenderer (banner markup variants)
"""

from .banner import BANNER_ID, BannerRenderer
from .page_controller import BannerState, PageController

__all__ = [
    'BANNER_ID',
    'BannerRenderer',
    'BannerState',
    'PageController',
]
