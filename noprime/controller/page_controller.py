"""
Page Controller

Runs in each retailer tab. On load it extracts the product, resolves a
redirect, renders the banner and reports the detection to the
coordinator. It then follows the page through soft navigations, user
dismissal and enable/disable broadcasts.

States:
    uninjected            no banner shown (initial)
    injected(match_type)  banner for match_type shown

Transitions:
    load              -> injected(match_type), unless disabled or not a product
    soft navigation   -> uninjected, then load (product addresses only)
                      other addresses: no change, unless the new document
                      dropped the banner (-> uninjected)
    dismiss           -> uninjected
    ENABLED_CHANGED   -> uninjected (disable) / load if no banner (enable)
    QUERY_PRODUCT     -> no change; replies with a fresh detection
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Optional, Pattern, Union

from ..common.constants import ENABLED_DEFAULT, ENABLED_KEY
from ..extraction import PageExtractor
from ..host.page import Page
from ..host.storage import MemoryStorage
from ..messaging import MessageBus, messages
from ..models import DetectionPayload, MatchType
from ..resolution import BrandResolver, classify_product
from .banner import BannerRenderer

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_PATH = re.compile(r"/(?:dp|gp/product)/[A-Z0-9]{10}", re.IGNORECASE)


class BannerState(str, Enum):
    UNINJECTED = "uninjected"
    INJECTED = "injected"


class PageController:
    """
    Per-page controller.

    Usage:
        controller = PageController(page, bus, sync_storage, resolver, tab_id=3)
        await controller.start()
        ...
        controller.dismiss()
        await controller.stop()
    """

    def __init__(
        self,
        page: Page,
        bus: MessageBus,
        storage: MemoryStorage,
        resolver: BrandResolver,
        tab_id: int,
        extractor_factory: Callable[[Page], PageExtractor] = PageExtractor,
        renderer: Optional[BannerRenderer] = None,
        product_path_pattern: Union[str, Pattern, None] = None,
    ):
        """
        Initialize the controller.

        Args:
            page: The page this controller runs in
            bus: Message bus to the coordinator
            storage: Durable storage holding the enabled flag
            resolver: Brand resolver
            tab_id: Host tab id, sent as the sender of detections
            extractor_factory: Builds an extractor for the page
            renderer: Banner renderer
            product_path_pattern: Regex for product page paths
        """
        self.page = page
        self.bus = bus
        self.storage = storage
        self.resolver = resolver
        self.tab_id = tab_id
        self.extractor_factory = extractor_factory
        self.renderer = renderer or BannerRenderer()

        if product_path_pattern is None:
            self.product_path = DEFAULT_PRODUCT_PATH
        elif isinstance(product_path_pattern, str):
            self.product_path = re.compile(product_path_pattern, re.IGNORECASE)
        else:
            self.product_path = product_path_pattern

        self.state = BannerState.UNINJECTED
        self.match_type: Optional[MatchType] = None

        # Re-entrancy guard against duplicate load events
        self._initialized = False
        self._last_path = page.path

    async def start(self) -> None:
        """Attach to the bus and the page, then run the initial load."""
        self.bus.register_tab(self.tab_id, self.handle_message)
        self.page.add_address_listener(self._on_address_change)
        await self.load()

    async def stop(self) -> None:
        """Detach from the bus and the page (tab closed or reloaded)."""
        self.bus.unregister_tab(self.tab_id)
        self.page.remove_address_listener(self._on_address_change)

    @property
    def banner_shown(self) -> bool:
        return self.renderer.find(self.page) is not None

    async def load(self) -> None:
        """Detect the product and show its banner, once per initialization."""
        if self._initialized:
            return
        self._initialized = True

        values = await self.storage.get({ENABLED_KEY: ENABLED_DEFAULT})
        if not values[ENABLED_KEY]:
            logger.debug("Tab %s: disabled, not injecting", self.tab_id)
            return

        payload = self.detect()
        if payload is None:
            logger.debug("Tab %s: %s is not a product page", self.tab_id, self.page.url)
            return

        self.renderer.render(self.page, payload)
        self.state = BannerState.INJECTED
        self.match_type = payload.match_type
        logger.info("Tab %s: %s banner for %r", self.tab_id, payload.match_type.value, payload.product.title)

        self.bus.post_to_coordinator(messages.product_detected(payload.to_dict()), tab_id=self.tab_id)

    def detect(self) -> Optional[DetectionPayload]:
        """Extract and classify the current page, without touching the DOM."""
        product = self.extractor_factory(self.page).extract_product_info()
        return classify_product(product, self.resolver)

    async def reload(self) -> None:
        """Clear the guard and run load again from the uninjected state."""
        self._reset()
        self._initialized = False
        await self.load()

    def dismiss(self) -> None:
        """User closed the banner."""
        self._reset()

    async def handle_message(self, message: dict) -> Any:
        """
        Handle a message from the coordinator.

        Returns:
            Reply for QUERY_PRODUCT (payload dict or None), else None
        """
        kind = message.get("type")

        if kind == messages.QUERY_PRODUCT:
            payload = self.detect()
            if payload is None:
                return None
            data = payload.to_dict()
            # Refresh the coordinator's cache as a side effect
            self.bus.post_to_coordinator(messages.product_detected(data), tab_id=self.tab_id)
            return data

        if kind == messages.ENABLED_CHANGED:
            if message.get("enabled"):
                if not self.banner_shown:
                    await self.reload()
            else:
                self._reset()
            return None

        logger.debug("Tab %s: ignoring message %r", self.tab_id, kind)
        return None

    async def _on_address_change(self, url: str) -> None:
        path = self.page.path
        if path == self._last_path:
            return
        self._last_path = path

        if self.product_path.search(path):
            await self.reload()
        elif self.state is BannerState.INJECTED and not self.banner_shown:
            # Replacement document came without the banner
            self._reset()

    def _reset(self) -> None:
        self.renderer.remove(self.page)
        self.state = BannerState.UNINJECTED
        self.match_type = None
