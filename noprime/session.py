"""
Browser Session

Composition root: wires one coordinator and one page controller per
retailer tab onto a shared message bus, and exposes the host events that
drive them (tab opened, full and soft navigation, tab closed, toolbar
click, popup lookup).

Usage:
    session = BrowserSession()
    await session.start()
    tab = await session.open_tab("https://www.amazon.com/dp/B0C1234567", html)
    await session.settle()
    state = await session.describe_tab(tab.id)
"""

import logging
from typing import Any, Dict, Optional

from .common.config_loader import load_settings
from .coordinator import Coordinator
from .controller import PageController
from .host import MemoryStorage, Page, Tab, TabRegistry, Toolbar
from .host.toolbar import Badge
from .messaging import MessageBus, messages
from .models import DetectionPayload
from .resolution import BrandResolver

logger = logging.getLogger(__name__)


class BrowserSession:
    """One browser profile: coordinator, open tabs and their controllers."""

    def __init__(
        self,
        resolver: Optional[BrandResolver] = None,
        sync_storage: Optional[MemoryStorage] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the session.

        Args:
            resolver: Brand resolver (if None, built from config)
            sync_storage: Durable storage for the enabled flag (default: in memory)
            settings: Runtime settings (if None, loads from config)
        """
        self.settings = settings if settings is not None else load_settings()
        retailer = self.settings.get('retailer', {})

        self.resolver = resolver or BrandResolver(
            excluded_search_term=retailer.get('excluded_search_term', "-amazon")
        )
        self.product_path_pattern = retailer.get('product_path_pattern')

        self.bus = MessageBus()
        self.tabs = TabRegistry()
        self.toolbar = Toolbar()
        self.sync_storage = sync_storage if sync_storage is not None else MemoryStorage()
        self.session_storage = MemoryStorage()
        self.coordinator = Coordinator(
            self.bus, self.sync_storage, self.session_storage,
            self.toolbar, self.tabs, settings=self.settings,
        )
        self.controllers: Dict[int, PageController] = {}

    async def start(self) -> None:
        await self.coordinator.start()

    async def open_tab(self, url: str, html: str = "") -> Tab:
        """
        Open a tab and load a page in it.

        A controller is attached only on retailer storefront addresses.

        Returns:
            The new Tab
        """
        tab = self.tabs.create(url)
        logger.debug("Opened tab %s: %s", tab.id, url)
        await self._attach(tab.id, url, html)
        return tab

    async def navigate(self, tab_id: int, url: str, html: str = "") -> None:
        """Full navigation: the old page and its controller go away."""
        await self._detach(tab_id)
        self.tabs.update(tab_id, url)
        await self.coordinator.on_tab_updated(tab_id, url)
        await self._attach(tab_id, url, html)

    async def soft_navigate(self, tab_id: int, url: str, html: Optional[str] = None) -> None:
        """In-page navigation: address (and optionally content) change, no reload."""
        self.tabs.update(tab_id, url)
        await self.coordinator.on_tab_updated(tab_id, url)
        controller = self.controllers.get(tab_id)
        if controller is not None:
            await controller.page.soft_navigate(url, html)

    async def close_tab(self, tab_id: int) -> None:
        await self._detach(tab_id)
        self.tabs.remove(tab_id)
        await self.coordinator.on_tab_removed(tab_id)
        logger.debug("Closed tab %s", tab_id)

    async def click_toolbar(self) -> bool:
        """Toggle the extension. Returns the new enabled flag."""
        return await self.coordinator.toggle()

    def dismiss(self, tab_id: int) -> None:
        """Click the banner's dismiss button in a tab."""
        controller = self.controllers.get(tab_id)
        if controller is not None:
            controller.dismiss()

    async def query_tab(self, tab_id: int) -> Optional[Dict[str, Any]]:
        """
        Ask a tab's page for a fresh detection.

        Raises:
            MessageDeliveryError: If the tab has no controller
        """
        return await self.bus.send_to_tab(tab_id, messages.query_product())

    async def describe_tab(self, tab_id: int) -> Optional[DetectionPayload]:
        """Cached detection for a tab, as a popup would show it."""
        data = await self.bus.request_coordinator(messages.get_product(tab_id))
        return DetectionPayload.from_dict(data) if data else None

    async def settle(self) -> None:
        """Wait for queued page-to-coordinator messages."""
        await self.bus.drain()

    def page(self, tab_id: int) -> Optional[Page]:
        controller = self.controllers.get(tab_id)
        return controller.page if controller else None

    def badge(self, tab_id: int) -> Badge:
        return self.toolbar.get_badge(tab_id)

    async def _attach(self, tab_id: int, url: str, html: str) -> None:
        if not self.coordinator.is_retailer_url(url):
            return
        controller = PageController(
            Page(url, html),
            self.bus,
            self.sync_storage,
            self.resolver,
            tab_id,
            product_path_pattern=self.product_path_pattern,
        )
        self.controllers[tab_id] = controller
        await controller.start()

    async def _detach(self, tab_id: int) -> None:
        controller = self.controllers.pop(tab_id, None)
        if controller is not None:
            await controller.stop()
