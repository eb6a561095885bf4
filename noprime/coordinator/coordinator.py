"""
Coordinator

Single process-wide component that:
- owns the enabled flag (durable storage) and the toolbar icon/title
- caches the last detection per tab (session storage, key "tab_<id>")
- paints a per-tab badge from the cached match type
- broadcasts enable/disable to every open retailer tab

Tab state lifecycle:
    PRODUCT_DETECTED      -> cache payload (last one wins), paint badge if enabled
    GET_PRODUCT           -> cached payload or None
    tab removed           -> drop cache and badge
    tab to non-product URL-> drop cache, clear badge
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..common.config_loader import load_settings
from ..common.constants import ENABLED_DEFAULT, ENABLED_KEY
from ..host.storage import MemoryStorage
from ..host.tabs import TabRegistry, url_matches
from ..host.toolbar import Toolbar
from ..messaging import MessageBus, MessageDeliveryError, MessageSender, messages
from ..models import MatchType

logger = logging.getLogger(__name__)


class Coordinator:
    """
    Background coordinator.

    Usage:
        coordinator = Coordinator(bus, sync_storage, session_storage, toolbar, tabs)
        await coordinator.start()
        await coordinator.toggle()          # toolbar click
        await coordinator.on_tab_removed(tab_id)
    """

    def __init__(
        self,
        bus: MessageBus,
        sync_storage: MemoryStorage,
        session_storage: MemoryStorage,
        toolbar: Toolbar,
        tabs: TabRegistry,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            bus: Message bus to page controllers
            sync_storage: Durable storage (enabled flag)
            session_storage: Session storage (per-tab detections)
            toolbar: Toolbar button
            tabs: Open tabs
            settings: Runtime settings (if None, loads from config)
        """
        self.bus = bus
        self.sync_storage = sync_storage
        self.session_storage = session_storage
        self.toolbar = toolbar
        self.tabs = tabs

        settings = settings if settings is not None else load_settings()
        retailer = settings.get('retailer', {})
        toolbar_settings = settings.get('toolbar', {})

        self.url_patterns: List[str] = list(retailer.get('url_patterns', []))
        self.product_path = re.compile(
            retailer.get('product_path_pattern', r"/(?:dp|gp/product)/[A-Z0-9]{10}"),
            re.IGNORECASE,
        )
        self.icons: Dict[str, Dict[int, str]] = toolbar_settings.get('icons', {})
        self.titles: Dict[str, str] = toolbar_settings.get('titles', {})
        self.badges: Dict[str, Dict[str, str]] = toolbar_settings.get('badges', {})

    async def start(self) -> None:
        """Register on the bus and show the icon for the stored flag."""
        self.bus.register_coordinator(self.handle_message)
        await self.apply_icon_state()

    async def is_enabled(self) -> bool:
        values = await self.sync_storage.get({ENABLED_KEY: ENABLED_DEFAULT})
        return bool(values[ENABLED_KEY])

    async def apply_icon_state(self) -> None:
        self._show_enabled(await self.is_enabled())

    async def toggle(self) -> bool:
        """
        Flip the enabled flag (toolbar click).

        Persists the flag, updates icon and title, then tells every open
        retailer tab. Badges are repainted from cache when enabling and
        cleared when disabling; pages are not re-queried.

        Returns:
            The new flag value
        """
        enabled = not await self.is_enabled()
        await self.sync_storage.set({ENABLED_KEY: enabled})
        self._show_enabled(enabled)
        logger.info("NoPrime %s", "enabled" if enabled else "disabled")

        for tab in await self.tabs.query(self.url_patterns):
            try:
                await self.bus.send_to_tab(tab.id, messages.enabled_changed(enabled))
            except MessageDeliveryError as e:
                logger.debug("Tab %s did not take ENABLED_CHANGED: %s", tab.id, e)
            except Exception as e:
                logger.warning("Tab %s failed to handle ENABLED_CHANGED: %s", tab.id, e)

            if enabled:
                product = await self.get_product(tab.id)
                if product:
                    self._paint_badge(tab.id, product.get('matchType'))
            else:
                self._clear_badge(tab.id)

        return enabled

    async def handle_message(self, message: dict, sender: MessageSender) -> Any:
        """
        Handle a message from a page or popup.

        Returns:
            Cached payload for GET_PRODUCT, else None
        """
        kind = message.get("type")

        if kind == messages.PRODUCT_DETECTED and sender.tab_id is not None:
            await self.on_product_detected(sender.tab_id, message.get("payload") or {})
            return None

        if kind == messages.GET_PRODUCT and message.get("tabId") is not None:
            return await self.get_product(message["tabId"])

        logger.debug("Ignoring message %r from tab %s", kind, sender.tab_id)
        return None

    async def on_product_detected(self, tab_id: int, payload: Dict[str, Any]) -> None:
        tab = self.tabs.get(tab_id)
        if tab is not None and not self.is_product_url(tab.url):
            # Detection from before the tab left product pages
            logger.debug("Tab %s: dropping detection, now at %s", tab_id, tab.url)
            return

        await self.session_storage.set({self._storage_key(tab_id): payload})
        if not await self.is_enabled():
            return
        self._paint_badge(tab_id, payload.get('matchType'))

    async def get_product(self, tab_id: int) -> Optional[Dict[str, Any]]:
        key = self._storage_key(tab_id)
        values = await self.session_storage.get(key)
        return values.get(key) or None

    async def on_tab_removed(self, tab_id: int) -> None:
        await self.session_storage.remove(self._storage_key(tab_id))
        self.toolbar.clear_badge(tab_id)

    async def on_tab_updated(self, tab_id: int, url: Optional[str]) -> None:
        """Drop cached state when a tab leaves product pages."""
        if not url:
            return
        if not self.is_product_url(url):
            await self.session_storage.remove(self._storage_key(tab_id))
            self._clear_badge(tab_id)

    def is_product_url(self, url: str) -> bool:
        return bool(self.product_path.search(url))

    def is_retailer_url(self, url: str) -> bool:
        return url_matches(url, self.url_patterns)

    def _show_enabled(self, enabled: bool) -> None:
        state = "enabled" if enabled else "disabled"
        self.toolbar.set_icon(self.icons.get(state, {}))
        self.toolbar.set_title(self.titles.get(state, ""))

    def _paint_badge(self, tab_id: int, match_type: Optional[str]) -> None:
        style = self.badge_style(match_type)
        self.toolbar.set_badge_background_color(tab_id, style.get('color', ''))
        self.toolbar.set_badge_text(tab_id, style.get('text', ''))

    def _clear_badge(self, tab_id: int) -> None:
        self.toolbar.set_badge_text(tab_id, "")

    def badge_style(self, match_type: Optional[str]) -> Dict[str, str]:
        """Badge text/color for a match type; brand and book use the default."""
        if match_type in (MatchType.SUSPECT_BRAND.value, MatchType.SEARCH_FALLBACK.value):
            style = self.badges.get(match_type)
            if style:
                return style
        return self.badges.get('default', {})

    @staticmethod
    def _storage_key(tab_id: int) -> str:
        return f"tab_{tab_id}"
