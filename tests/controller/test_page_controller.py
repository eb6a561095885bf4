"""Tests for noprime/controller/page_controller.py"""

import pytest

from noprime.common.constants import ENABLED_KEY
from noprime.controller import BANNER_ID, BannerState, PageController
from noprime.extraction import PageExtractor
from noprime.host import MemoryStorage, Page
from noprime.messaging import MessageBus, messages
from noprime.models import MatchType

URL = "https://www.amazon.com/dp/B0C1234567"
OTHER_URL = "https://www.amazon.com/dp/B0D7654321"
TAB_ID = 4


def product_html(title="Air Zoom Pegasus 40", brand="Nike"):
    return (f'<html><body><span id="productTitle">{title}</span>'
            f'<a id="bylineInfo">Visit the {brand} Store</a></body></html>')


class Coordinator:
    """Records messages posted by the controller."""

    def __init__(self):
        self.received = []

    async def __call__(self, message, sender):
        self.received.append((message, sender.tab_id))

    @property
    def detections(self):
        return [m["payload"] for m, _ in self.received if m["type"] == messages.PRODUCT_DETECTED]


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def coordinator(bus):
    recorder = Coordinator()
    bus.register_coordinator(recorder)
    return recorder


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def make_controller(bus, coordinator, storage, resolver):
    def factory(url=URL, html=None, **kwargs):
        page = Page(url, product_html() if html is None else html)
        return PageController(page, bus, storage, resolver, TAB_ID, **kwargs)
    return factory


class TestLoad:
    @pytest.mark.asyncio
    async def test_injects_banner_and_reports(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await bus.drain()

        assert controller.state is BannerState.INJECTED
        assert controller.match_type is MatchType.BRAND
        assert controller.banner_shown
        assert len(coordinator.received) == 1
        payload = coordinator.detections[0]
        assert payload["storeBrand"] == "nike"
        assert payload["redirectUrl"] == "https://www.nike.com/w?q=Air%20Zoom%20Pegasus%2040"
        assert coordinator.received[0][1] == TAB_ID

    @pytest.mark.asyncio
    async def test_disabled_does_nothing(self, make_controller, bus, coordinator, storage):
        await storage.set({ENABLED_KEY: False})
        controller = make_controller()
        await controller.start()
        await bus.drain()

        assert controller.state is BannerState.UNINJECTED
        assert not controller.banner_shown
        assert coordinator.received == []

    @pytest.mark.asyncio
    async def test_not_a_product_page(self, make_controller, bus, coordinator):
        controller = make_controller(html="<html><body><h2>Results</h2></body></html>")
        await controller.start()
        await bus.drain()

        assert controller.state is BannerState.UNINJECTED
        assert coordinator.received == []

    @pytest.mark.asyncio
    async def test_duplicate_load_ignored(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.load()
        await bus.drain()

        assert len(coordinator.received) == 1
        assert len(controller.page.soup.find_all(id=BANNER_ID)) == 1

    @pytest.mark.asyncio
    async def test_extractor_is_injected(self, make_controller, bus, coordinator):
        pages = []

        def factory(page):
            pages.append(page)
            return PageExtractor(page)

        controller = make_controller(extractor_factory=factory)
        await controller.start()
        assert pages == [controller.page]


class TestDismiss:
    @pytest.mark.asyncio
    async def test_dismiss_removes_banner(self, make_controller):
        controller = make_controller()
        await controller.start()
        controller.dismiss()

        assert controller.state is BannerState.UNINJECTED
        assert controller.match_type is None
        assert not controller.banner_shown


class TestEnabledChanged:
    @pytest.mark.asyncio
    async def test_disable_removes_banner(self, make_controller, bus):
        controller = make_controller()
        await controller.start()
        await bus.send_to_tab(TAB_ID, messages.enabled_changed(False))

        assert controller.state is BannerState.UNINJECTED
        assert not controller.banner_shown

    @pytest.mark.asyncio
    async def test_enable_reinjects(self, make_controller, bus, coordinator, storage):
        controller = make_controller()
        await controller.start()
        await bus.send_to_tab(TAB_ID, messages.enabled_changed(False))
        await storage.set({ENABLED_KEY: True})
        await bus.send_to_tab(TAB_ID, messages.enabled_changed(True))
        await bus.drain()

        assert controller.banner_shown
        assert len(coordinator.detections) == 2

    @pytest.mark.asyncio
    async def test_enable_with_banner_shown_is_noop(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await bus.send_to_tab(TAB_ID, messages.enabled_changed(True))
        await bus.drain()

        assert len(coordinator.detections) == 1

    @pytest.mark.asyncio
    async def test_enable_after_dismiss_reinjects(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        controller.dismiss()
        await bus.send_to_tab(TAB_ID, messages.enabled_changed(True))
        assert controller.banner_shown


class TestQueryProduct:
    @pytest.mark.asyncio
    async def test_replies_with_fresh_detection(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        controller.dismiss()

        reply = await bus.send_to_tab(TAB_ID, messages.query_product())
        await bus.drain()

        assert reply["matchType"] == "brand"
        assert reply["title"] == "Air Zoom Pegasus 40"
        # Cache refreshed, DOM untouched
        assert len(coordinator.detections) == 2
        assert not controller.banner_shown
        assert controller.state is BannerState.UNINJECTED

    @pytest.mark.asyncio
    async def test_runs_even_when_disabled(self, make_controller, bus, storage):
        await storage.set({ENABLED_KEY: False})
        controller = make_controller()
        await controller.start()
        reply = await bus.send_to_tab(TAB_ID, messages.query_product())
        assert reply["storeBrand"] == "nike"

    @pytest.mark.asyncio
    async def test_not_a_product_page(self, make_controller, bus, coordinator):
        controller = make_controller(html="<html><body></body></html>")
        await controller.start()
        assert await bus.send_to_tab(TAB_ID, messages.query_product()) is None
        await bus.drain()
        assert coordinator.received == []

    @pytest.mark.asyncio
    async def test_unknown_message_ignored(self, make_controller, bus):
        controller = make_controller()
        await controller.start()
        assert await bus.send_to_tab(TAB_ID, {"type": "SOMETHING_ELSE"}) is None
        assert controller.banner_shown


class TestSoftNavigation:
    @pytest.mark.asyncio
    async def test_new_product_reloads(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.page.soft_navigate(OTHER_URL, product_html("Pro 5 Drill", "BSTOEM"))
        await bus.drain()

        assert controller.match_type is MatchType.SUSPECT_BRAND
        assert len(controller.page.soup.find_all(id=BANNER_ID)) == 1
        assert [d["matchType"] for d in coordinator.detections] == ["brand", "suspect-brand"]

    @pytest.mark.asyncio
    async def test_same_path_is_ignored(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.page.soft_navigate(URL + "?th=1")
        await bus.drain()
        assert len(coordinator.detections) == 1

    @pytest.mark.asyncio
    async def test_non_product_address_is_ignored(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.page.soft_navigate("https://www.amazon.com/s?k=shoes")
        await bus.drain()
        assert len(coordinator.detections) == 1

    @pytest.mark.asyncio
    async def test_non_product_address_keeps_banner_state(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.page.soft_navigate("https://www.amazon.com/s?k=shoes")
        assert controller.state is BannerState.INJECTED
        assert controller.banner_shown

    @pytest.mark.asyncio
    async def test_replacement_document_without_banner_resets(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.page.soft_navigate("https://www.amazon.com/s?k=shoes", "<html><body></body></html>")
        await bus.drain()

        assert not controller.banner_shown
        assert controller.state is BannerState.UNINJECTED
        assert controller.match_type is None
        assert len(coordinator.detections) == 1

    @pytest.mark.asyncio
    async def test_custom_product_pattern(self, make_controller, bus, coordinator):
        controller = make_controller(product_path_pattern=r"/item/\d+")
        await controller.start()
        await controller.page.soft_navigate("https://www.amazon.com/item/42", product_html("Other", "Apple"))
        await bus.drain()
        assert coordinator.detections[-1]["storeBrand"] == "apple"


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_detaches(self, make_controller, bus, coordinator):
        controller = make_controller()
        await controller.start()
        await controller.stop()

        assert not bus.has_receiver(TAB_ID)
        await controller.page.soft_navigate(OTHER_URL, product_html("Other", "Apple"))
        await bus.drain()
        assert len(coordinator.detections) == 1
