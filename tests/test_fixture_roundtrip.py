"""Saved product pages run through extraction and resolution end to end."""

import pytest

from noprime.catalog import load_brand_catalog
from noprime.extraction import PageExtractor
from noprime.models import MatchType
from noprime.resolution import BrandResolver, classify_product
from noprime.session import BrowserSession

CASES = [
    (
        "brand_direct.html",
        "https://www.amazon.com/Nike-Pegasus/dp/B0C1234567",
        MatchType.BRAND,
        "https://www.nike.com/w?q=Nike%20Air%20Zoom%20Pegasus%2040%20Men's%20Road%20Running%20Shoes",
    ),
    (
        "brand_alias.html",
        "https://www.amazon.com/dp/B0BLACKDEC",
        MatchType.BRAND,
        "https://www.blackanddecker.com/search?query=dustbuster%20AdvancedClean%20Cordless%20Handheld%20Vacuum",
    ),
    (
        "fallback.html",
        "https://www.amazon.com/dp/B0HEARTH01",
        MatchType.SEARCH_FALLBACK,
        "https://duckduckgo.com/?q=%22Hearthsong%22%20Hearthsong%20Kids%20Indoor%20Climbing%20Dome%20-amazon",
    ),
    (
        "suspect.html",
        "https://www.amazon.com/dp/B0D7654321",
        MatchType.SUSPECT_BRAND,
        "https://duckduckgo.com/?q=%22VXGRTQ%22%20VXGRTQ%2020V%20Cordless%20Drill%20Set%20-amazon",
    ),
    (
        "book.html",
        "https://www.amazon.com/Overstory-Novel-Richard-Powers/dp/039335668X",
        MatchType.BOOK,
        "https://www.barnesandnoble.com/w/?ean=9780393356687",
    ),
]


@pytest.fixture(scope="module")
def shipped_resolver():
    return BrandResolver(load_brand_catalog())


@pytest.mark.parametrize("fixture, url, match_type, redirect_url", CASES)
def test_pipeline(read_fixture, shipped_resolver, fixture, url, match_type, redirect_url):
    product = PageExtractor.from_html(read_fixture(fixture), url).extract_product_info()
    payload = classify_product(product, shipped_resolver)
    assert payload.match_type is match_type
    assert payload.redirect_url == redirect_url


def test_expected_fields(read_fixture, shipped_resolver):
    alias = PageExtractor.from_html(read_fixture("brand_alias.html"), CASES[1][1]).extract_product_info()
    assert alias.brand == "BLACK & DECKER"
    assert classify_product(alias, shipped_resolver).store_brand == "black+decker"

    fallback = PageExtractor.from_html(read_fixture("fallback.html"), CASES[2][1]).extract_product_info()
    assert fallback.brand == "Hearthsong"

    suspect = PageExtractor.from_html(read_fixture("suspect.html"), CASES[3][1]).extract_product_info()
    assert suspect.brand == "VXGRTQ"


@pytest.mark.asyncio
@pytest.mark.parametrize("fixture, url, match_type, redirect_url", CASES)
async def test_through_session(read_fixture, fixture, url, match_type, redirect_url):
    session = BrowserSession()
    await session.start()
    tab = await session.open_tab(url, read_fixture(fixture))
    await session.settle()

    state = await session.describe_tab(tab.id)
    assert state.match_type is match_type
    assert state.redirect_url == redirect_url

    banner = session.page(tab.id).soup.find(id="noprime-banner")
    assert banner["data-match-type"] == match_type.value


@pytest.mark.asyncio
async def test_search_page_gets_nothing(read_fixture):
    session = BrowserSession()
    await session.start()
    tab = await session.open_tab("https://www.amazon.com/s?k=running+shoes", read_fixture("not_product.html"))
    await session.settle()

    assert await session.describe_tab(tab.id) is None
    assert session.page(tab.id).soup.find(id="noprime-banner") is None
    assert session.badge(tab.id).text == ""
