"""Shared test fixtures."""

from pathlib import Path

import pytest

from noprime.catalog import BrandCatalog
from noprime.common.config_loader import load_settings
from noprime.models import ProductInfo
from noprime.resolution import BrandResolver

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PRODUCT_URL = "https://www.amazon.com/dp/B0C1234567"
OTHER_PRODUCT_URL = "https://www.amazon.com/dp/B0D7654321"
BOOK_URL = "https://www.amazon.com/dp/0143127748"
SEARCH_URL = "https://www.amazon.com/s?k=running+shoes"


def load_fixture(name: str) -> str:
    """Read an HTML fixture by file name."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def read_fixture():
    """Return a loader for HTML fixtures by file name."""
    return load_fixture


@pytest.fixture
def sample_store_records():
    """Raw store records as they appear in brands.yaml, in priority order."""
    return {
        "nike": {"url": "https://www.nike.com", "search_template": "https://www.nike.com/w?q={query}"},
        "apple": {"url": "https://www.apple.com", "search_template": "https://www.apple.com/us/search/{query}"},
        "black+decker": {"url": "https://www.blackanddecker.com",
                         "search_template": "https://www.blackanddecker.com/search?q={query}"},
        "lego": {"url": "https://www.lego.com", "search_template": "https://www.lego.com/en-us/search?q={query}"},
        "gopro": {"url": "https://gopro.com", "search_template": None},
    }


@pytest.fixture
def sample_aliases():
    return {
        "nike inc": "nike",
        "apple inc.": "apple",
        "black & decker": "black+decker",
        "the lego group": "lego",
    }


@pytest.fixture
def sample_alternate_records():
    return {
        "hasbro": {
            "store": "Target",
            "url": "https://www.target.com",
            "search_template": "https://www.target.com/s?searchTerm={query}",
        },
    }


@pytest.fixture
def sample_catalog(sample_store_records, sample_aliases, sample_alternate_records):
    """Small validated catalog."""
    return BrandCatalog.from_records(
        stores=sample_store_records,
        aliases=sample_aliases,
        disreputable=["yiwa"],
        alternate_retailers=sample_alternate_records,
    )


@pytest.fixture
def resolver(sample_catalog):
    return BrandResolver(sample_catalog)


@pytest.fixture
def settings():
    """Runtime settings from config/settings.yaml."""
    return load_settings()


@pytest.fixture
def brand_product():
    return ProductInfo(url=PRODUCT_URL, title="Air Zoom Pegasus 40 Running Shoes", brand="Nike")


@pytest.fixture
def book_product():
    return ProductInfo(url=BOOK_URL, title="The Overstory", brand="Richard Powers",
                       is_book=True, isbn="9780393356687")
