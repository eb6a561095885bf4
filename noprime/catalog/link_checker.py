"""
Catalog Link Checker

Periodically verifies that catalog store homepages and search pages still
answer. This runs outside the redirect flow: resolution never waits on the
network, it trusts the catalog.

Checks per URL:
- HTTP status (2xx/3xx is OK, retry on 429/5xx)
- Soft 404: a 200 page whose <title> says "not found"
Structural checks (no network):
- Homepage and search template on different domains
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from ..common.constants import QUERY_PLACEHOLDER
from ..common.text_utils import encode_uri_component
from .brand_catalog import BrandCatalog

logger = logging.getLogger(__name__)

_SOFT_404_TITLE = re.compile(r"page not found|404|not found", re.IGNORECASE)
_SEARCH_TITLE = re.compile(r"search|results|shop", re.IGNORECASE)


@dataclass
class LinkResult:
    """Outcome of checking one catalog URL."""
    brand: str
    kind: str                   # "homepage" or "template"
    url: str
    ok: bool
    status: Optional[int] = None
    soft_404: bool = False
    error: str = ""

    def describe(self) -> str:
        if self.error:
            return self.error
        if self.soft_404:
            return f"HTTP {self.status} (soft 404, page says not found)"
        return f"HTTP {self.status}"


class LinkChecker:
    """
    HTTP health checker for catalog URLs.

    Usage:
        with LinkChecker() as checker:
            results = checker.check_catalog(load_brand_catalog())
            failed = [r for r in results if not r.ok]
    """

    MAX_RETRIES = 3
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
    TEST_QUERY = "running shoes"
    DEFAULT_USER_AGENT = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    )

    def __init__(self, timeout: float = 12.0, user_agent: Optional[str] = None, delay: float = 0.5):
        """
        Initialize the checker.

        Args:
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header (defaults to a desktop browser)
            delay: Pause between URLs, to stay polite
        """
        self.timeout = timeout
        self.delay = delay

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent or self.DEFAULT_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        })

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def check_url(self, url: str, brand: str = "", kind: str = "homepage") -> LinkResult:
        """
        Fetch one URL and classify the response.

        Args:
            url: Absolute URL
            brand: Catalog key, for reporting
            kind: "homepage" or "template"

        Returns:
            LinkResult
        """
        for attempt in range(self.MAX_RETRIES):
            try:
                response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            except requests.exceptions.Timeout:
                return LinkResult(brand, kind, url, ok=False, error="TIMEOUT")
            except requests.exceptions.ConnectionError as e:
                return LinkResult(brand, kind, url, ok=False, error=f"CONNECTION_FAILED: {str(e)[:80]}")
            except requests.exceptions.RequestException as e:
                return LinkResult(brand, kind, url, ok=False, error=str(e)[:80])

            if response.status_code in self.RETRYABLE_STATUS_CODES and attempt < self.MAX_RETRIES - 1:
                retry_after = 2 ** attempt
                logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                               response.status_code, url, attempt + 1,
                               self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            status = response.status_code
            ok = 200 <= status < 400
            soft_404 = ok and self._is_soft_404(response.text)
            return LinkResult(brand, kind, url, ok=ok and not soft_404, status=status, soft_404=soft_404)

        return LinkResult(brand, kind, url, ok=False, error="MAX_RETRIES")

    def check_catalog(
        self,
        catalog: BrandCatalog,
        brands: Optional[Iterable[str]] = None,
        homepage_only: bool = False,
        template_only: bool = False,
    ) -> List[LinkResult]:
        """
        Check catalog stores (and alternate retailers).

        Args:
            catalog: Brand catalog
            brands: Restrict to these keys (default: all)
            homepage_only: Skip search templates
            template_only: Skip homepages

        Returns:
            List of LinkResult in catalog order
        """
        wanted = {b.lower() for b in brands} if brands else None
        results = []

        for brand, url, kind in self._targets(catalog, homepage_only, template_only):
            if wanted is not None and brand not in wanted:
                continue
            result = self.check_url(url, brand=brand, kind=kind)
            level = logging.INFO if result.ok else logging.WARNING
            logger.log(level, "%-8s %-20s %s %s", "OK" if result.ok else "FAIL", brand, kind, result.describe())
            results.append(result)
            if self.delay:
                time.sleep(self.delay)

        return results

    def _targets(self, catalog: BrandCatalog, homepage_only: bool, template_only: bool):
        entries = list(catalog.stores.items()) + list(catalog.alternate_retailers.items())
        query = encode_uri_component(self.TEST_QUERY)
        for brand, entry in entries:
            if not template_only:
                yield brand, entry.url, "homepage"
            if not homepage_only and entry.search_template:
                yield brand, entry.search_template.replace(QUERY_PLACEHOLDER, query), "template"

    def _is_soft_404(self, html: str) -> bool:
        """A page whose title says not-found, unless it is a search/shop page."""
        soup = BeautifulSoup(html or "", "lxml")
        title = soup.title.get_text() if soup.title else ""
        return bool(_SOFT_404_TITLE.search(title)) and not _SEARCH_TITLE.search(title)


def find_domain_mismatches(catalog: BrandCatalog) -> List[Tuple[str, str, str]]:
    """
    Find entries whose search template points at a different domain.

    Returns:
        List of (brand, homepage host, search host), "www." ignored
    """
    mismatches = []
    entries = list(catalog.stores.items()) + list(catalog.alternate_retailers.items())
    for brand, entry in entries:
        if not entry.search_template:
            continue
        home_host = _bare_host(entry.url)
        search_host = _bare_host(entry.search_template.replace(QUERY_PLACEHOLDER, "test"))
        if home_host != search_host:
            mismatches.append((brand, home_host, search_host))
    return mismatches


def _bare_host(url: str) -> str:
    host = urlparse(url).hostname or ""
    return host[4:] if host.startswith("www.") else host
