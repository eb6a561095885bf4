"""
Page

The document a page controller runs against: current address plus a
parsed DOM. Supports in-page (soft) navigation, where the address and
content change without a reload, and notifies subscribers of address
changes.
"""

import logging
from typing import Awaitable, Callable, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

AddressListener = Callable[[str], Awaitable[None]]


class Page:
    """
    A loaded page.

    Usage:
        page = Page("https://www.amazon.com/dp/B000000001", html)
        page.add_address_listener(on_change)
        await page.soft_navigate("https://www.amazon.com/dp/B000000002", new_html)
    """

    def __init__(self, url: str, html: str = ""):
        """
        Initialize the page.

        Args:
            url: Page address
            html: Page markup
        """
        self.url = url
        self.soup = BeautifulSoup(html or "", "lxml")
        self._listeners: List[AddressListener] = []

    @property
    def path(self) -> str:
        return urlparse(self.url).path

    @property
    def body(self):
        """The <body> element, created if the markup had none."""
        body = self.soup.body
        if body is None:
            body = self.soup.new_tag('body')
            root = self.soup.html or self.soup
            root.append(body)
        return body

    def add_address_listener(self, listener: AddressListener) -> None:
        self._listeners.append(listener)

    def remove_address_listener(self, listener: AddressListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def soft_navigate(self, url: str, html: Optional[str] = None) -> None:
        """
        Change the address without a reload, then notify listeners.

        Args:
            url: New address
            html: Replacement markup (None keeps the current document)
        """
        self.url = url
        if html is not None:
            self.soup = BeautifulSoup(html, "lxml")

        logger.debug("Soft navigation to %s", url)
        for listener in list(self._listeners):
            await listener(url)
