"""
Banner Renderer

Builds the redirect banner into the page DOM. One banner per page, always
the first element of <body>; rendering replaces any existing banner.

Variants (by match type):
- brand: "available directly from <brand>" (or "at <retailer>" for
  alternate retailers) + store link
- search-fallback: "couldn't find the store for <brand>" + web search
- suspect-brand: warning about the seller + web search
- book: local bookstore search + Barnes & Noble
Styling is external; the markup only carries class names.
"""

from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..host.page import Page
from ..models import DetectionPayload, MatchType

BANNER_ID = "noprime-banner"


class BannerRenderer:
    """
    Renders and removes the banner.

    Usage:
        renderer = BannerRenderer()
        renderer.render(page, payload)
        renderer.remove(page)
    """

    def render(self, page: Page, payload: DetectionPayload) -> Tag:
        """
        Insert the banner for a payload, replacing any existing one.

        Args:
            page: Target page
            payload: Detection result

        Returns:
            The banner element
        """
        self.remove(page)

        builders = {
            MatchType.BOOK: self._build_book,
            MatchType.SUSPECT_BRAND: self._build_suspect,
            MatchType.BRAND: self._build_store,
            MatchType.SEARCH_FALLBACK: self._build_store,
        }
        banner = builders[payload.match_type](page.soup, payload)
        banner['data-match-type'] = payload.match_type.value
        page.body.insert(0, banner)
        return banner

    def find(self, page: Page) -> Optional[Tag]:
        return page.soup.find(id=BANNER_ID)

    def remove(self, page: Page) -> bool:
        """Remove the banner if present. Returns True if one was removed."""
        banner = self.find(page)
        if banner is None:
            return False
        banner.decompose()
        return True

    def _build_store(self, soup: BeautifulSoup, payload: DetectionPayload) -> Tag:
        brand_label = payload.product.brand or "the manufacturer"
        classes = ["noprime-fallback"] if payload.match_type == MatchType.SEARCH_FALLBACK else []
        banner = self._banner(soup, classes)

        msg = self._el(soup, "span", "noprime-msg")
        if payload.store_name:
            msg.extend([
                "This ", self._strong(soup, brand_label), " product may be available at ",
                self._strong(soup, payload.store_name), ".",
            ])
            label = f"Search {payload.store_name}"
        elif payload.match_type == MatchType.BRAND:
            msg.extend(["This product may be available directly from ", self._strong(soup, brand_label), "."])
            label = f"Go to {brand_label}"
        else:
            msg.extend(["We couldn't find the store for ", self._strong(soup, brand_label),
                        ", but you can search online."])
            label = "Search on DuckDuckGo"

        actions = self._el(soup, "div", "noprime-actions")
        actions.append(self._link(soup, "noprime-btn noprime-btn-primary", payload.redirect_url, label))
        actions.append(self._dismiss(soup))
        return self._assemble(soup, banner, msg, actions)

    def _build_suspect(self, soup: BeautifulSoup, payload: DetectionPayload) -> Tag:
        banner = self._banner(soup, ["noprime-warning"])

        msg = self._el(soup, "span", "noprime-msg")
        msg.extend([
            self._strong(soup, payload.product.brand or "This brand"),
            " doesn't appear to be a well-known manufacturer. Consider researching before buying.",
        ])

        actions = self._el(soup, "div", "noprime-actions")
        actions.append(self._link(soup, "noprime-btn noprime-btn-primary", payload.redirect_url,
                                  "Search on DuckDuckGo"))
        actions.append(self._dismiss(soup))
        return self._assemble(soup, banner, msg, actions)

    def _build_book(self, soup: BeautifulSoup, payload: DetectionPayload) -> Tag:
        banner = self._banner(soup, [])
        msg = self._el(soup, "span", "noprime-msg", "This book may be available from other booksellers.")

        actions = self._el(soup, "div", "noprime-actions")
        if payload.secondary_url:
            actions.append(self._link(soup, "noprime-btn noprime-btn-primary", payload.secondary_url,
                                      "Find Local Bookstores"))
        actions.append(self._link(soup, "noprime-btn noprime-btn-secondary", payload.redirect_url,
                                  "Barnes & Noble"))
        actions.append(self._dismiss(soup))
        return self._assemble(soup, banner, msg, actions)

    def _banner(self, soup: BeautifulSoup, classes) -> Tag:
        banner = soup.new_tag("div", id=BANNER_ID, role="alert")
        if classes:
            banner['class'] = classes
        return banner

    def _assemble(self, soup: BeautifulSoup, banner: Tag, msg: Tag, actions: Tag) -> Tag:
        content = self._el(soup, "div", "noprime-content")
        content.append(msg)
        content.append(actions)
        banner.append(content)
        return banner

    def _el(self, soup: BeautifulSoup, name: str, class_name: Optional[str] = None,
            text: Optional[str] = None) -> Tag:
        element = soup.new_tag(name)
        if class_name:
            element['class'] = class_name.split()
        if text:
            element.string = text
        return element

    def _strong(self, soup: BeautifulSoup, text: str) -> Tag:
        return self._el(soup, "strong", text=text)

    def _link(self, soup: BeautifulSoup, class_name: str, href: str, label: str) -> Tag:
        link = self._el(soup, "a", class_name, label)
        link['href'] = href
        link['target'] = "_blank"
        link['rel'] = "noopener noreferrer"
        return link

    def _dismiss(self, soup: BeautifulSoup) -> Tag:
        button = self._el(soup, "button", "noprime-btn noprime-btn-dismiss", "✕")
        button['title'] = "Dismiss"
        return button
