"""
Tabs

Registry of open tabs and their addresses, with lookup by URL match
pattern (e.g. "https://www.amazon.com/*").
"""

import itertools
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Dict, Iterable, List, Optional


@dataclass
class Tab:
    id: int
    url: str


def url_matches(url: str, patterns: Iterable[str]) -> bool:
    """Check an address against match patterns ('*' matches any run of characters)."""
    return any(fnmatchcase(url, pattern) for pattern in patterns)


class TabRegistry:
    """Open tabs, keyed by tab id."""

    def __init__(self):
        self._tabs: Dict[int, Tab] = {}
        self._ids = itertools.count(1)

    def create(self, url: str) -> Tab:
        tab = Tab(id=next(self._ids), url=url)
        self._tabs[tab.id] = tab
        return tab

    def update(self, tab_id: int, url: str) -> Tab:
        tab = self._tabs[tab_id]
        tab.url = url
        return tab

    def remove(self, tab_id: int) -> Optional[Tab]:
        return self._tabs.pop(tab_id, None)

    def get(self, tab_id: int) -> Optional[Tab]:
        return self._tabs.get(tab_id)

    async def query(self, url_patterns: Iterable[str]) -> List[Tab]:
        """
        Find open tabs whose address matches any pattern.

        Args:
            url_patterns: Match patterns

        Returns:
            Matching tabs in creation order
        """
        patterns = list(url_patterns)
        return [tab for tab in self._tabs.values() if url_matches(tab.url, patterns)]
