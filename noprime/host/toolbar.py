"""
Toolbar

The extension's toolbar button: one icon set and title for the whole
process, plus a per-tab badge (short text on a colored background).
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class Badge:
    text: str = ""
    color: Optional[str] = None


class Toolbar:
    """Records the toolbar state set by the coordinator."""

    def __init__(self):
        self.icon: Dict[int, str] = {}
        self.title: str = ""
        self._badges: Dict[int, Badge] = {}

    def set_icon(self, paths: Dict[int, str]) -> None:
        self.icon = dict(paths)

    def set_title(self, title: str) -> None:
        self.title = title

    def set_badge_text(self, tab_id: int, text: str) -> None:
        self._badges.setdefault(tab_id, Badge()).text = text

    def set_badge_background_color(self, tab_id: int, color: str) -> None:
        self._badges.setdefault(tab_id, Badge()).color = color

    def get_badge(self, tab_id: int) -> Badge:
        """Badge for a tab (empty badge if none was set)."""
        return self._badges.get(tab_id, Badge())

    def clear_badge(self, tab_id: int) -> None:
        """Forget a closed tab's badge."""
        self._badges.pop(tab_id, None)
