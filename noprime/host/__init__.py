"""
Host platform surface used by pages and the coordinator.

Modules:
    page - Page (address + DOM, soft navigation notifications)
    storage - MemoryStorage (session) and JsonFileStorage (durable)
    tabs - TabRegistry (open tabs, pattern queries)
    toolbar - Toolbar (icon, title, per-tab badge)
"""

from .page import Page
from .storage import JsonFileStorage, MemoryStorage
from .tabs import Tab, TabRegistry, url_matches
from .toolbar import Badge, Toolbar

__all__ = [
    'Page',
    'JsonFileStorage',
    'MemoryStorage',
    'Tab',
    'TabRegistry',
    'url_matches',
    'Badge',
    'Toolbar',
]
