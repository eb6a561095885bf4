"""
Process-wide coordinator.

Modules:
    coordinator - Coordinator (enabled flag, per-tab state, toolbar)
"""

from .coordinator import Coordinator

__all__ = ['Coordinator']
