"""
Key-Value Storage

Async key-value stores mirroring the host platform's storage areas:
- MemoryStorage: session-scoped, lost when the process exits
- JsonFileStorage: durable, persisted to a JSON file on every write

Reads accept a single key, a list of keys, or a dict of defaults.
"""

import copy
import json
import logging
import os
from typing import Any, Dict, Iterable, Union

logger = logging.getLogger(__name__)

Keys = Union[str, Iterable[str], Dict[str, Any]]


class MemoryStorage:
    """
    In-memory storage area.

    Usage:
        storage = MemoryStorage()
        await storage.set({"enabled": False})
        values = await storage.get({"enabled": True})
        # Returns: {"enabled": False}
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}

    async def get(self, keys: Keys) -> Dict[str, Any]:
        """
        Read values.

        Args:
            keys: Key, list of keys, or {key: default} dict

        Returns:
            Dict of found keys (defaults filled in for dict requests)
        """
        if isinstance(keys, dict):
            return {key: copy.deepcopy(self._data.get(key, default)) for key, default in keys.items()}
        if isinstance(keys, str):
            keys = [keys]
        return {key: copy.deepcopy(self._data[key]) for key in keys if key in self._data}

    async def set(self, items: Dict[str, Any]) -> None:
        self._data.update(copy.deepcopy(items))
        self._persist()

    async def remove(self, keys: Union[str, Iterable[str]]) -> None:
        if isinstance(keys, str):
            keys = [keys]
        for key in keys:
            self._data.pop(key, None)
        self._persist()

    def _persist(self) -> None:
        """Hook for durable subclasses."""


class JsonFileStorage(MemoryStorage):
    """
    Durable storage area backed by a JSON file.

    The file is read once on construction and rewritten on every change.
    """

    def __init__(self, path: str):
        """
        Initialize the storage.

        Args:
            path: JSON file location (created on first write)
        """
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load storage file %s: %s", self.path, e)
            return
        if isinstance(data, dict):
            self._data = data

    def _persist(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
