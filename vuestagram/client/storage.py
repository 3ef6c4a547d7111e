import json
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """Durable string key/value store for client state.

    Backed by a JSON file when a path is given, otherwise kept in memory.
    Values are stored as strings, like a browser's localStorage.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._items: dict[str, str] = {}
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self._items = json.load(f)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value) -> None:
        self._items[key] = value if isinstance(value, str) else str(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def clear(self) -> None:
        self._items = {}
        self._flush()

    def keys(self) -> list[str]:
        return list(self._items)

    def _flush(self) -> None:
        if not self.path:
            return
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._items, f)
        os.replace(tmp_path, self.path)
