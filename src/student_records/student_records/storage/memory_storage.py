from __future__ import annotations

from typing import Dict, Optional

from .repository import KeyValueStorage


class InMemoryKeyValueStorage(KeyValueStorage):
    """Process-local storage; state survives as long as the instance does."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def save(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
