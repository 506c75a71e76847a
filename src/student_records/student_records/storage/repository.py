from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Narrow persistence interface used by the record store.

    Each key holds one whole serialized collection; there are no partial writes.
    """

    def load(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def save(self, key: str, data: bytes) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError
