from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

from .repository import KeyValueStorage

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_\-]+$")


class JsonFileKeyValueStorage(KeyValueStorage):
    """One ``<key>.json`` file per key inside ``directory``.

    Writes go to a temporary file that is then moved over the target, so a crash
    mid-write leaves the previous file intact.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def load(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def save(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
