"""Key-value byte stores used to persist the cart snapshot.

``KeyValueStore`` is the narrow contract the cart repository needs:
``get``/``set`` of raw bytes under a string key. Either call may raise;
callers are expected to treat a failed read as "nothing stored".
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path

_KEY_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class KeyValueStore(ABC):

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under *key*, or None."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store *value* under *key*, replacing any previous value."""


class FileKeyValueStore(KeyValueStore):
    """One file per key inside a directory, the local stand-in for
    browser storage."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_bytes(value)
        tmp.replace(path)

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.fullmatch(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / key
