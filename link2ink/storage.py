# -*- coding: utf-8 -*-
"""
Key/string storage backends.

The history stores only need ``get(key)`` and ``set(key, value)``. Backends
raise StorageError on failure; callers decide how to degrade. An optional
byte quota emulates a browser-style storage limit ("quota exceeded"), so
write failures can be exercised for real.
"""

from pathlib import Path
from typing import Dict, Optional, Protocol

from link2ink.errors import StorageError


class StorageBackend(Protocol):
    """Synchronous key/string get-set backend."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def _check_quota(key: str, value: str, used: int, quota_bytes: Optional[int]) -> None:
    if quota_bytes is None:
        return
    needed = used + len(value.encode("utf-8"))
    if needed > quota_bytes:
        raise StorageError(f"Quota exceeded writing '{key}' ({needed} > {quota_bytes} bytes)")


class MemoryStorage:
    """In-process storage, used by tests and when no directory is writable."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota_bytes: Optional[int] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
        _check_quota(key, value, used, self.quota_bytes)
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStorage:
    """One file per key under a directory (``<dir>/<key>.json``).

    Writes go to a temporary sibling and are renamed into place so a crash
    mid-write never leaves a truncated history file behind.
    """

    def __init__(self, directory: Path, quota_bytes: Optional[int] = None):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return self.directory / f"{safe}.json"

    def _used_bytes(self, exclude: Path) -> int:
        if not self.directory.exists():
            return 0
        return sum(p.stat().st_size for p in self.directory.glob("*.json") if p != exclude)

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read '{key}' from {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            _check_quota(key, value, self._used_bytes(path), self.quota_bytes)
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Could not write '{key}' to {path}: {e}") from e
