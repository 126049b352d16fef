"""Single-file JSON store.

Each cache key owns one file, ``<directory>/<name>``, whose content is a JSON
object mapping URL strings to record dicts::

    {
      "https://example.com/a.json": {"cachedAt": 1700000000000, "payload": "eyJ4IjoxfQ=="}
    }

Writes go through a temp file in the same directory that is fsynced and then
renamed over the target with ``os.replace``, so a crash mid-write never leaves
a truncated store behind.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from assetcache.config import atomic_write
from assetcache.exceptions import StoreIOFailure


class JsonFileStore:
    """JSON-file implementation of :class:`~assetcache.store.Store`.

    Args:
        name: File name inside *directory*.
        directory: Absolute directory holding the file.

    Example::

        store = JsonFileStore("assetcache-3f2a9c1b0d4e5f67", Path("/tmp/.cache"))
        store.load()
        store.put("https://example.com/a", {"cachedAt": 0, "payload": ""})
        store.persist()
    """

    def __init__(self, name: str, directory: Path) -> None:
        self._path = Path(directory) / name
        self._data: dict[str, Any] = {}
        self._persisted: dict[str, Any] = {}
        self._dirty = False

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Read the file into memory; a missing file yields an empty store.

        Raises:
            StoreIOFailure: If the file cannot be read or is not a JSON object.
        """
        self._dirty = False
        if not self._path.is_file():
            self._data = {}
            self._persisted = {}
            return
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreIOFailure(f"Cannot read cache store {self._path}: {exc}") from exc
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise StoreIOFailure(f"Corrupt cache store {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreIOFailure(
                f"Corrupt cache store {self._path}: expected a JSON object"
            )
        self._data = data
        self._persisted = dict(data)

    def get(self, key: str) -> Optional[dict[str, Any]]:
        return self._data.get(key)

    def put(self, key: str, record: dict[str, Any]) -> None:
        self._data[key] = record
        self._dirty = True

    def keys(self) -> list[str]:
        return list(self._data)

    def persist(self) -> None:
        """Write the in-memory mapping to disk atomically.

        On failure the mapping is rolled back to what was last read or
        written, so staged records never outlive a failed write.

        Raises:
            StoreIOFailure: If the directory or temp file cannot be written.
        """
        if not self._dirty and self._path.is_file():
            return
        text = json.dumps(self._data, separators=(",", ":"))
        try:
            atomic_write(self._path, text)
        except OSError as exc:
            self._data = dict(self._persisted)
            self._dirty = False
            raise StoreIOFailure(f"Cannot write cache store {self._path}: {exc}") from exc
        self._persisted = dict(self._data)
        self._dirty = False

    def close(self) -> None:
        """Nothing is held open between calls."""

