"""Store backed by :mod:`diskcache`.

Each cache key owns one ``diskcache`` directory, ``<directory>/<name>.d``,
holding an SQLite index keyed by URL.  ``put`` stages records in memory and
``persist`` commits them inside a single diskcache transaction.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Optional

import diskcache

from assetcache.exceptions import StoreIOFailure

_SUFFIX = ".d"


class DiskCacheStore:
    """:mod:`diskcache` implementation of :class:`~assetcache.store.Store`.

    Args:
        name: Store identity; the directory is ``<name>.d``.
        directory: Absolute directory holding the store directory.
    """

    def __init__(self, name: str, directory: Path) -> None:
        self._path = Path(directory) / f"{name}{_SUFFIX}"
        self._cache: Optional[diskcache.Cache] = None
        self._pending: dict[str, dict[str, Any]] = {}

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Open (creating if needed) the diskcache directory."""
        self.close()
        try:
            self._cache = diskcache.Cache(str(self._path))
        except (OSError, sqlite3.Error) as exc:
            raise StoreIOFailure(f"Cannot open cache store {self._path}: {exc}") from exc

    def get(self, key: str) -> Optional[dict[str, Any]]:
        if key in self._pending:
            return self._pending[key]
        try:
            return self._require().get(key)
        except (OSError, sqlite3.Error) as exc:
            raise StoreIOFailure(f"Cannot read cache store {self._path}: {exc}") from exc

    def put(self, key: str, record: dict[str, Any]) -> None:
        self._pending[key] = record

    def keys(self) -> list[str]:
        stored = [k for k in self._require().iterkeys() if k not in self._pending]
        return stored + list(self._pending)

    def persist(self) -> None:
        """Commit staged records.

        Staged records are discarded when the transaction fails.

        Raises:
            StoreIOFailure: If SQLite or the filesystem rejects the write.
        """
        if not self._pending:
            return
        cache = self._require()
        try:
            with cache.transact():
                for key, record in self._pending.items():
                    cache.set(key, record)
        except (OSError, sqlite3.Error) as exc:
            self._pending.clear()
            raise StoreIOFailure(f"Cannot write cache store {self._path}: {exc}") from exc
        self._pending.clear()

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    def _require(self) -> diskcache.Cache:
        if self._cache is None:
            self.load()
        assert self._cache is not None
        return self._cache
