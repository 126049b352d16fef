"""The :class:`Store` protocol and backend factory."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from assetcache.exceptions import ConfigError
from assetcache.models import StoreBackend
from assetcache.store.disk_store import DiskCacheStore
from assetcache.store.json_store import JsonFileStore


@runtime_checkable
class Store(Protocol):
    """Persistence capability consumed by :class:`~assetcache.cache.AssetCache`.

    ``put`` only stages a value; nothing is durable until ``persist`` returns.
    """

    @property
    def path(self) -> Path:
        """Filesystem location of the backing file or directory."""
        ...

    def load(self) -> None:
        """Read the backing file, starting empty if it does not exist yet."""
        ...

    def get(self, key: str) -> Optional[dict[str, Any]]:
        ...

    def put(self, key: str, record: dict[str, Any]) -> None:
        ...

    def keys(self) -> list[str]:
        """URLs with a record, including staged ones."""
        ...

    def persist(self) -> None:
        """Durably write every staged change."""
        ...

    def close(self) -> None:
        ...


def open_store(
    backend: StoreBackend | str,
    name: str,
    directory: str | Path,
) -> Store:
    """Create and load the store for *name* inside *directory*.

    Args:
        backend: ``"json"`` or ``"diskcache"``.
        name: Store identity, e.g. ``assetcache-<cache_key>``.
        directory: Directory holding the store; made absolute here.

    Returns:
        A loaded store ready for ``get``/``put``.

    Raises:
        ConfigError: If *backend* is not a known backend name.
        StoreIOFailure: If the backing file exists but cannot be read.
    """
    try:
        kind = StoreBackend(backend)
    except ValueError:
        valid = ", ".join(b.value for b in StoreBackend)
        raise ConfigError(f"Unknown store backend '{backend}' (expected one of {valid})") from None

    root = Path(directory).expanduser().resolve()
    store: Store
    if kind is StoreBackend.DISKCACHE:
        store = DiskCacheStore(name, root)
    else:
        store = JsonFileStore(name, root)
    store.load()
    return store
