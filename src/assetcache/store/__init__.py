"""Durable key/value stores backing one cache key each.

A store is bound to a *(name, directory)* pair and maps URL strings to
JSON-serialisable record dicts.  Two implementations ship:

* :class:`JsonFileStore` -- one JSON file per cache key, in the
  ``flat-cache`` layout used by eleventy-cache-assets (the default).
* :class:`DiskCacheStore` -- one :mod:`diskcache` directory per cache key.

Use :func:`open_store` to pick one by :class:`~assetcache.models.StoreBackend`.
"""

from assetcache.store.base import Store, open_store
from assetcache.store.disk_store import DiskCacheStore
from assetcache.store.json_store import JsonFileStore

__all__ = ["Store", "open_store", "JsonFileStore", "DiskCacheStore"]
