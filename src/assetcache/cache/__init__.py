"""The disk-backed asset cache.

:class:`AssetCache` decides whether a URL's cached bytes are still fresh,
fetches and persists them when they are not, and converts them to bytes,
text, or parsed JSON.  :func:`fetch_asset` is a one-call convenience wrapper.
"""

from assetcache.cache.asset_cache import AssetCache, convert, fetch_asset
from assetcache.cache.keys import cache_filename, short_hash

__all__ = ["AssetCache", "convert", "fetch_asset", "cache_filename", "short_hash"]
