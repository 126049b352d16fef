"""Network retrieval for assetcache.

:class:`HttpFetcher` is the default fetcher used by
:class:`~assetcache.cache.AssetCache`.  Any object with an
``async fetch(url) -> bytes`` method that raises
:class:`~assetcache.exceptions.FetchFailure` on error can stand in for it.
"""

from assetcache.client.fetcher import Fetcher, HttpFetcher

__all__ = ["Fetcher", "HttpFetcher"]
