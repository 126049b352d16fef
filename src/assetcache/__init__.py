"""assetcache -- a disk-backed cache for remote assets.

Given a URL, :class:`~assetcache.cache.AssetCache` returns the cached bytes
while they are inside a freshness window and otherwise fetches the asset,
persists it under ``.cache/``, and returns it as bytes, text, or parsed JSON.

Typical use::

    from assetcache import AssetCache

    asset = AssetCache("https://example.com/feed.json", ".cache")
    feed = await asset.resolve(duration="1h", output_type="json")

or from the shell::

    assetcache fetch https://example.com/feed.json --duration 1h --type json

Modules:
    cache: The :class:`AssetCache` entity, cache keys, and output conversion.
    store: JSON-file and diskcache store backends.
    client: The httpx-based fetcher.
    duration: Freshness-window parsing.
    models: Pydantic models for records and configuration.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr output manager, also used as the logger.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from assetcache.cache import AssetCache, fetch_asset  # noqa: E402

__all__ = ["AssetCache", "fetch_asset", "__version__"]
