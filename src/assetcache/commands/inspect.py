"""``assetcache inspect`` -- report what the cache holds for a URL.

Never touches the network and never writes a record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import typer

from assetcache.cache import AssetCache
from assetcache.config import resolve_config
from assetcache.exceptions import AssetCacheError
from assetcache.models import StoreBackend
from assetcache.output import error, format_response


def _iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat()


def describe(asset: AssetCache, duration: str) -> dict[str, Any]:
    """Build the inspect report for *asset* under *duration*."""
    record = asset.cached_record
    report: dict[str, Any] = {
        "url": asset.url,
        "cache_key": asset.cache_key,
        "store": str(asset.cache_path),
        "backend": asset.backend.value,
        "duration": duration,
        "cached": record is not None,
        "records": len(asset.store.keys()),
    }
    if record is None:
        return report

    expires = asset.expires_at(duration)
    report.update(
        {
            "cached_at": _iso(record.cached_at),
            "size": len(record.payload),
            "expires_at": "never" if expires is None else _iso(expires),
            "fresh": not asset.needs_refetch(duration),
        }
    )
    return report


def inspect_command(
    url: str = typer.Argument(help="URL of the asset."),
    duration: Optional[str] = typer.Option(
        None, "--duration", "-d", help="Freshness window to evaluate against."
    ),
    directory: Optional[str] = typer.Option(
        None, "--directory", help="Cache directory (default: .cache)."
    ),
    backend: Optional[StoreBackend] = typer.Option(
        None, "--backend", help="Store backend."
    ),
) -> None:
    """Show the cache key, store location, age and freshness of URL.

    Example::

        assetcache inspect https://example.com/feed.json -d 1h
        assetcache --json inspect https://example.com/feed.json
    """
    try:
        config = resolve_config(
            cli_directory=directory,
            cli_duration=duration,
            cli_backend=backend.value if backend else None,
        )
        with AssetCache.from_config(url, config) as asset:
            report = describe(asset, config.cache.default_duration)
    except AssetCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(report)
