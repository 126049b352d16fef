"""``assetcache fetch`` -- resolve an asset through the cache and print it.

The asset goes to stdout (or ``-o FILE``) in the requested representation;
``Caching: <url>`` and any errors go to stderr.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from assetcache.cache import AssetCache
from assetcache.config import resolve_config
from assetcache.exceptions import AssetCacheError
from assetcache.models import OutputType, StoreBackend
from assetcache.output import error, get_output


def fetch_command(
    url: str = typer.Argument(help="URL of the asset."),
    duration: Optional[str] = typer.Option(
        None,
        "--duration",
        "-d",
        help="Freshness window, e.g. 30m, 1d, 2w, or '*' for never expire.",
    ),
    output_type: OutputType = typer.Option(
        OutputType.BUFFER, "--type", "-t", help="Output as raw bytes, text, or parsed JSON."
    ),
    directory: Optional[str] = typer.Option(
        None, "--directory", help="Cache directory (default: .cache)."
    ),
    backend: Optional[StoreBackend] = typer.Option(
        None, "--backend", help="Store backend."
    ),
    force: bool = typer.Option(
        False, "--force", help="Refetch even if the cached copy is fresh."
    ),
) -> None:
    """Fetch URL, serving it from the cache while it is fresh.

    Example::

        assetcache fetch https://example.com/feed.json -d 1h -t json
        assetcache fetch https://example.com/logo.png -o logo.png
    """
    output = get_output()
    try:
        config = resolve_config(
            cli_directory=directory,
            cli_duration=duration,
            cli_backend=backend.value if backend else None,
        )
        with AssetCache.from_config(url, config, output=output) as asset:
            effective = "0s" if force else config.cache.default_duration
            result = asyncio.run(asset.resolve(effective, output_type))
    except AssetCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if output_type == OutputType.JSON:
        output.format_response(result)
    elif output_type == OutputType.TEXT:
        output.print_data(result)
    else:
        output.write_bytes(result)
