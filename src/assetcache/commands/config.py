"""Config commands -- view and modify the global configuration.

Provides the ``assetcache config`` sub-command group for reading, updating,
and resetting :class:`~assetcache.models.GlobalConfig`.  Settings control the
default cache directory, freshness window, store backend, and request
options.
"""

from __future__ import annotations

import json
from typing import Any

import typer

from assetcache.exceptions import AssetCacheError, ConfigError, InvalidUsageError
from assetcache.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Includes project config and ``ASSETCACHE_*`` environment overrides.

    Example::

        assetcache config show
        assetcache --json config show
    """
    from assetcache.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


def _coerce(key: str, current: Any, value: str) -> Any:
    """Convert the CLI string *value* to the type of the existing field."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, (int, float)):
        try:
            return type(current)(value)
        except ValueError:
            raise InvalidUsageError(f"Expected a number for {key}, got: {value}") from None
    if isinstance(current, dict):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = None
        if not isinstance(parsed, dict):
            raise InvalidUsageError(f"Expected a JSON object for {key}, got: {value}")
        return parsed
    return value


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'cache.default_duration')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a value in the global config file.

    The value is coerced to the existing field's type (bool, int, float,
    JSON object, or str) and the result is validated before saving, so a
    malformed duration or unknown backend is rejected.

    Example::

        assetcache config set cache.default_duration 2h
        assetcache config set cache.backend diskcache
        assetcache config set request.headers '{"Accept": "application/json"}'
    """
    from assetcache.config import load_global_config, save_global_config
    from assetcache.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")

        *parents, final_key = key.split(".")
        target = data
        for k in parents:
            if not isinstance(target.get(k), dict):
                raise InvalidUsageError(f"Invalid config key: {key}")
            target = target[k]
        if final_key not in target:
            raise InvalidUsageError(f"Unknown config key: {key}")

        coerced = _coerce(key, target[final_key], value)
        target[final_key] = coerced

        try:
            new_config = GlobalConfig.model_validate(data)
        except ValueError as exc:
            raise InvalidUsageError(f"Validation error: {exc}") from None

        save_global_config(new_config)
    except AssetCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the global config file to defaults.

    Example::

        assetcache config reset --force
    """
    from assetcache.config import save_global_config
    from assetcache.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
