"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.assetcache/`` on macOS and Windows.  See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- one :class:`~assetcache.models.GlobalConfig` JSON file
  holding the default cache directory, freshness window, store backend, and
  request settings.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.

The cache directory itself is *not* an XDG path: it defaults to ``.cache``
relative to the working directory so that each project keeps its own assets.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from assetcache.exceptions import ConfigError
from assetcache.models import GlobalConfig

_APP_NAME = "assetcache"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "assetcache.json"

ENV_DIRECTORY = "ASSETCACHE_DIRECTORY"
ENV_DURATION = "ASSETCACHE_DURATION"
ENV_BACKEND = "ASSETCACHE_BACKEND"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that use XDG Base Directories (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/assetcache/`` (default ``~/.config/assetcache/``).
    On macOS/Windows: ``~/.assetcache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/assetcache/`` (default ``~/.local/share/assetcache/``).
    On macOS/Windows: ``~/.assetcache/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file + rename.

    The temp file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX.  It is fsynced before the
    rename and removed on any failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~assetcache.models.GlobalConfig`, or defaults if
        the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> Path:
    """Persist the global configuration atomically and return its path."""
    path = _global_config_path()
    data = config.model_dump(mode="json")
    atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./assetcache.json`` if present.

    The file uses the same shape as the global config but every section is
    optional, e.g. ``{"cache": {"default_duration": "1w"}}``.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_directory: Optional[str] = None,
    cli_duration: Optional[str] = None,
    cli_backend: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``ASSETCACHE_DIRECTORY``,
           ``ASSETCACHE_DURATION``, ``ASSETCACHE_BACKEND``)
        3. Project config (``./assetcache.json``)
        4. User config (``~/.config/assetcache/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an invalid value (for example a
            malformed duration).
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    overrides: dict[str, Any] = {}
    for key, env_var, cli_value in (
        ("directory", ENV_DIRECTORY, cli_directory),
        ("default_duration", ENV_DURATION, cli_duration),
        ("backend", ENV_BACKEND, cli_backend),
    ):
        env_value = os.environ.get(env_var)
        if cli_value is not None:
            overrides[key] = cli_value
        elif env_value:
            overrides[key] = env_value
    data = _deep_merge(data, {"cache": overrides})

    if cli_format is not None:
        data = _deep_merge(data, {"output": {"format": cli_format}})

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
