"""Tests for assetcache.config: XDG paths, atomic writes, global and project config, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from assetcache.config import (
    atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
)
from assetcache.exceptions import ConfigError
from assetcache.models import CacheConfig, GlobalConfig, RequestConfig, StoreBackend


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_custom(self, tmp_path: Path) -> None:
        path = get_config_dir()
        assert path == tmp_path / "xdg-config" / "assetcache"
        assert path.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        assert get_config_dir() == tmp_path / "home" / ".config" / "assetcache"

    def test_data_dir_xdg_custom(self, tmp_path: Path) -> None:
        assert get_data_dir() == tmp_path / "xdg-data" / "assetcache"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        assert get_data_dir() == tmp_path / "home" / ".local" / "share" / "assetcache"


class TestXDGPathsFallback:
    """macOS / Windows use ~/.assetcache."""

    @pytest.fixture(autouse=True)
    def _non_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("assetcache.config._is_xdg_platform", lambda: False)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.setenv("USERPROFILE", str(tmp_path / "home"))

    def test_config_dir_fallback(self, tmp_path: Path) -> None:
        assert get_config_dir() == tmp_path / "home" / ".assetcache"

    def test_data_dir_fallback(self, tmp_path: Path) -> None:
        assert get_data_dir() == tmp_path / "home" / ".assetcache" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    @pytest.fixture()
    def root(self, tmp_path: Path) -> Path:
        path = tmp_path / "atomic"
        path.mkdir()
        return path

    def test_creates_file_with_content(self, root: Path) -> None:
        target = root / "test.txt"
        atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, root: Path) -> None:
        target = root / "test.txt"
        target.write_text("old content", encoding="utf-8")
        atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, root: Path) -> None:
        target = root / "a" / "b" / "test.txt"
        atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, root: Path) -> None:
        target = root / "test.txt"
        atomic_write(target, "content")
        assert list(root.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, root: Path) -> None:
        target = root / "test.txt"
        with patch("assetcache.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                atomic_write(target, "will fail")
        assert list(root.iterdir()) == []

    def test_unicode_content(self, root: Path) -> None:
        target = root / "test.txt"
        atomic_write(target, "café ☃")
        assert target.read_text(encoding="utf-8") == "café ☃"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.cache.directory == ".cache"
        assert config.cache.default_duration == "1d"
        assert config.cache.backend is StoreBackend.JSON

    def test_save_and_load_roundtrip(self) -> None:
        config = GlobalConfig(
            cache=CacheConfig(directory="/srv/assets", default_duration="2h", backend="diskcache"),
            request=RequestConfig(timeout=5, headers={"Accept": "image/png"}),
        )
        path = save_global_config(config)
        assert path == get_config_dir() / "config.json"
        assert load_global_config() == config

    def test_saved_config_is_valid_json(self) -> None:
        path = save_global_config(GlobalConfig())
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["cache"]["default_duration"] == "1d"
        assert data["cache"]["backend"] == "json"

    def test_load_invalid_json_raises_config_error(self) -> None:
        (get_config_dir() / "config.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_duration_raises_config_error(self) -> None:
        _write_json(get_config_dir() / "config.json", {"cache": {"default_duration": "1 day"}})
        with pytest.raises(ConfigError):
            load_global_config()

    def test_load_unknown_backend_raises_config_error(self) -> None:
        _write_json(get_config_dir() / "config.json", {"cache": {"backend": "redis"}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_load_returns_none_when_missing(self) -> None:
        assert load_project_config() is None

    def test_load_valid_project_config(self, isolated_env: Path) -> None:
        _write_json(isolated_env / "assetcache.json", {"cache": {"default_duration": "1w"}})
        assert load_project_config() == {"cache": {"default_duration": "1w"}}

    def test_load_invalid_json_raises_config_error(self, isolated_env: Path) -> None:
        (isolated_env / "assetcache.json").write_text("[", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_non_object_raises_config_error(self, isolated_env: Path) -> None:
        _write_json(isolated_env / "assetcache.json", ["1d"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self) -> None:
        assert resolve_config() == GlobalConfig()

    def test_global_applies(self) -> None:
        save_global_config(GlobalConfig(cache=CacheConfig(default_duration="3h")))
        assert resolve_config().cache.default_duration == "3h"

    def test_project_overrides_global(self, isolated_env: Path) -> None:
        save_global_config(
            GlobalConfig(cache=CacheConfig(default_duration="3h", directory="/global"))
        )
        _write_json(isolated_env / "assetcache.json", {"cache": {"default_duration": "1w"}})
        config = resolve_config()
        assert config.cache.default_duration == "1w"
        assert config.cache.directory == "/global"

    def test_env_overrides_project(
        self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_env / "assetcache.json", {"cache": {"default_duration": "1w"}})
        monkeypatch.setenv("ASSETCACHE_DURATION", "5m")
        monkeypatch.setenv("ASSETCACHE_DIRECTORY", "/env/cache")
        monkeypatch.setenv("ASSETCACHE_BACKEND", "diskcache")
        config = resolve_config()
        assert config.cache.default_duration == "5m"
        assert config.cache.directory == "/env/cache"
        assert config.cache.backend is StoreBackend.DISKCACHE

    def test_empty_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASSETCACHE_DURATION", "")
        assert resolve_config().cache.default_duration == "1d"

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASSETCACHE_DURATION", "5m")
        monkeypatch.setenv("ASSETCACHE_BACKEND", "diskcache")
        config = resolve_config(cli_duration="*", cli_backend="json", cli_directory="here")
        assert config.cache.default_duration == "*"
        assert config.cache.backend is StoreBackend.JSON
        assert config.cache.directory == "here"

    def test_cli_format_overrides_global(self) -> None:
        assert resolve_config(cli_format="json").output.format == "json"

    def test_invalid_cli_duration_raises_config_error(self) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(cli_duration="soon")

    def test_invalid_env_backend_raises_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASSETCACHE_BACKEND", "memcached")
        with pytest.raises(ConfigError):
            resolve_config()
