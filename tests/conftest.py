"""Shared test fixtures for assetcache.

Every test runs with XDG config/data directories and the working directory
redirected into ``tmp_path`` so that no test can read or write the real user
config or a real ``.cache`` directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from assetcache.output import OutputManager, reset_output, set_output


T0 = 1_700_000_000_000
"""A fixed "now" in epoch milliseconds (2023-11-14T22:13:20Z)."""

HOUR_MS = 60 * 60 * 1000


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeFetcher:
    """Fetcher double that records calls and returns (or raises) a canned result."""

    def __init__(self, payload: bytes = b"", error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.payload


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Start every test with a quiet, colourless global OutputManager.

    The manager caches sys.stdout/sys.stderr at creation time, so it is
    also reset afterwards; a CliRunner-redirected stream would otherwise
    leak into the next test.
    """
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories and the cwd at a scratch directory."""
    monkeypatch.setattr("assetcache.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for var in ("ASSETCACHE_DIRECTORY", "ASSETCACHE_DURATION", "ASSETCACHE_BACKEND"):
        monkeypatch.delenv(var, raising=False)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


# ---------------------------------------------------------------------------
# Cache collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def make_fetcher():
    """Factory for :class:`FakeFetcher` instances."""

    def _make(payload: bytes = b"", error: Exception | None = None) -> FakeFetcher:
        return FakeFetcher(payload, error)

    return _make
