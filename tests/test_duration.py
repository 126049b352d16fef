"""Tests for duration parsing."""

from __future__ import annotations

import pytest

from assetcache.duration import (
    format_duration_ms,
    is_infinite,
    parse_duration_ms,
    validate_duration,
)
from assetcache.exceptions import ConfigError


class TestParseDurationMs:
    @pytest.mark.parametrize(
        ("duration", "expected"),
        [
            ("0s", 0),
            ("1s", 1_000),
            ("90s", 90_000),
            ("5m", 300_000),
            ("2h", 7_200_000),
            ("1d", 86_400_000),
            ("1w", 604_800_000),
            ("1y", 31_536_000_000),
        ],
    )
    def test_units(self, duration: str, expected: int) -> None:
        assert parse_duration_ms(duration) == expected

    def test_default_is_zero(self) -> None:
        assert parse_duration_ms() == 0

    def test_surrounding_whitespace(self) -> None:
        assert parse_duration_ms(" 3d ") == 3 * 86_400_000

    @pytest.mark.parametrize("duration", ["1x", "1D", "d", "1", "", "1.5h", "-1d", "one day", "*"])
    def test_malformed(self, duration: str) -> None:
        with pytest.raises(ConfigError):
            parse_duration_ms(duration)

    def test_non_string(self) -> None:
        with pytest.raises(ConfigError):
            parse_duration_ms(60)  # type: ignore[arg-type]


class TestHelpers:
    @pytest.mark.parametrize("duration", ["*", None, ""])
    def test_infinite(self, duration) -> None:
        assert is_infinite(duration) is True

    def test_finite(self) -> None:
        assert is_infinite("1d") is False

    def test_validate_passes_through(self) -> None:
        assert validate_duration("*") == "*"
        assert validate_duration("4h") == "4h"

    def test_validate_rejects(self) -> None:
        with pytest.raises(ConfigError):
            validate_duration("4 hours")

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [
            (0, "0s"),
            (999, "0s"),
            (61_000, "1m 1s"),
            (86_400_000, "1d"),
            (90_061_000, "1d 1h 1m 1s"),
            (-3_600_000, "1h"),
        ],
    )
    def test_format(self, ms: int, expected: str) -> None:
        assert format_duration_ms(ms) == expected
