"""Freshness-window duration strings.

A duration is written as ``<integer><unit>`` where the unit is one of
``s`` (seconds), ``m`` (minutes), ``h`` (hours), ``d`` (days), ``w`` (weeks)
or ``y`` (365-day years), e.g. ``"30m"`` or ``"1d"``.  The special value
``"*"`` means the cached asset never expires.

Malformed strings raise :class:`~assetcache.exceptions.ConfigError` instead of
producing a meaningless expiry.
"""

from __future__ import annotations

import re
from typing import Optional

from assetcache.exceptions import ConfigError

INFINITE = "*"

UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
    "w": 60 * 60 * 24 * 7,
    "y": 60 * 60 * 24 * 365,
}

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([a-zA-Z]?)\s*$")


def parse_duration_ms(duration: str = "0s") -> int:
    """Convert a duration string to milliseconds.

    Args:
        duration: A string such as ``"90s"`` or ``"2w"``.

    Returns:
        The duration in milliseconds.

    Raises:
        ConfigError: If the magnitude is not an integer or the unit is
            missing or unknown.  ``"*"`` is also rejected here; callers
            check :func:`is_infinite` first.
    """
    if not isinstance(duration, str):
        raise ConfigError(f"Duration must be a string, got {type(duration).__name__}")

    match = _DURATION_RE.match(duration)
    if match is None:
        raise ConfigError(
            f"Invalid duration '{duration}': expected <integer><unit>, e.g. '1d'"
        )

    magnitude, unit = match.groups()
    if not unit:
        raise ConfigError(f"Invalid duration '{duration}': missing unit")
    multiplier = UNIT_SECONDS.get(unit)
    if multiplier is None:
        units = ", ".join(UNIT_SECONDS)
        raise ConfigError(
            f"Invalid duration '{duration}': unknown unit '{unit}' (expected one of {units})"
        )
    return int(magnitude) * multiplier * 1000


def is_infinite(duration: Optional[str]) -> bool:
    """Return ``True`` for durations that never expire (``"*"``, ``None``, ``""``)."""
    return not duration or duration == INFINITE


def validate_duration(duration: str) -> str:
    """Return *duration* unchanged if it is ``"*"`` or parses, else raise :class:`ConfigError`."""
    if duration != INFINITE:
        parse_duration_ms(duration)
    return duration


def format_duration_ms(ms: int) -> str:
    """Render a millisecond span as a compact human string (``"1d 2h 3m 4s"``)."""
    seconds = abs(int(ms)) // 1000
    if seconds == 0:
        return "0s"
    parts = []
    for unit in ("d", "h", "m", "s"):
        size = UNIT_SECONDS[unit]
        value, seconds = divmod(seconds, size)
        if value:
            parts.append(f"{value}{unit}")
    return " ".join(parts)
