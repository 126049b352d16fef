"""Pydantic models shared across assetcache.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`CacheConfig`, :class:`RequestConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

**Cache models** -- the persisted and in-flight shapes of a cached asset:
    :class:`CacheRecord`, :class:`OutputType`, and :class:`StoreBackend`.

All models use Pydantic v2.
"""

from __future__ import annotations

import base64
import binascii
import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from assetcache import __version__
from assetcache.duration import validate_duration
from assetcache.exceptions import ConfigError


class OutputType(str, enum.Enum):
    """Representation returned by :meth:`~assetcache.cache.AssetCache.resolve`."""

    BUFFER = "buffer"
    TEXT = "text"
    JSON = "json"


class StoreBackend(str, enum.Enum):
    """Which :class:`~assetcache.store.Store` implementation backs a cache key."""

    JSON = "json"
    DISKCACHE = "diskcache"


# --- Cache models ---


class CacheRecord(BaseModel):
    """The persisted unit of cached state for one URL.

    Serialised with ``model_dump(mode="json", by_alias=True)`` as::

        {"cachedAt": 1700000000000, "payload": "<base64>"}

    The payload is base64 text so arbitrary binary content survives a JSON
    round-trip.  On load, the Node ``Buffer.toJSON()`` shape
    (``{"type": "Buffer", "data": [...]}``) and a bare list of byte values
    are also accepted, so stores written by the JavaScript eleventy-cache-assets
    tool stay readable.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    cached_at: int = Field(alias="cachedAt", description="Write time, epoch milliseconds")
    payload: bytes = Field(description="Raw asset bytes")

    @field_validator("payload", mode="before")
    @classmethod
    def _decode_payload(cls, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, str):
            try:
                return base64.b64decode(value.encode("ascii"), validate=True)
            except (binascii.Error, UnicodeEncodeError) as exc:
                raise ValueError(f"payload is not valid base64: {exc}") from exc
        if isinstance(value, dict) and value.get("type") == "Buffer":
            value = value.get("data", [])
        if isinstance(value, list):
            try:
                return bytes(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"payload byte list is invalid: {exc}") from exc
        return value

    @field_serializer("payload", when_used="json")
    def _encode_payload(self, payload: bytes) -> str:
        return base64.b64encode(payload).decode("ascii")

    def to_store(self) -> dict[str, Any]:
        """Return the JSON-serialisable dict written to a store."""
        return self.model_dump(mode="json", by_alias=True)


# --- Configuration models ---


def _check_duration(value: str) -> str:
    try:
        return validate_duration(value)
    except ConfigError as exc:
        raise ValueError(str(exc)) from exc


class CacheConfig(BaseModel):
    """Where and for how long assets are cached."""

    directory: str = Field(default=".cache", description="Cache directory (relative to cwd)")
    default_duration: str = Field(
        default="1d", description="Freshness window used when none is given ('*' = forever)"
    )
    backend: StoreBackend = Field(
        default=StoreBackend.JSON, description="Store backend: json or diskcache"
    )

    @field_validator("default_duration")
    @classmethod
    def _valid_duration(cls, value: str) -> str:
        return _check_duration(value)


class RequestConfig(BaseModel):
    """HTTP settings applied to every fetch."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(default=f"assetcache/{__version__}")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra static headers sent with every request"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/assetcache/config.json``.

    Loaded and saved by :func:`~assetcache.config.load_global_config` and
    :func:`~assetcache.config.save_global_config`.  See
    :func:`~assetcache.config.resolve_config` for how project config,
    environment variables, and CLI flags override these values.
    """

    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
