"""Fetch-or-serve cache for one remote asset.

An :class:`AssetCache` is bound to one URL and one cache directory.  Its
store lives at ``<cache_directory>/assetcache-<cache_key>`` and holds one
:class:`~assetcache.models.CacheRecord` per URL.  :meth:`AssetCache.resolve`
returns the stored bytes while they are inside the freshness window and
otherwise fetches, persists, and returns fresh ones.

Example::

    asset = AssetCache("https://example.com/data.json")
    data = await asset.resolve(duration="1h", output_type="json")
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from assetcache.cache.keys import cache_filename, short_hash
from assetcache.client import Fetcher, HttpFetcher
from assetcache.duration import format_duration_ms, is_infinite, parse_duration_ms, validate_duration
from assetcache.exceptions import ConfigError, ParseFailure, StoreIOFailure
from assetcache.models import CacheRecord, GlobalConfig, OutputType, StoreBackend
from assetcache.output import OutputManager, get_output
from assetcache.store import Store, open_store

DEFAULT_DIRECTORY = ".cache"
DEFAULT_DURATION = "1d"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat()


def convert(payload: bytes, output_type: OutputType | str | None = OutputType.BUFFER) -> Any:
    """Convert raw asset bytes to the requested representation.

    Args:
        payload: The cached or freshly fetched bytes.
        output_type: ``"json"`` parses UTF-8 JSON, ``"text"`` decodes UTF-8
            (invalid sequences are replaced), anything else returns
            *payload* unchanged.

    Raises:
        ParseFailure: If ``"json"`` was requested and the bytes are not valid
            UTF-8 JSON.
    """
    if output_type == OutputType.JSON:
        try:
            return json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ParseFailure(f"Asset is not valid JSON: {exc}") from exc
    if output_type == OutputType.TEXT:
        return payload.decode("utf-8", errors="replace")
    return payload


class AssetCache:
    """Disk-backed cache for the asset at one URL.

    The store handle is opened lazily on first use and reused until
    :attr:`url` (to one with a different key) or :attr:`cache_directory`
    changes, at which point the next access reopens it.

    Args:
        url: The asset URL.
        cache_directory: Directory for store files. Defaults to ``.cache``
            relative to the working directory.
        default_duration: Freshness window used when :meth:`resolve` gets
            none. ``"*"`` means never expire.
        backend: Store backend, ``"json"`` or ``"diskcache"``.
        fetcher: Network collaborator; defaults to :class:`HttpFetcher`.
        output: Logger for cache diagnostics; defaults to the global
            :class:`~assetcache.output.OutputManager`.
        clock: Returns the current time in epoch milliseconds.

    Raises:
        ConfigError: If *default_duration* or *backend* is invalid.
    """

    def __init__(
        self,
        url: str,
        cache_directory: Optional[str | Path] = None,
        *,
        default_duration: str = DEFAULT_DURATION,
        backend: StoreBackend | str = StoreBackend.JSON,
        fetcher: Optional[Fetcher] = None,
        output: Optional[OutputManager] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._url: Optional[str] = None
        self._cache_key: Optional[str] = None
        self._cache_directory: Optional[str] = None
        self._store: Optional[Store] = None
        self._store_dirty = True

        try:
            self._backend = StoreBackend(backend)
        except ValueError:
            raise ConfigError(f"Unknown store backend '{backend}'") from None

        self._output = output
        self._fetcher: Fetcher = fetcher or HttpFetcher(output=output)
        self._clock = clock or _now_ms

        self.url = url
        self.cache_directory = cache_directory or DEFAULT_DIRECTORY
        self.default_duration = default_duration

    @classmethod
    def from_config(cls, url: str, config: GlobalConfig, **kwargs: Any) -> AssetCache:
        """Build an AssetCache from a resolved :class:`~assetcache.models.GlobalConfig`.

        Keyword arguments override the config-derived ones.
        """
        options: dict[str, Any] = {
            "default_duration": config.cache.default_duration,
            "backend": config.cache.backend,
        }
        options.update(kwargs)
        if options.get("fetcher") is None:
            options["fetcher"] = HttpFetcher(config.request, output=options.get("output"))
        return cls(url, config.cache.directory, **options)

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    @property
    def url(self) -> str:
        assert self._url is not None
        return self._url

    @url.setter
    def url(self, url: str) -> None:
        key = short_hash(url)
        if key != self._cache_key:
            self._store_dirty = True
        self._cache_key = key
        self._url = url

    @property
    def cache_key(self) -> str:
        assert self._cache_key is not None
        return self._cache_key

    @property
    def cache_directory(self) -> str:
        assert self._cache_directory is not None
        return self._cache_directory

    @cache_directory.setter
    def cache_directory(self, directory: str | Path) -> None:
        directory = str(directory)
        if directory != self._cache_directory:
            self._store_dirty = True
        self._cache_directory = directory

    @property
    def default_duration(self) -> str:
        return self._default_duration

    @default_duration.setter
    def default_duration(self, duration: str) -> None:
        self._default_duration = validate_duration(duration)

    @property
    def backend(self) -> StoreBackend:
        return self._backend

    @property
    def cache_filename(self) -> str:
        return cache_filename(self.cache_key)

    @property
    def cache_path(self) -> Path:
        """Location of the backing store for the current URL and directory."""
        return self.store.path

    # ------------------------------------------------------------------ #
    # Store binding
    # ------------------------------------------------------------------ #

    @property
    def store(self) -> Store:
        """The loaded store for the current key and directory, reopened when stale."""
        if self._store is None or self._store_dirty:
            if self._store is not None:
                self._store.close()
            self._store = open_store(self._backend, self.cache_filename, self.cache_directory)
            self._store_dirty = False
        return self._store

    @property
    def cached_record(self) -> Optional[CacheRecord]:
        """The stored record for :attr:`url`, or ``None`` if never cached.

        Raises:
            StoreIOFailure: If the stored value is not a valid record.
        """
        raw = self.store.get(self.url)
        if raw is None:
            return None
        try:
            return CacheRecord.model_validate(raw)
        except ValidationError as exc:
            raise StoreIOFailure(f"Corrupt cache record for {self.url}: {exc}") from exc

    def close(self) -> None:
        """Release the store handle; the next access reopens it."""
        if self._store is not None:
            self._store.close()
            self._store = None
        self._store_dirty = True

    def __enter__(self) -> AssetCache:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Freshness
    # ------------------------------------------------------------------ #

    @staticmethod
    def parse_duration_ms(duration: str = "0s") -> int:
        return parse_duration_ms(duration)

    def expires_at(self, duration: Optional[str]) -> Optional[int]:
        """Epoch-ms instant at which the stored record goes stale.

        ``None`` when nothing is cached or *duration* never expires.
        """
        record = self.cached_record
        if record is None or is_infinite(duration):
            return None
        assert duration is not None
        return record.cached_at + parse_duration_ms(duration)

    def needs_refetch(self, duration: Optional[str]) -> bool:
        """Decide whether :meth:`resolve` must go to the network.

        * nothing cached: ``True``, whatever the duration;
        * *duration* falsy or ``"*"``: ``False``;
        * otherwise ``True`` once ``cachedAt + duration`` is not in the future.

        Raises:
            ConfigError: If *duration* is malformed.
        """
        record = self.cached_record
        if record is None:
            return True
        if is_infinite(duration):
            return False

        log = self._log
        log.debug(f"Cache check for: {self.url} (duration: {duration})")

        assert duration is not None
        expiration = record.cached_at + parse_duration_ms(duration)
        now = self._clock()
        relative = format_duration_ms(expiration - now)
        if expiration > now:
            log.debug(f"Cache okay, expires in {relative} ({_iso(expiration)})")
            return False

        log.debug(f"Cache expired {relative} ago ({_iso(expiration)})")
        return True

    # ------------------------------------------------------------------ #
    # Fetch / persist
    # ------------------------------------------------------------------ #

    def save(self, payload: bytes) -> CacheRecord:
        """Overwrite the record for :attr:`url` with *payload* and persist it.

        If the write fails the store handle is dropped, so the next access
        reloads whatever is actually on disk.

        Raises:
            StoreIOFailure: If the store cannot be written.
        """
        record = CacheRecord(cached_at=self._clock(), payload=payload)
        store = self.store
        store.put(self.url, record.to_store())
        try:
            store.persist()
        except StoreIOFailure:
            self.close()
            raise
        return record

    async def resolve(
        self,
        duration: Optional[str] = None,
        output_type: OutputType | str | None = OutputType.BUFFER,
    ) -> Any:
        """Return the asset, from the cache when fresh, from the network otherwise.

        Args:
            duration: Freshness window; ``None`` uses :attr:`default_duration`.
            output_type: ``"buffer"`` (bytes), ``"text"`` (str) or ``"json"``
                (parsed value).

        Raises:
            FetchFailure: The fetch failed; nothing was written.
            StoreIOFailure: The cache directory or store could not be used.
            ParseFailure: ``"json"`` was requested for non-JSON bytes.  The
                bytes are still cached.
            ConfigError: *duration* is malformed.
        """
        if duration is None:
            duration = self.default_duration

        if not self.needs_refetch(duration):
            record = self.cached_record
            assert record is not None
            self._log.debug(f"Cache hit: {self.url}")
            return convert(record.payload, output_type)

        self._ensure_directory()
        self._log.info(f"Caching: {self.url}")
        payload = await self._fetcher.fetch(self.url)
        self.save(payload)
        return convert(payload, output_type)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    @property
    def _log(self) -> OutputManager:
        return self._output or get_output()

    def _ensure_directory(self) -> None:
        path = Path(self.cache_directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOFailure(f"Cannot create cache directory {path}: {exc}") from exc


async def fetch_asset(
    url: str,
    duration: Optional[str] = None,
    output_type: OutputType | str | None = OutputType.BUFFER,
    directory: Optional[str | Path] = None,
    **kwargs: Any,
) -> Any:
    """Resolve *url* through a throwaway :class:`AssetCache`.

    Extra keyword arguments (``backend``, ``fetcher``, ``output``, ``clock``,
    ``default_duration``) are passed to the constructor.

    Example::

        logo = await fetch_asset("https://example.com/logo.png", duration="1w")
    """
    with AssetCache(url, directory, **kwargs) as asset:
        return await asset.resolve(duration, output_type)
