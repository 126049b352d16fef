"""Exception hierarchy for assetcache.

All exceptions inherit from :class:`AssetCacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`assetcache.exit_codes`.
:meth:`~assetcache.cache.AssetCache.resolve` never swallows or retries any of
them; the CLI entry point in :func:`assetcache.app.main` turns them into
process exit codes.

Subclass hierarchy::

    AssetCacheError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 3)
    +-- FetchFailure        (exit 4)
    +-- StoreIOFailure      (exit 5)
    +-- ParseFailure        (exit 6)
"""

from __future__ import annotations

from assetcache.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_FETCH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PARSE_FAILURE,
    EXIT_STORE_IO_FAILURE,
)


class AssetCacheError(Exception):
    """Base exception for all assetcache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AssetCacheError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(AssetCacheError):
    """Raised for malformed durations, invalid config files, and unknown store backends."""

    exit_code = EXIT_CONFIG_ERROR


class FetchFailure(AssetCacheError):
    """Raised when a remote asset cannot be retrieved.

    ``status_code`` and ``status_text`` are set when the transport succeeded
    but the server answered with a non-2xx status.  Both are ``None`` for
    transport-level failures (DNS, refused connection, timeout).

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, if any.
        status_text: HTTP reason phrase of the failed response, if any.
    """

    exit_code = EXIT_FETCH_FAILURE

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text


class StoreIOFailure(AssetCacheError):
    """Raised when the backing store cannot be read or written (permissions, disk full, corruption)."""

    exit_code = EXIT_STORE_IO_FAILURE


class ParseFailure(AssetCacheError):
    """Raised when cached bytes cannot be decoded as the requested output type."""

    exit_code = EXIT_PARSE_FAILURE
