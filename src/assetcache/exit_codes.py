"""Numeric process exit codes for the ``assetcache`` command line.

Each constant maps to one error category and is referenced by the
corresponding :class:`~assetcache.exceptions.AssetCacheError` subclass.
Shell scripts can branch on the exit code to tell a network failure from a
broken cache directory without parsing stderr.

Example::

    $ assetcache fetch https://example.com/missing.json
    $ echo $?
    4   # EXIT_FETCH_FAILURE -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""A duration string, config file, or backend name was invalid."""

EXIT_FETCH_FAILURE = 4
"""The remote asset could not be retrieved (transport error or non-2xx status)."""

EXIT_STORE_IO_FAILURE = 5
"""The on-disk store could not be read or written."""

EXIT_PARSE_FAILURE = 6
"""The asset could not be decoded into the requested output type."""

EXIT_INTERRUPTED = 130
"""The process was cancelled with Ctrl-C."""
