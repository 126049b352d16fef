"""Cache identity derived from a URL.

The key is the first 16 hex digits (64 bits) of the SHA-256 of the UTF-8
encoded URL.  It only names the store file; records inside the file are keyed
by the full URL, so two URLs that collide share a file but never each other's
record.  With 64 bits a collision becomes likely only around four billion
distinct URLs in one directory.
"""

from __future__ import annotations

import hashlib

KEY_LENGTH = 16
FILENAME_PREFIX = "assetcache"


def short_hash(url: str) -> str:
    """Return the stable short key for *url*."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:KEY_LENGTH]


def cache_filename(key: str) -> str:
    """Return the store name for *key*, e.g. ``assetcache-3f2a9c1b0d4e5f67``."""
    return f"{FILENAME_PREFIX}-{key}"
