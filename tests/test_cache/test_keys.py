"""Tests for URL-derived cache keys."""

from __future__ import annotations

import hashlib

from assetcache.cache import cache_filename, short_hash


class TestShortHash:
    def test_deterministic(self) -> None:
        assert short_hash("https://example.com/a") == short_hash("https://example.com/a")

    def test_known_value(self) -> None:
        """The key must not change between releases or cached files are orphaned."""
        url = "https://example.com/a.json"
        expected = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
        assert short_hash(url) == expected

    def test_length_and_alphabet(self) -> None:
        key = short_hash("https://example.com/")
        assert len(key) == 16
        assert set(key) <= set("0123456789abcdef")

    def test_distinct_urls_distinct_keys(self) -> None:
        urls = [f"https://example.com/item/{i}" for i in range(2000)]
        assert len({short_hash(u) for u in urls}) == len(urls)

    def test_query_string_matters(self) -> None:
        assert short_hash("https://example.com/?a=1") != short_hash("https://example.com/?a=2")

    def test_unicode_url(self) -> None:
        assert short_hash("https://例え.jp/パス") == short_hash("https://例え.jp/パス")


def test_cache_filename_prefix() -> None:
    assert cache_filename("0123456789abcdef") == "assetcache-0123456789abcdef"
