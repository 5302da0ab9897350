# tests/unit/cache/test_unit_response_cache.py — v1
"""Tests for cache/response_cache.py — per-client response cache."""

from __future__ import annotations

from tikaclient.cache.response_cache import ResponseCache
from tikaclient.core.models import RequestKind


class TestResponseCache:
    def test_miss_returns_none(self):
        cache = ResponseCache()
        assert cache.get("a.pdf", RequestKind.META) is None
        assert cache.misses == 1

    def test_put_then_get(self):
        cache = ResponseCache()
        assert cache.put("a.pdf", RequestKind.LANG, "en") is True
        assert cache.get("a.pdf", RequestKind.LANG) == "en"
        assert cache.hits == 1
        assert cache.contains("a.pdf", RequestKind.LANG)

    def test_non_cacheable_not_stored(self):
        cache = ResponseCache()
        assert cache.put("a.pdf", RequestKind.TEXT, "body") is False
        assert len(cache) == 0
        assert not cache.contains("a.pdf", RequestKind.TEXT)

    def test_kinds_are_separate(self):
        cache = ResponseCache()
        cache.put("a.pdf", RequestKind.LANG, "en")
        assert cache.get("a.pdf", RequestKind.META) is None

    def test_files_are_separate(self):
        cache = ResponseCache()
        cache.put("a.pdf", RequestKind.LANG, "en")
        assert cache.get("b.pdf", RequestKind.LANG) is None

    def test_overwrite(self):
        cache = ResponseCache()
        cache.put("a.pdf", RequestKind.LANG, "en")
        cache.put("a.pdf", RequestKind.LANG, "fr")
        assert cache.get("a.pdf", RequestKind.LANG) == "fr"
        assert len(cache) == 1

    def test_entries_and_clear(self):
        cache = ResponseCache()
        cache.put("a.pdf", RequestKind.LANG, "en")
        cache.put("a.pdf", RequestKind.META, "{}")
        entries = cache.entries()
        assert {e.kind for e in entries} == {RequestKind.LANG, RequestKind.META}
        assert all(e.file == "a.pdf" for e in entries)
        cache.clear()
        assert len(cache) == 0

    def test_is_cacheable(self):
        assert ResponseCache.is_cacheable(RequestKind.META)
        assert not ResponseCache.is_cacheable(RequestKind.HTML)
