# src/cache/response_cache.py — v1
"""In-memory per-client response cache.

Only cacheable request kinds are stored. Entries never expire; the cache
lives as long as the client that owns it. Not safe for concurrent use:
a caller sharing a client across threads must guard the whole
lookup-request-store sequence.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from tikaclient.cache.fingerprint import compute_cache_key
from tikaclient.cache.models import CacheEntry, CacheKey
from tikaclient.core.models import RequestKind

logger = logging.getLogger(__name__)


class ResponseCache:
    """Maps (file identity, request kind) to a previously obtained raw response."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def is_cacheable(kind: RequestKind) -> bool:
        return kind.cacheable

    def contains(self, file: str, kind: RequestKind) -> bool:
        return compute_cache_key(file, kind) in self._entries

    def get(self, file: str, kind: RequestKind) -> str | None:
        """Return the cached raw response, or None on a miss."""
        entry = self._entries.get(compute_cache_key(file, kind))
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        logger.debug("Cache hit for %s (%s)", file, kind.value)
        return entry.response

    def put(self, file: str, kind: RequestKind, response: str) -> bool:
        """Store a response. Returns False (and stores nothing) for non-cacheable kinds."""
        if not self.is_cacheable(kind):
            return False
        self._entries[compute_cache_key(file, kind)] = CacheEntry(
            file=file,
            kind=kind,
            response=response,
            created_at=datetime.now(timezone.utc),
        )
        return True

    def entries(self) -> list[CacheEntry]:
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
