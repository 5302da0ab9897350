# src/cache/fingerprint.py — v3
"""File identity hashing for response cache keys.

The identity is the caller's path or URL string, not the file content:
two requests naming the same file share cache entries for the client's
lifetime.
"""

from __future__ import annotations

import hashlib

from tikaclient.cache.models import CacheKey
from tikaclient.core.models import RequestKind


def file_identity_hash(file: str) -> str:
    """SHA-1 hex digest of a path or URL string."""
    return hashlib.sha1(file.encode("utf-8")).hexdigest()  # noqa: S324


def compute_cache_key(file: str, kind: RequestKind) -> CacheKey:
    return CacheKey(file_hash=file_identity_hash(file), kind=kind)
