# src/cache/models.py — v2
"""Cache domain models: CacheKey, CacheEntry."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from tikaclient.core.models import RequestKind


class CacheKey(BaseModel):
    """Composite key: digest of the file identifier plus request kind."""

    model_config = ConfigDict(frozen=True)

    file_hash: str
    kind: RequestKind


class CacheEntry(BaseModel):
    """Single cached response."""

    file: str
    kind: RequestKind
    response: str
    created_at: datetime
