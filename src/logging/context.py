# src/logging/context.py — v2
"""Contextual logging support: attach transport, request kind and file to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per dispatched request.
_transport: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "transport", default=None
)
_kind: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "kind", default=None
)
_file: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    transport: str | None = None
    kind: str | None = None
    file: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        transport=_transport.get(),
        kind=_kind.get(),
        file=_file.get(),
    )


def set_request_context(transport: str, kind: str, file: str | None = None) -> None:
    """Set request-level context (called once per dispatched request)."""
    _transport.set(transport)
    _kind.set(kind)
    _file.set(file)


def clear_context() -> None:
    """Reset all context variables."""
    _transport.set(None)
    _kind.set(None)
    _file.set(None)
