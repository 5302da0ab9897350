# src/transport/base_transport.py — v1
"""Abstract transport interface.

A transport executes exactly one request against the engine and returns
the raw textual output. It owns no caching, retry or validation logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tikaclient.core.models import RequestKind
from tikaclient.streaming.sink import ChunkSink


class BaseTransport(ABC):
    """Unified interface for the process-backed and service-backed engines."""

    @abstractmethod
    def execute(
        self,
        kind: RequestKind,
        file: str | None = None,
        *,
        encoding: str | None = None,
        sink: ChunkSink | None = None,
    ) -> str:
        """Run one request and return the raw output.

        When a sink is given, output is fed to it chunk by chunk and the
        sink's assembled result is returned.

        Raises:
            UnknownRequestTypeError: Kind not supported by this transport.
            TransientTransportError: Retry-worthy failure.
            FatalTransportError: Non-success exit code or status.
        """

    @abstractmethod
    def check(self) -> None:
        """Verify that the engine is reachable (binary present, server answering)."""

    @abstractmethod
    def decode_listing(self, kind: RequestKind, raw: str) -> Any:
        """Decode a capability listing (detectors, parsers, mime-types)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Transport identifier ("process" or "service")."""

    @property
    def supports_chunk_size(self) -> bool:
        """Whether output is read in application-level chunks of a set size."""
        return False

    def close(self) -> None:
        """Release resources held by the transport."""
