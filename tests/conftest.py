# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a scripted fake transport, sample engine responses, settings
isolated from .env and temp documents. No engine required.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from tikaclient.client.client import Client
from tikaclient.config.settings import Settings
from tikaclient.core.models import RequestKind
from tikaclient.streaming.sink import ChunkSink
from tikaclient.transport.base_transport import BaseTransport


class FakeTransport(BaseTransport):
    """Transport returning scripted responses.

    Each scripted item is either a string (returned) or an exception
    instance (raised). A per-kind queue is consumed first, then the
    per-kind default, then ``default``. Errors in ``check_errors`` are
    raised by successive checks.
    """

    def __init__(self, default: str = "", name: str = "fake", chunk_size: int | None = None):
        self._default = default
        self._name = name
        self._queues: dict[RequestKind, list[Any]] = {}
        self._defaults: dict[RequestKind, Any] = {}
        self._chunk_size = chunk_size
        self.calls: list[dict[str, Any]] = []
        self.check_calls = 0
        self.check_errors: list[BaseException] = []
        self.closed = False

    def script(self, kind: RequestKind, *items: Any) -> FakeTransport:
        self._queues.setdefault(kind, []).extend(items)
        return self

    def respond(self, kind: RequestKind, item: Any) -> FakeTransport:
        self._defaults[kind] = item
        return self

    @property
    def name(self) -> str:
        return self._name

    @property
    def supports_chunk_size(self) -> bool:
        return self._chunk_size is not None

    @property
    def chunk_size(self) -> int | None:
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, size: int) -> None:
        self._chunk_size = size

    @property
    def execute_count(self) -> int:
        return len(self.calls)

    def execute(
        self,
        kind: RequestKind,
        file: str | None = None,
        *,
        encoding: str | None = None,
        sink: ChunkSink | None = None,
    ) -> str:
        kind = RequestKind.parse(kind)
        self.calls.append({"kind": kind, "file": file, "encoding": encoding, "sink": sink})
        queue = self._queues.get(kind)
        item = queue.pop(0) if queue else self._defaults.get(kind, self._default)
        if isinstance(item, BaseException):
            raise item
        if sink is not None:
            for piece in item.split("|"):
                sink.feed(piece)
            return sink.result
        return item

    def check(self) -> None:
        self.check_calls += 1
        if self.check_errors:
            raise self.check_errors.pop(0)

    def decode_listing(self, kind: RequestKind, raw: str) -> Any:
        return json.loads(raw)

    def close(self) -> None:
        self.closed = True


# === FIXTURES: Settings & clients ===


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env)."""
    return Settings(_env_file=None)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport():
    """Factory for FakeTransport with custom name or chunk size."""
    return FakeTransport


@pytest.fixture
def client(fake_transport: FakeTransport, settings: Settings) -> Client:
    """Client over the fake transport, already checked."""
    return Client(fake_transport, settings=settings).set_checked(True)


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_document(tmp_path: Path) -> Path:
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4 sample")
    return path


@pytest.fixture
def sample_metadata() -> dict[str, Any]:
    return {
        "Content-Type": "application/pdf",
        "dc:title": "Quarterly report",
        "dc:creator": "Jane Doe",
        "xmpTPg:NPages": "12",
        "dcterms:created": "2023-04-01T10:00:00Z",
    }


@pytest.fixture
def sample_recursive_metadata() -> list[dict[str, Any]]:
    return [
        {
            "Content-Type": "application/pdf",
            "dc:title": "Quarterly report",
            "X-TIKA:embedded_depth": "0",
        },
        {
            "Content-Type": "image/png",
            "tiff:ImageWidth": "640",
            "tiff:ImageLength": "480",
            "X-TIKA:embedded_depth": "1",
            "X-TIKA:embedded_resource_path": "/img1.png",
        },
    ]
