# src/streaming/sink.py — v1
"""Chunk sink used to consume extracted text incrementally.

The transport feeds each decoded chunk to the sink, which invokes the
caller's callback once per chunk. The callback may return a string to
replace the chunk's contribution; any other return value keeps the chunk
as received. In accumulate mode the contributions are concatenated, in
replace mode only the last one is kept.
"""

from __future__ import annotations

import importlib
from enum import Enum
from typing import Any, Callable

from tikaclient.core.errors import InvalidArgumentError

ChunkCallback = Callable[[str], Any]


class SinkMode(str, Enum):
    ACCUMULATE = "accumulate"
    REPLACE = "replace"


class ChunkSink:
    """Explicit accumulator fed by a transport, one call per chunk."""

    def __init__(self, callback: ChunkCallback, mode: SinkMode = SinkMode.ACCUMULATE):
        self._callback = callback
        self._mode = mode
        self._parts: list[str] = []
        self.chunks = 0

    @classmethod
    def for_append(cls, callback: ChunkCallback, append: bool) -> ChunkSink:
        return cls(callback, SinkMode.ACCUMULATE if append else SinkMode.REPLACE)

    @property
    def mode(self) -> SinkMode:
        return self._mode

    def feed(self, chunk: str) -> None:
        if not chunk:
            return
        returned = self._callback(chunk)
        piece = returned if isinstance(returned, str) else chunk
        self.chunks += 1
        if self._mode is SinkMode.ACCUMULATE:
            self._parts.append(piece)
        else:
            self._parts = [piece]

    @property
    def result(self) -> str:
        return "".join(self._parts)


def resolve_callback(callback: object) -> ChunkCallback:
    """Validate a callback: a callable, or a string naming an importable callable.

    Accepted string forms: ``"package.module.func"``, ``"package.module:func"``
    and bare builtin names such as ``"print"``.

    Raises:
        InvalidArgumentError: If the value is neither.
    """
    if callable(callback):
        return callback  # type: ignore[return-value]

    if isinstance(callback, str) and callback.strip():
        target = _import_callable(callback.strip())
        if target is not None:
            return target

    raise InvalidArgumentError("Invalid callback")


def _import_callable(path: str) -> ChunkCallback | None:
    """Dynamically import a callable from its fully qualified path."""
    if ":" in path:
        module_path, _, attr = path.partition(":")
    elif "." in path:
        module_path, _, attr = path.rpartition(".")
    else:
        module_path, attr = "builtins", path
    if not module_path or not attr:
        return None

    try:
        module = importlib.import_module(module_path)
    except ImportError:
        return None

    target = getattr(module, attr, None)
    return target if callable(target) else None
