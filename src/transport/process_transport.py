# src/transport/process_transport.py — v2
"""Process transport: runs tika-app as a one-shot subprocess per request.

Standard output is read in ``chunk_size`` byte blocks and decoded
incrementally, so extracted text can be handed to a streaming sink as it
is produced. Standard error is spooled to a temp file to keep the output
pipe from stalling, and attached to errors as the diagnostic output.
"""

from __future__ import annotations

import codecs
import logging
import os
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Any

from tikaclient.core.errors import (
    CODE_PROCESS_LAUNCH,
    CODE_PROCESS_TIMEOUT,
    ConfigurationError,
    FatalTransportError,
    InvalidArgumentError,
    TransientTransportError,
    UnknownRequestTypeError,
)
from tikaclient.core.models import RequestKind
from tikaclient.streaming.sink import ChunkSink
from tikaclient.transport.base_transport import BaseTransport
from tikaclient.transport.listing import parse_mime_types_text, parse_tree_text

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1_048_576

# tika-app command line flags per request kind.
_KIND_ARGUMENTS: dict[RequestKind, list[str]] = {
    RequestKind.META: ["--json"],
    RequestKind.RMETA_TEXT: ["--jsonRecursive", "--text"],
    RequestKind.RMETA_HTML: ["--jsonRecursive", "--html"],
    RequestKind.RMETA_IGNORE: ["--jsonRecursive", "--metadata"],
    RequestKind.LANG: ["--language"],
    RequestKind.MIME: ["--detect"],
    RequestKind.HTML: ["--html"],
    RequestKind.TEXT: ["--text"],
    RequestKind.TEXT_MAIN: ["--text-main"],
    RequestKind.VERSION: ["--version"],
    RequestKind.DETECTORS: ["--list-detectors"],
    RequestKind.MIME_TYPES: ["--list-supported-types"],
    RequestKind.PARSERS: ["--list-parsers"],
}


class ProcessTransport(BaseTransport):
    """Executes requests through ``java -jar tika-app.jar``."""

    def __init__(
        self,
        jar_path: str | Path,
        java_binary: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout_s: float | None = None,
        java_options: list[str] | None = None,
    ) -> None:
        self._jar_path = Path(jar_path)
        self._java_binary = java_binary or default_java_binary()
        self.chunk_size = chunk_size
        self._timeout_s = timeout_s
        self._java_options = list(java_options or [])

    @property
    def name(self) -> str:
        return "process"

    @property
    def supports_chunk_size(self) -> bool:
        return True

    @property
    def jar_path(self) -> Path:
        return self._jar_path

    @property
    def java_binary(self) -> str:
        return self._java_binary

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, size: int) -> None:
        if size <= 0:
            raise InvalidArgumentError(f"Chunk size must be positive, got {size}")
        self._chunk_size = size

    @property
    def timeout_s(self) -> float | None:
        return self._timeout_s

    @timeout_s.setter
    def timeout_s(self, value: float | None) -> None:
        self._timeout_s = value

    def check(self) -> None:
        """Verify that the JAR file and the Java binary exist.

        Raises:
            ConfigurationError: If either is missing.
        """
        if not self._jar_path.is_file():
            raise ConfigurationError(f"Apache Tika JAR not found: {self._jar_path}")
        if shutil.which(self._java_binary) is None:
            raise ConfigurationError(f"Java binary not found: {self._java_binary}")

    def execute(
        self,
        kind: RequestKind,
        file: str | None = None,
        *,
        encoding: str | None = None,
        sink: ChunkSink | None = None,
    ) -> str:
        kind = RequestKind.parse(kind)
        command = self._build_command(kind, file, encoding)
        logger.debug("Running %s", " ".join(command))

        decoder = _make_decoder(encoding)
        with tempfile.TemporaryFile() as stderr:
            try:
                proc = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=stderr)
            except OSError as e:
                raise TransientTransportError(
                    f"Unable to launch {command[0]}: {e}",
                    code=CODE_PROCESS_LAUNCH,
                    file=file,
                ) from e

            timed_out = threading.Event()
            timer = None
            if self._timeout_s is not None:
                timer = threading.Timer(self._timeout_s, _kill, args=(proc, timed_out))
                timer.daemon = True
                timer.start()

            try:
                output = self._read_output(proc, decoder, sink)
                returncode = proc.wait()
            finally:
                if timer is not None:
                    timer.cancel()
                if proc.stdout is not None:
                    proc.stdout.close()

            stderr.seek(0)
            diagnostic = stderr.read().decode("utf-8", errors="replace").strip()

        if timed_out.is_set():
            raise FatalTransportError(
                f"Apache Tika process timed out after {self._timeout_s}s",
                code=CODE_PROCESS_TIMEOUT,
                file=file,
                output=diagnostic,
            )
        if returncode != 0:
            raise FatalTransportError(
                f"Apache Tika process exited with code {returncode}: {diagnostic or 'no output'}",
                code=returncode,
                file=file,
                output=diagnostic,
            )
        return output

    def decode_listing(self, kind: RequestKind, raw: str) -> Any:
        if kind is RequestKind.MIME_TYPES:
            return parse_mime_types_text(raw)
        if kind in (RequestKind.DETECTORS, RequestKind.PARSERS):
            return parse_tree_text(raw)
        raise UnknownRequestTypeError(kind.value)

    def _build_command(
        self, kind: RequestKind, file: str | None, encoding: str | None
    ) -> list[str]:
        arguments = _KIND_ARGUMENTS.get(kind)
        if arguments is None:
            raise UnknownRequestTypeError(kind.value)

        command = [self._java_binary, *self._java_options, "-jar", str(self._jar_path)]
        command.extend(arguments)
        if encoding:
            command.append(f"--encoding={encoding}")
        if file is not None:
            command.append(file)
        return command

    def _read_output(
        self,
        proc: subprocess.Popen,
        decoder: codecs.IncrementalDecoder,
        sink: ChunkSink | None,
    ) -> str:
        parts: list[str] = []
        assert proc.stdout is not None
        while True:
            block = proc.stdout.read(self._chunk_size)
            if not block:
                break
            text = decoder.decode(block)
            if sink is not None:
                sink.feed(text)
            else:
                parts.append(text)

        tail = decoder.decode(b"", final=True)
        if sink is not None:
            sink.feed(tail)
            return sink.result
        parts.append(tail)
        return "".join(parts)


def _make_decoder(encoding: str | None) -> codecs.IncrementalDecoder:
    try:
        return codecs.getincrementaldecoder(encoding or "utf-8")(errors="replace")
    except LookupError as e:
        raise InvalidArgumentError(f"Unknown encoding: {encoding}") from e


def _kill(proc: subprocess.Popen, flag: threading.Event) -> None:
    if proc.poll() is None:
        flag.set()
        logger.warning("Killing Apache Tika process %d after timeout", proc.pid)
        proc.kill()


def default_java_binary() -> str:
    """``$JAVA_HOME/bin/java`` when JAVA_HOME is set, else ``java`` from PATH."""
    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        return str(Path(java_home) / "bin" / "java")
    return "java"
