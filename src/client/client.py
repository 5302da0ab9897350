# src/client/client.py — v2
"""Request dispatcher: one client API over the process and service transports.

Usage:
    from tikaclient.client.client_factory import make
    with make("localhost", 9998) as client:
        print(client.get_text("report.pdf"))

Every extraction call runs the same sequence: validate parameters, check
the engine once, resolve the target file (downloading remote files when
asked), answer cacheable kinds from the per-client cache, call the
transport under the retry policy, store cacheable responses, and remove
any temporary download.
"""

from __future__ import annotations

import codecs
import logging
import os
from typing import Any
from urllib.parse import unquote, urlparse

from tikaclient.cache.response_cache import ResponseCache
from tikaclient.client.retry import RetryConfig, with_retry
from tikaclient.config import versions
from tikaclient.config.settings import Settings
from tikaclient.core.errors import (
    InvalidArgumentError,
    ResponseFormatError,
    UnsupportedOperationError,
)
from tikaclient.core.models import Metadata, RecursiveFormat, RequestKind
from tikaclient.logging.context import clear_context, set_request_context
from tikaclient.parsing.response_parser import parse_json_response
from tikaclient.resolver.file_resolver import FileResolver, is_remote
from tikaclient.resolver.models import ResolvedFile
from tikaclient.streaming.sink import ChunkCallback, ChunkSink, resolve_callback
from tikaclient.transport.base_transport import BaseTransport

logger = logging.getLogger(__name__)

EMBEDDED_DEPTH = "X-TIKA:embedded_depth"
EMBEDDED_RESOURCE_PATH = "X-TIKA:embedded_resource_path"


class Client:
    """Apache Tika client bound to one transport.

    Holds the session state: encoding, streaming callback, download flag,
    retry count, checked flag and the response cache. Not safe for
    concurrent requests.
    """

    def __init__(
        self,
        transport: BaseTransport,
        settings: Settings | None = None,
        resolver: FileResolver | None = None,
    ) -> None:
        settings = settings or Settings()
        self._transport = transport
        self._resolver = resolver or FileResolver(
            probe_timeout_s=settings.remote_probe_timeout_s,
            download_timeout_s=settings.download_timeout_s,
        )
        self._cache = ResponseCache()
        self._encoding: str | None = settings.encoding
        self._callback: ChunkCallback | None = None
        self._callback_append = True
        self._download_remote = settings.download_remote
        self._retry = RetryConfig(
            max_attempts=settings.retries,
            base_delay_s=settings.retry_delay_s,
            backoff_factor=settings.retry_backoff_factor,
        )
        self._checked = False

    # --- Context manager ---

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()
        self._resolver.close()

    # --- Configuration ---

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def encoding(self) -> str | None:
        return self._encoding

    def set_encoding(self, encoding: str) -> Client:
        if not encoding:
            raise InvalidArgumentError("Invalid encoding")
        try:
            codecs.lookup(encoding)
        except LookupError:
            raise InvalidArgumentError(f"Invalid encoding: {encoding}") from None
        self._encoding = encoding
        return self

    @property
    def callback(self) -> ChunkCallback | None:
        return self._callback

    @property
    def callback_append(self) -> bool:
        return self._callback_append

    def set_callback(self, callback: ChunkCallback | str, append: bool = True) -> Client:
        """Install the streaming callback used by text, HTML and main-text requests."""
        self._callback = resolve_callback(callback)
        self._callback_append = bool(append)
        return self

    @property
    def chunk_size(self) -> int | None:
        if not self._transport.supports_chunk_size:
            return None
        return self._transport.chunk_size  # type: ignore[attr-defined]

    def set_chunk_size(self, size: int) -> Client:
        """Set the read chunk size (process transport only).

        Raises:
            UnsupportedOperationError: On the service transport.
        """
        if not self._transport.supports_chunk_size:
            raise UnsupportedOperationError(
                f"Chunk size is not supported on {self._transport.name} mode"
            )
        self._transport.chunk_size = size  # type: ignore[attr-defined]
        return self

    @property
    def download_remote(self) -> bool:
        return self._download_remote

    def set_download_remote(self, download: bool) -> Client:
        self._download_remote = bool(download)
        return self

    @property
    def retries(self) -> int:
        return self._retry.max_attempts

    def set_retries(self, retries: int) -> Client:
        if retries < 1:
            raise InvalidArgumentError(f"Retries must be >= 1, got {retries}")
        self._retry = RetryConfig(
            max_attempts=retries,
            base_delay_s=self._retry.base_delay_s,
            backoff_factor=self._retry.backoff_factor,
            jitter=self._retry.jitter,
        )
        return self

    @property
    def checked(self) -> bool:
        return self._checked

    def set_checked(self, checked: bool) -> Client:
        self._checked = bool(checked)
        return self

    def check(self) -> None:
        """Verify the engine through the transport and mark the client checked.

        Transient failures are retried like any other request.
        """
        with_retry(
            self._transport.check,
            config=self._retry,
            operation=f"{self._transport.name} check",
        )
        self._checked = True

    # --- Extraction ---

    def get_metadata(self, file: str) -> Metadata:
        response = parse_json_response(self.request(RequestKind.META, file), file=file)
        if not isinstance(response, dict):
            raise ResponseFormatError(f"Unexpected metadata response for {file}", file=file)
        return Metadata.make(response, file)

    def get_recursive_metadata(
        self, file: str, format: RecursiveFormat | str | None = RecursiveFormat.IGNORE
    ) -> dict[str, Metadata]:
        """Metadata of the document and every embedded resource, keyed by name.

        The top-level item is named after the file; embedded items append
        their embedded resource path to that name.
        """
        fmt = _recursive_format(format)
        kind = RequestKind.recursive(fmt)
        response = parse_json_response(self.request(kind, file), file=file)
        if not isinstance(response, list):
            raise ResponseFormatError(f"Unexpected metadata response for {file}", file=file)

        base = _base_name(file)
        metadata: dict[str, Metadata] = {}
        for item in response:
            if not isinstance(item, dict):
                raise ResponseFormatError(
                    f"Unexpected recursive metadata item for {file}", file=file
                )
            name = base
            if _as_depth(item.get(EMBEDDED_DEPTH)) > 0:
                name += str(item.get(EMBEDDED_RESOURCE_PATH, ""))
            metadata[name] = Metadata.make(item, file)
        return metadata

    def get_language(self, file: str) -> str:
        return self.request(RequestKind.LANG, file).strip()

    def get_mime(self, file: str) -> str:
        return self.request(RequestKind.MIME, file).strip()

    def get_html(
        self, file: str, callback: ChunkCallback | str | None = None, append: bool = True
    ) -> str:
        if callback is not None:
            self.set_callback(callback, append)
        return self.request(RequestKind.HTML, file)

    def get_text(
        self, file: str, callback: ChunkCallback | str | None = None, append: bool = True
    ) -> str:
        if callback is not None:
            self.set_callback(callback, append)
        return self.request(RequestKind.TEXT, file)

    def get_main_text(
        self, file: str, callback: ChunkCallback | str | None = None, append: bool = True
    ) -> str:
        if callback is not None:
            self.set_callback(callback, append)
        return self.request(RequestKind.TEXT_MAIN, file)

    # --- Engine information ---

    def get_version(self) -> str:
        return self.request(RequestKind.VERSION).strip()

    def get_supported_mime_types(self) -> dict[str, dict[str, Any]]:
        return self._listing(RequestKind.MIME_TYPES)

    def get_available_detectors(self) -> dict[str, Any]:
        return self._listing(RequestKind.DETECTORS)

    def get_available_parsers(self) -> dict[str, Any]:
        return self._listing(RequestKind.PARSERS)

    def get_supported_versions(self) -> list[str]:
        return versions.get_supported_versions()

    def is_version_supported(self, version: str) -> bool:
        return versions.is_version_supported(version)

    # --- Dispatch ---

    def check_request(
        self,
        kind: RequestKind | str,
        file: str | None = None,
        *,
        download: bool | None = None,
    ) -> ResolvedFile | None:
        """Validate the target of a request, downloading remote files if enabled.

        Engine information kinds take no file and skip validation. ``download``
        overrides the client's remote download flag for this call; a URL is
        probed either way.

        Raises:
            InvalidArgumentError: A file is required but none was given.
            NotFoundError: Local file does not exist.
            RemoteNotFoundError: URL is unreachable.
            DownloadError: URL could not be downloaded.
        """
        kind = RequestKind.parse(kind)
        if not kind.requires_file:
            return None
        if not file:
            raise InvalidArgumentError(f"A file is required for {kind.value} requests")
        if download is None:
            download = self._download_remote and is_remote(file)
        return self._resolver.resolve(file, download=download)

    def request(self, kind: RequestKind | str, file: str | None = None) -> str:
        """Run one request and return the raw response."""
        kind = RequestKind.parse(kind)
        set_request_context(self._transport.name, kind.value, file)
        try:
            # Cached responses need no local copy of a remote file.
            hit = file is not None and kind.cacheable and self._cache.contains(file, kind)
            resolved = self.check_request(kind, file, download=False if hit else None)
            try:
                if not self._checked:
                    self.check()
                return self._dispatch(kind, file, resolved)
            finally:
                if resolved is not None:
                    resolved.cleanup()
        finally:
            clear_context()

    def _dispatch(
        self, kind: RequestKind, file: str | None, resolved: ResolvedFile | None
    ) -> str:
        if file is not None and kind.cacheable:
            cached = self._cache.get(file, kind)
            if cached is not None:
                return cached

        target = resolved.path if resolved is not None else None
        response = with_retry(
            self._execute,
            kind,
            target,
            config=self._retry,
            operation=f"{self._transport.name} {kind.value}",
        )

        if file is not None and kind.cacheable:
            self._cache.put(file, kind, response)
        return response

    def _execute(self, kind: RequestKind, target: str | None) -> str:
        sink = None
        if kind.streamable and self._callback is not None:
            sink = ChunkSink.for_append(self._callback, self._callback_append)
        return self._transport.execute(kind, target, encoding=self._encoding, sink=sink)

    def _listing(self, kind: RequestKind) -> Any:
        return self._transport.decode_listing(kind, self.request(kind))


def _recursive_format(value: RecursiveFormat | str | None) -> RecursiveFormat:
    if value is None:
        return RecursiveFormat.IGNORE
    try:
        return RecursiveFormat(value)
    except ValueError:
        raise InvalidArgumentError(
            "Unknown recursive type (must be text, html, ignore or None)"
        ) from None


def _base_name(file: str) -> str:
    """Last path segment of a local path or URL."""
    if is_remote(file):
        return os.path.basename(unquote(urlparse(file).path.rstrip("/")))
    return os.path.basename(file)


def _as_depth(value: Any) -> int:
    if isinstance(value, list):
        value = value[0] if value else 0
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
