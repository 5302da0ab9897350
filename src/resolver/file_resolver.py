# src/resolver/file_resolver.py — v1
"""Validate request targets and materialize remote files.

Local paths must exist. URLs must answer a reachability probe with
status 200. When downloading is requested, a URL is streamed to a
``TIKA*`` file in the system temp directory; the caller owns the
returned ResolvedFile and removes the download with ``cleanup()``.
"""

from __future__ import annotations

import logging
import os
import tempfile

import httpx

from tikaclient.core.errors import (
    CODE_GENERIC,
    DownloadError,
    NotFoundError,
    RemoteNotFoundError,
)
from tikaclient.resolver.models import ResolvedFile

logger = logging.getLogger(__name__)

TEMP_PREFIX = "TIKA"


def is_remote(file: str) -> bool:
    """Whether the identifier is an http(s) URL."""
    return file.lower().startswith(("http://", "https://"))


class FileResolver:
    """Local existence check, remote reachability probe and optional download."""

    def __init__(
        self,
        probe_timeout_s: float = 5.0,
        download_timeout_s: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._probe_timeout_s = probe_timeout_s
        self._download_timeout_s = download_timeout_s
        self._transport = transport
        self._http: httpx.Client | None = None

    def resolve(self, file: str, download: bool = False) -> ResolvedFile:
        """Validate ``file`` and return what the transport should receive.

        Raises:
            NotFoundError: Local file does not exist.
            RemoteNotFoundError: URL is unreachable or answers a non-200 status.
            DownloadError: URL could not be downloaded.
        """
        if not is_remote(file):
            if not os.path.exists(file):
                raise NotFoundError(f"File {file} can't be opened", file=file)
            return ResolvedFile(source=file, path=file)

        self.probe(file)

        if download:
            return ResolvedFile(
                source=file, path=self.download(file), temporary=True, remote=True
            )
        return ResolvedFile(source=file, path=file, remote=True)

    def probe(self, url: str) -> None:
        """Check that a URL answers status 200 (HEAD, falling back to GET on 405)."""
        client = self._client()
        try:
            response = client.head(url, timeout=self._probe_timeout_s)
            if response.status_code == 405:
                with client.stream("GET", url, timeout=self._probe_timeout_s) as streamed:
                    response = streamed
        except httpx.HTTPError as e:
            raise RemoteNotFoundError(f"File {url} can't be opened: {e}", file=url) from e

        if response.status_code != 200:
            raise RemoteNotFoundError(
                f"File {url} can't be opened (HTTP {response.status_code})", file=url
            )

    def download(self, url: str) -> str:
        """Stream a URL into a new temp file and return its path."""
        fd, dest = tempfile.mkstemp(prefix=TEMP_PREFIX)
        logger.info("Downloading %s to %s", url, dest)
        try:
            with os.fdopen(fd, "wb") as fh:
                with self._client().stream(
                    "GET", url, timeout=self._download_timeout_s
                ) as response:
                    if response.status_code != 200:
                        raise DownloadError(
                            f"{url} can't be downloaded (HTTP {response.status_code})",
                            code=response.status_code,
                            file=url,
                        )
                    for block in response.iter_bytes():
                        fh.write(block)
        except httpx.HTTPError as e:
            _remove_quietly(dest)
            raise DownloadError(f"{url} can't be downloaded: {e}", code=CODE_GENERIC, file=url) from e
        except (DownloadError, OSError):
            _remove_quietly(dest)
            raise
        return dest

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def _client(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(follow_redirects=True, transport=self._transport)
        return self._http


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
