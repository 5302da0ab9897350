# src/transport/service_transport.py — v2
"""Service transport: one HTTP request per call against a running tika-server.

Uses a lazily created ``httpx.Client``. Caller options (timeout, headers,
proxy, TLS verification...) are merged over a minimal default set; the
client is rebuilt after any option, host or port change.
"""

from __future__ import annotations

import codecs
import logging
from contextlib import ExitStack
from typing import Any

import httpx

from tikaclient.core.errors import (
    CODE_CONNECTION_REFUSED,
    CODE_TIMEOUT,
    FatalTransportError,
    InvalidArgumentError,
    ResponseFormatError,
    TransientTransportError,
    UnknownRequestTypeError,
)
from tikaclient.core.models import RequestKind
from tikaclient.parsing.response_parser import parse_json_response
from tikaclient.resolver.file_resolver import is_remote
from tikaclient.streaming.sink import ChunkSink
from tikaclient.transport.base_transport import BaseTransport
from tikaclient.transport.listing import normalize_tree_json

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9998
DEFAULT_TIMEOUT_S = 30.0

# httpx.Client keyword arguments accepted as transport options.
ALLOWED_OPTIONS = frozenset({
    "timeout",
    "headers",
    "proxy",
    "verify",
    "cert",
    "auth",
    "follow_redirects",
    "trust_env",
})

_JSON = "application/json"
_TEXT = "text/plain"

# (method, path, Accept) per request kind.
_ENDPOINTS: dict[RequestKind, tuple[str, str, str]] = {
    RequestKind.META: ("PUT", "/meta", _JSON),
    RequestKind.RMETA_TEXT: ("PUT", "/rmeta/text", _JSON),
    RequestKind.RMETA_HTML: ("PUT", "/rmeta/html", _JSON),
    RequestKind.RMETA_IGNORE: ("PUT", "/rmeta/ignore", _JSON),
    RequestKind.LANG: ("PUT", "/language/stream", _TEXT),
    RequestKind.MIME: ("PUT", "/detect/stream", _TEXT),
    RequestKind.HTML: ("PUT", "/tika", "text/html"),
    RequestKind.TEXT: ("PUT", "/tika", _TEXT),
    RequestKind.TEXT_MAIN: ("PUT", "/tika/main", _TEXT),
    RequestKind.VERSION: ("GET", "/version", _TEXT),
    RequestKind.DETECTORS: ("GET", "/detectors", _JSON),
    RequestKind.MIME_TYPES: ("GET", "/mime-types", _JSON),
    RequestKind.PARSERS: ("GET", "/parsers", _JSON),
}

_STATUS_MESSAGES = {
    415: "Unsupported media type",
    422: "Unprocessable document",
    500: "Error while processing document",
}


class ServiceTransport(BaseTransport):
    """Executes requests against tika-server over HTTP."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        options: dict[str, Any] | None = None,
        *,
        scheme: str = "http",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._host = host
        self._port = int(port)
        self._scheme = scheme
        self._options: dict[str, Any] = {"timeout": DEFAULT_TIMEOUT_S, "headers": {}}
        self._transport = transport
        self._http: httpx.Client | None = None
        for key, value in (options or {}).items():
            self.set_option(key, value)

    @classmethod
    def from_url(
        cls,
        url: str,
        options: dict[str, Any] | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> ServiceTransport:
        """Build from ``http://host:port``; a missing port means 9998."""
        parsed = httpx.URL(url)
        if not parsed.host:
            raise InvalidArgumentError(f"Invalid Apache Tika server URL: {url}")
        return cls(
            parsed.host,
            parsed.port or DEFAULT_PORT,
            options,
            scheme=parsed.scheme or "http",
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "service"

    # --- Address & options ---

    @property
    def host(self) -> str:
        return self._host

    @host.setter
    def host(self, value: str) -> None:
        self._host = value
        self._reset()

    @property
    def port(self) -> int:
        return self._port

    @port.setter
    def port(self, value: int) -> None:
        self._port = int(value)
        self._reset()

    @property
    def base_url(self) -> str:
        return f"{self._scheme}://{self._host}:{self._port}"

    @property
    def options(self) -> dict[str, Any]:
        options = dict(self._options)
        options["headers"] = dict(self._options["headers"])
        return options

    def get_option(self, key: str) -> Any:
        return self._options.get(key)

    def set_option(self, key: str, value: Any) -> ServiceTransport:
        """Set one httpx option. Headers are merged over the current ones."""
        if key not in ALLOWED_OPTIONS:
            raise InvalidArgumentError(
                f"Unknown transport option {key!r}. Allowed: {', '.join(sorted(ALLOWED_OPTIONS))}"
            )
        if key == "headers":
            self._options["headers"] = {**self._options["headers"], **dict(value or {})}
        else:
            self._options[key] = value
        self._reset()
        return self

    @property
    def timeout(self) -> Any:
        return self._options.get("timeout")

    def set_timeout(self, timeout: float | httpx.Timeout | None) -> ServiceTransport:
        return self.set_option("timeout", timeout)

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._options["headers"])

    # --- Requests ---

    def check(self) -> None:
        """Issue a version request; connection failures propagate."""
        version = self.execute(RequestKind.VERSION).strip()
        logger.info("Connected to %s (%s)", self.base_url, version)

    def execute(
        self,
        kind: RequestKind,
        file: str | None = None,
        *,
        encoding: str | None = None,
        sink: ChunkSink | None = None,
    ) -> str:
        kind = RequestKind.parse(kind)
        endpoint = _ENDPOINTS.get(kind)
        if endpoint is None:
            raise UnknownRequestTypeError(kind.value)
        method, path, accept = endpoint
        if encoding:
            _check_encoding(encoding)

        headers = {"Accept": accept}
        with ExitStack() as stack:
            content = None
            if file is not None:
                if is_remote(file):
                    headers["fileUrl"] = file
                else:
                    content = stack.enter_context(open(file, "rb"))

            logger.debug("%s %s%s", method, self.base_url, path)
            try:
                with self._client().stream(
                    method, path, headers=headers, content=content
                ) as response:
                    return self._read_response(response, file, encoding, sink)
            except httpx.ConnectError as e:
                raise TransientTransportError(
                    f"Unable to connect to {self.base_url}: {e}",
                    code=CODE_CONNECTION_REFUSED,
                    file=file,
                ) from e
            except httpx.TimeoutException as e:
                raise TransientTransportError(
                    f"Request to {self.base_url}{path} timed out: {e}",
                    code=CODE_TIMEOUT,
                    file=file,
                ) from e
            except httpx.HTTPError as e:
                raise FatalTransportError(
                    f"Request to {self.base_url}{path} failed: {e}", file=file
                ) from e

    def decode_listing(self, kind: RequestKind, raw: str) -> Any:
        data = parse_json_response(raw)
        if kind is RequestKind.MIME_TYPES:
            if not isinstance(data, dict):
                raise ResponseFormatError("Unexpected MIME types response, expected a JSON object")
            return {
                mime: {"alias": [], "supertype": None, **(info or {})}
                for mime, info in data.items()
            }
        if kind in (RequestKind.DETECTORS, RequestKind.PARSERS):
            return normalize_tree_json(data)
        raise UnknownRequestTypeError(kind.value)

    def close(self) -> None:
        self._reset()

    def _read_response(
        self,
        response: httpx.Response,
        file: str | None,
        encoding: str | None,
        sink: ChunkSink | None,
    ) -> str:
        if response.status_code not in (200, 204):
            response.read()
            body = response.text.strip()
            reason = _STATUS_MESSAGES.get(response.status_code, "Unexpected response")
            raise FatalTransportError(
                f"{reason} (HTTP {response.status_code})",
                code=response.status_code,
                file=file,
                output=body,
            )

        if encoding and response.charset_encoding is None:
            response.encoding = encoding

        if response.status_code == 204:
            return sink.result if sink is not None else ""

        if sink is not None:
            for text in response.iter_text():
                sink.feed(text)
            return sink.result

        response.read()
        return response.text

    def _client(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(
                base_url=self.base_url, transport=self._transport, **self._options
            )
        return self._http

    def _reset(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None


def _check_encoding(encoding: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise InvalidArgumentError(f"Unknown encoding: {encoding}") from e
