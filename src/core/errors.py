# src/core/errors.py — v1
"""Error hierarchy shared by the dispatcher, resolver, parser and transports.

Every error carries a numeric ``code`` so callers can tell retry-worthy
transport failures from terminal conditions without parsing messages.
"""

from __future__ import annotations

# Error codes surfaced on the exceptions below.
CODE_GENERIC = 0
CODE_REMOTE_NOT_FOUND = 2
CODE_CONNECTION_REFUSED = 7
CODE_TIMEOUT = 28
CODE_PROCESS_TIMEOUT = 124
CODE_PROCESS_LAUNCH = 127


class TikaClientError(Exception):
    """Base class for every error raised by tikaclient."""

    code: int = CODE_GENERIC

    def __init__(self, message: str, code: int | None = None, file: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        self.file = file
        super().__init__(message)


class InvalidArgumentError(TikaClientError, ValueError):
    """Bad parameter value (format, encoding, callback, chunk size...)."""


class UnsupportedOperationError(InvalidArgumentError):
    """Operation not available on the active transport."""


class ConfigurationError(TikaClientError):
    """Configuration is missing, unreadable or internally inconsistent."""


class NotFoundError(TikaClientError):
    """Local file does not exist."""


class RemoteNotFoundError(NotFoundError):
    """Remote URL did not answer with a reachable status."""

    code = CODE_REMOTE_NOT_FOUND


class DownloadError(TikaClientError):
    """Remote file could not be materialized to a local temp file."""


class TransportError(TikaClientError):
    """A request against the engine failed."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        file: str | None = None,
        output: str = "",
    ):
        self.output = output
        super().__init__(message, code=code, file=file)


class TransientTransportError(TransportError):
    """Connection refused, HTTP timeout or process launch failure. Retried."""


class FatalTransportError(TransportError):
    """Non-success status or exit code. Never retried."""


class UnknownRequestTypeError(FatalTransportError):
    """Request kind not recognized (or not supported by the transport)."""

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unknown type {kind}")


class RetryExhaustedError(TransientTransportError):
    """All attempts failed with transient errors."""

    def __init__(self, operation: str, attempts: int, last_error: TransientTransportError):
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{operation} failed after {attempts} attempt(s): {last_error}",
            code=last_error.code,
            file=last_error.file,
            output=last_error.output,
        )


class ResponseFormatError(TikaClientError):
    """Response is empty, not valid JSON, or has an unexpected shape."""


class EmptyResponseError(ResponseFormatError):
    """Engine returned an empty or whitespace-only response."""
