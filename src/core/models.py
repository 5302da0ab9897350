# src/core/models.py — v1
"""Core domain types: RequestKind, RecursiveFormat and the Metadata entities.

Metadata entities are built from a parsed JSON object returned by the
engine. They hold no reference back to the client that produced them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from tikaclient.core.errors import UnknownRequestTypeError


class RecursiveFormat(str, Enum):
    """Content handler used for recursive metadata requests."""

    TEXT = "text"
    HTML = "html"
    IGNORE = "ignore"


class RequestKind(str, Enum):
    """Closed set of request kinds understood by the transports."""

    META = "meta"
    RMETA_TEXT = "rmeta/text"
    RMETA_HTML = "rmeta/html"
    RMETA_IGNORE = "rmeta/ignore"
    LANG = "lang"
    MIME = "mime"
    HTML = "html"
    TEXT = "text"
    TEXT_MAIN = "text-main"
    VERSION = "version"
    DETECTORS = "detectors"
    MIME_TYPES = "mime-types"
    PARSERS = "parsers"

    @classmethod
    def parse(cls, value: RequestKind | str) -> RequestKind:
        """Coerce a wire string into a RequestKind.

        Raises:
            UnknownRequestTypeError: If the value names no known kind.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownRequestTypeError(value) from None

    @classmethod
    def recursive(cls, fmt: RecursiveFormat) -> RequestKind:
        return cls(f"rmeta/{fmt.value}")

    @property
    def cacheable(self) -> bool:
        return self in _CACHEABLE

    @property
    def streamable(self) -> bool:
        return self in _STREAMABLE

    @property
    def requires_file(self) -> bool:
        return self not in _FILELESS

    @property
    def is_recursive(self) -> bool:
        return self.value.startswith("rmeta/")


_CACHEABLE = frozenset({RequestKind.LANG, RequestKind.META})
_STREAMABLE = frozenset({RequestKind.HTML, RequestKind.TEXT, RequestKind.TEXT_MAIN})
_FILELESS = frozenset({
    RequestKind.VERSION,
    RequestKind.DETECTORS,
    RequestKind.MIME_TYPES,
    RequestKind.PARSERS,
})


class Metadata(BaseModel):
    """Property bag describing one document (or one embedded resource)."""

    file: str
    mime: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def make(cls, response: dict[str, Any], file: str) -> Metadata:
        """Build the right Metadata subtype from a parsed JSON object."""
        mime = _mime_of(response)
        if mime and mime.startswith("image/"):
            return ImageMetadata.from_response(response, file, mime)
        return DocumentMetadata.from_response(response, file, mime)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a raw property value."""
        return self.meta.get(key, default)


class DocumentMetadata(Metadata):
    """Metadata of a text-bearing document (PDF, office files, HTML...)."""

    title: str | None = None
    author: str | None = None
    language: str | None = None
    content: str | None = None
    pages: int | None = None
    words: int | None = None
    created: datetime | None = None
    updated: datetime | None = None

    @classmethod
    def from_response(
        cls, response: dict[str, Any], file: str, mime: str | None
    ) -> DocumentMetadata:
        return cls(
            file=file,
            mime=mime,
            meta=response,
            title=_first(response, "dc:title", "title"),
            author=_first(response, "dc:creator", "meta:author", "Author"),
            language=_first(response, "dc:language", "language"),
            content=_first(response, "X-TIKA:content"),
            pages=_as_int(_first(response, "xmpTPg:NPages", "meta:page-count")),
            words=_as_int(_first(response, "meta:word-count")),
            created=_as_datetime(_first(response, "dcterms:created", "meta:creation-date")),
            updated=_as_datetime(_first(response, "dcterms:modified", "Last-Modified")),
        )


class ImageMetadata(Metadata):
    """Metadata of an image."""

    width: int | None = None
    height: int | None = None

    @classmethod
    def from_response(
        cls, response: dict[str, Any], file: str, mime: str | None
    ) -> ImageMetadata:
        return cls(
            file=file,
            mime=mime,
            meta=response,
            width=_as_int(_first(response, "tiff:ImageWidth", "Image Width")),
            height=_as_int(_first(response, "tiff:ImageLength", "Image Height")),
        )


def _mime_of(response: dict[str, Any]) -> str | None:
    """Content-Type without parameters (``text/plain; charset=UTF-8`` → ``text/plain``)."""
    value = _first(response, "Content-Type")
    if not value:
        return None
    return str(value).split(";", 1)[0].strip() or None


def _first(response: dict[str, Any], *keys: str) -> Any:
    """First non-empty value among keys; lists collapse to their first element."""
    for key in keys:
        value = response.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if value not in (None, ""):
            return value
    return None


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    # Some parsers report "12 pixels" for image dimensions.
    token = str(value).strip().split(" ", 1)[0]
    try:
        return int(float(token))
    except ValueError:
        return None


def _as_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
