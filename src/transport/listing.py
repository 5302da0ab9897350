# src/transport/listing.py — v1
"""Decoders for capability listings.

Both transports return the same shapes:

- mime types: ``{mime: {"alias": [...], "supertype": str | None, ...}}``
- detectors and parsers: a tree ``{"name": str, "composite": bool, "children": [...]}``

The service answers in JSON already; tika-app prints indented text.
"""

from __future__ import annotations

import re
from typing import Any

from tikaclient.core.errors import ResponseFormatError

_COMPOSITE_SUFFIX = re.compile(r"\s*\((?:Composite\s+\w+|composite)\)\s*:?\s*$", re.IGNORECASE)


def parse_mime_types_text(raw: str) -> dict[str, dict[str, Any]]:
    """Decode ``--list-supported-types`` output.

    Example::

        application/pdf
          alias:     application/x-pdf
          supertype: application/octet-stream
          parser:    org.apache.tika.parser.pdf.PDFParser
    """
    types: dict[str, dict[str, Any]] = {}
    current: dict[str, Any] | None = None

    for line in raw.splitlines():
        if not line.strip():
            continue
        if not line[0].isspace():
            current = {"alias": [], "supertype": None}
            types[line.strip()] = current
            continue
        if current is None:
            raise ResponseFormatError(f"Unexpected line in MIME types listing: {line!r}")
        key, sep, value = line.strip().partition(":")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if key == "alias":
            current["alias"].append(value)
        else:
            current[key] = value

    return types


def parse_tree_text(raw: str) -> dict[str, Any]:
    """Decode ``--list-parsers``/``--list-detectors`` indented output into a tree.

    Composite entries are flagged by a ``(Composite ...)`` suffix or a
    trailing colon. Several top-level entries are wrapped under an
    unnamed composite root.
    """
    root: dict[str, Any] = {"name": None, "composite": True, "children": []}
    stack: list[tuple[int, dict[str, Any]]] = [(-1, root)]

    for line in raw.splitlines():
        if not line.strip():
            continue
        indent = len(line) - len(line.lstrip())
        text = line.strip()
        composite = bool(_COMPOSITE_SUFFIX.search(text)) or text.endswith(":")
        name = _COMPOSITE_SUFFIX.sub("", text).rstrip(":").strip()
        node: dict[str, Any] = {"name": name, "composite": composite, "children": []}

        while stack[-1][0] >= indent:
            stack.pop()
        stack[-1][1]["children"].append(node)
        stack.append((indent, node))

    if len(root["children"]) == 1:
        return root["children"][0]
    return root


def normalize_tree_json(data: Any) -> dict[str, Any]:
    """Normalize a server JSON tree to the shared node shape."""
    if not isinstance(data, dict):
        raise ResponseFormatError("Unexpected listing response, expected a JSON object")
    return {
        "name": data.get("name"),
        "composite": bool(data.get("composite", False)),
        "children": [normalize_tree_json(child) for child in data.get("children", [])],
    }
