# src/parsing/response_parser.py — v1
"""Decode raw engine responses."""

from __future__ import annotations

import json
from typing import Any

from tikaclient.core.errors import EmptyResponseError, ResponseFormatError


def parse_json_response(raw: str | None, file: str | None = None) -> Any:
    """Decode a JSON response and return the value unchanged.

    Raises:
        EmptyResponseError: If the response is empty or whitespace only.
        ResponseFormatError: If the response is not valid JSON. The error
            code is the decoder's character position.
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError("Empty response", file=file)

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(
            f"Error parsing JSON response: {e.msg} (line {e.lineno}, column {e.colno})",
            code=e.pos,
            file=file,
        ) from e
