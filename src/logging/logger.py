# src/logging/logger.py — v3
"""Logger factory with JSON and text formatters and an optional rotating log file."""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from tikaclient.logging.context import get_context

ROOT_LOGGER = "tikaclient"

_ROTATION_RE = re.compile(r"(\d+)\s*([KMG]?B)", re.IGNORECASE)
_ROTATION_FACTORS = {"B": 1, "KB": 1 << 10, "MB": 1 << 20, "GB": 1 << 30}


class JsonFormatter(logging.Formatter):
    """Structured JSON log formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = ctx.as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        # Extra data passed via record.__dict__
        if hasattr(record, "data") and record.data:  # type: ignore[attr-defined]
            log_entry["data"] = record.data  # type: ignore[attr-defined]

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        parts = [
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
        ]
        if ctx.transport:
            parts.append(f"[{ctx.transport}]")
        if ctx.kind:
            parts.append(f"<{ctx.kind}>")
        if ctx.file:
            parts.append(f"({ctx.file})")
        parts.append(f"- {record.getMessage()}")
        line = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Configuration is applied by setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | Path | None = None,
    rotation: str | int = "10MB",
    retention: int = 5,
) -> None:
    """Configure root tikaclient logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to log file (None = stderr only).
        rotation: Max file size before rotation, in bytes or as "10MB".
            Zero disables rotation.
        retention: Number of rotated files to keep.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = TextFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = _file_handler(Path(log_file), rotation, retention)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def rotation_bytes(rotation: str | int) -> int:
    """Size limit of a log file: an int in bytes or a string such as "512KB".

    Raises:
        ValueError: Unparseable or negative size.
    """
    if isinstance(rotation, int):
        size = rotation
    else:
        match = _ROTATION_RE.fullmatch(rotation.strip())
        if not match:
            raise ValueError(f"Invalid log rotation size: {rotation!r}")
        size = int(match.group(1)) * _ROTATION_FACTORS[match.group(2).upper()]
    if size < 0:
        raise ValueError(f"Invalid log rotation size: {rotation!r}")
    return size


def _file_handler(path: Path, rotation: str | int, retention: int) -> logging.FileHandler:
    path = path.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    max_bytes = rotation_bytes(rotation)
    if not max_bytes:
        return logging.FileHandler(path, encoding="utf-8")
    return RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=retention, encoding="utf-8"
    )
