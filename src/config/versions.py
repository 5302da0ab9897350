# src/config/versions.py — v1
"""Supported Apache Tika versions, read from the packaged descriptor.

The descriptor is read once per process on first use and never reloaded.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from tikaclient.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DESCRIPTOR_PATH = Path(__file__).with_name("supported_versions.json")
DESCRIPTOR_KEY = "supported-versions"

_versions: tuple[str, ...] | None = None
_versions_lock = threading.Lock()


def load_supported_versions(path: Path = DESCRIPTOR_PATH) -> tuple[str, ...]:
    """Read the supported-versions list from a JSON descriptor.

    Raises:
        ConfigurationError: If the descriptor is missing, unreadable or empty.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"An error occurred trying to read the supported versions descriptor {path}: {e}"
        ) from e

    versions = data.get(DESCRIPTOR_KEY) if isinstance(data, dict) else None
    if not versions or not isinstance(versions, list):
        raise ConfigurationError(f"No {DESCRIPTOR_KEY!r} list found in {path}")

    return tuple(str(v) for v in versions)


def get_supported_versions() -> list[str]:
    """Return the supported versions, loading the descriptor on first call."""
    global _versions
    if _versions is None:
        with _versions_lock:
            if _versions is None:
                _versions = load_supported_versions()
                logger.debug("Loaded %d supported Tika versions", len(_versions))
    return list(_versions)


def is_version_supported(version: str) -> bool:
    return version in get_supported_versions()
