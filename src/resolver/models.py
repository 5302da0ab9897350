# src/resolver/models.py — v1
"""Resolved request target."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ResolvedFile:
    """A validated request target.

    ``source`` is the identifier the caller passed (path or URL), ``path``
    is what the transport receives. They differ only when a remote file was
    downloaded, in which case ``temporary`` is set and ``cleanup()`` removes
    the download.
    """

    source: str
    path: str
    temporary: bool = False
    remote: bool = False

    def cleanup(self) -> None:
        if not self.temporary:
            return
        try:
            os.unlink(self.path)
            logger.debug("Removed temporary download %s", self.path)
        except FileNotFoundError:
            pass
        self.temporary = False
