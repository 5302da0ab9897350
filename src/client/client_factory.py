# src/client/client_factory.py — v3
"""Factory: build a Client bound to the right transport.

The transport is picked from the shape of the first argument: a path
ending in ``.jar`` selects the local tika-app process, anything else is
a tika-server host name or URL.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tikaclient.client.client import Client
from tikaclient.config.settings import Settings
from tikaclient.transport.base_transport import BaseTransport
from tikaclient.transport.process_transport import ProcessTransport
from tikaclient.transport.service_transport import DEFAULT_HOST, DEFAULT_PORT, ServiceTransport

logger = logging.getLogger(__name__)


def make(
    target: str | Path | None = None,
    option: str | int | None = None,
    options: dict[str, Any] | None = None,
    check: bool = True,
    settings: Settings | None = None,
) -> Client:
    """Create a client, checking the JAR file or server connection right away.

    Args:
        target: Path to ``tika-app.jar``, a server host name, or a
            ``http://host:port`` URL. Defaults to the configured host.
        option: Java binary for the process transport, or port for the
            service transport.
        options: httpx options for the service transport.
        check: Verify the engine before returning.
        settings: Application settings. Loaded from .env if None.

    Raises:
        ConfigurationError: Process mode with a missing JAR or Java binary.
        TransientTransportError: Service mode with an unreachable server.
    """
    settings = settings or Settings()
    if options is None:
        options = settings.service_options
    transport = _create_transport(target, option, options, settings)
    logger.debug("Creating %s client", transport.name)

    client = Client(transport, settings=settings)
    if check:
        client.check()
    return client


def prepare(
    target: str | Path | None = None,
    option: str | int | None = None,
    options: dict[str, Any] | None = None,
    settings: Settings | None = None,
) -> Client:
    """Create a client and delay the engine check until the first request."""
    return make(target, option, options, check=False, settings=settings)


def create_client(settings: Settings | None = None, check: bool = False) -> Client:
    """Create a client purely from settings (jar path set → process transport)."""
    settings = settings or Settings()
    if settings.uses_process_transport:
        target: str | Path = settings.tika_jar_path  # type: ignore[assignment]
        option: str | int | None = settings.tika_java_binary
    else:
        target = f"{settings.tika_scheme}://{settings.tika_host}:{settings.tika_port}"
        option = None
    return make(target, option, settings.service_options, check=check, settings=settings)


def _create_transport(
    target: str | Path | None,
    option: str | int | None,
    options: dict[str, Any] | None,
    settings: Settings,
) -> BaseTransport:
    if target is not None and str(target).endswith(".jar"):
        return ProcessTransport(
            target,
            java_binary=str(option) if option else settings.tika_java_binary,
            chunk_size=settings.chunk_size,
            timeout_s=settings.tika_process_timeout_s,
        )

    host = str(target) if target else settings.tika_host or DEFAULT_HOST
    if "://" in host:
        return ServiceTransport.from_url(host, options)
    port = int(option) if option else settings.tika_port or DEFAULT_PORT
    return ServiceTransport(host, port, options, scheme=settings.tika_scheme)
