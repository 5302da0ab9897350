# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests using testcontainers.

Container lifecycle:
- session scope: the Apache Tika server starts once per pytest session
- function scope: a fresh client per test

Custom container wrapper:
- Uses DockerContainer directly with bridge network IP + internal port
- Required for devcontainer with docker-outside-of-docker (socket mount)
- Built-in testcontainers helpers return localhost:mapped_port which is
  unreachable from inside a devcontainer
"""

from __future__ import annotations

import logging
import time

import pytest

from tikaclient.client.client_factory import make
from tikaclient.config.settings import Settings

logger = logging.getLogger(__name__)


# ── Pytest markers ──────────────────────────────────────────────

def pytest_configure(config):
    config.addinivalue_line("markers", "tika: marks tests requiring an Apache Tika server container")


# =====================================================================
#  DEVCONTAINER NETWORKING HELPERS
# =====================================================================

def _get_container_bridge_ip(container, max_attempts: int = 10) -> str:
    """Get container bridge network IP with retries."""
    for attempt in range(max_attempts):
        try:
            wrapped = container.get_wrapped_container()
            wrapped.reload()
            networks = wrapped.attrs.get("NetworkSettings", {}).get("Networks", {})
            for net_name, net_info in networks.items():
                ip = net_info.get("IPAddress", "")
                if ip:
                    logger.info(
                        "Container %s IP: %s (network: %s, attempt %d)",
                        wrapped.short_id, ip, net_name, attempt + 1,
                    )
                    return ip
            logger.debug("Container IP empty, attempt %d/%d", attempt + 1, max_attempts)
        except Exception as e:
            logger.debug("Error getting IP (attempt %d): %s", attempt + 1, e)
        time.sleep(0.5)

    raise RuntimeError(
        f"Could not obtain container bridge IP after {max_attempts} attempts"
    )


def _docker_available() -> bool:
    """Check if Docker daemon is reachable."""
    try:
        import docker
        client = docker.from_env()
        client.ping()
        return True
    except Exception:
        return False


skip_no_docker = pytest.mark.skipif(
    not _docker_available(),
    reason="Docker daemon not available",
)


# =====================================================================
#  APACHE TIKA SERVER CONTAINER — session scope (bridge IP)
# =====================================================================

TIKA_IMAGE = "apache/tika:2.9.2.1"
TIKA_INTERNAL_PORT = 9998


@pytest.fixture(scope="session")
def tika_container():
    if not _docker_available():
        pytest.skip("Docker not available")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = DockerContainer(TIKA_IMAGE).with_exposed_ports(TIKA_INTERNAL_PORT)
    container.start()
    wait_for_logs(container, predicate=r"Started Apache Tika server", timeout=120)
    time.sleep(1)

    ip = _get_container_bridge_ip(container)
    logger.info("Apache Tika ready at %s:%d", ip, TIKA_INTERNAL_PORT)
    yield {"host": ip, "port": TIKA_INTERNAL_PORT}
    container.stop()


@pytest.fixture(scope="session")
def tika_url(tika_container) -> str:
    c = tika_container
    return f"http://{c['host']}:{c['port']}"


@pytest.fixture
def tika_client(tika_url):
    client = make(tika_url, settings=Settings(_env_file=None))
    yield client
    client.close()


@pytest.fixture
def english_document(tmp_path):
    path = tmp_path / "letter.txt"
    path.write_text(
        "Dear colleagues,\n\n"
        "The quarterly report is attached. Revenue grew in every region and the "
        "board has approved the budget for the coming year. Please review the "
        "figures before the meeting on Thursday.\n",
        encoding="utf-8",
    )
    return path
