# src/client/retry.py — v2
"""Retry policy for transport calls.

Only transient transport errors are retried. Everything else propagates
on the first failure. Attempts are immediate unless a base delay is set.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from tikaclient.core.errors import RetryExhaustedError, TransientTransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration: total attempts and optional backoff."""

    max_attempts: int = 3
    base_delay_s: float = 0.0
    backoff_factor: float = 2.0
    jitter: bool = False


def is_transient(error: BaseException) -> bool:
    return isinstance(error, TransientTransportError)


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay after a given failed attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


def with_retry(
    fn: Callable[..., T],
    *args: Any,
    config: RetryConfig | None = None,
    operation: str = "request",
    **kwargs: Any,
) -> T:
    """Call ``fn`` until it succeeds or the attempts are used up.

    Raises:
        RetryExhaustedError: If every attempt failed with a transient error.
            The last transient error is chained as the cause.
    """
    config = config or RetryConfig()
    attempts = 0

    while True:
        try:
            return fn(*args, **kwargs)
        except TransientTransportError as e:
            attempts += 1
            if attempts >= config.max_attempts:
                raise RetryExhaustedError(operation, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "%s: transient failure (attempt %d/%d), retrying in %.1fs: %s",
                operation, attempts, config.max_attempts, delay, e,
            )
            if delay > 0:
                time.sleep(delay)
