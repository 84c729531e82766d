"""Retry with exponential backoff — stdlib only."""
from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    fn: Callable[[], T],
    *,
    retries: int = 1,
    base_delay: float = 0.5,
    backoff_factor: float = 2.0,
    max_delay: float = 30.0,
    should_retry: Callable[[BaseException], bool] = lambda exc: True,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call *fn*, retrying up to *retries* extra times on retryable failures.

    The delay starts at *base_delay* seconds and is multiplied by
    *backoff_factor* after every attempt. Failures rejected by
    *should_retry* propagate immediately.
    """
    name = getattr(fn, "__qualname__", repr(fn))
    retries = max(0, retries)
    delay = base_delay
    for attempt in range(1, retries + 2):
        try:
            return fn()
        except Exception as exc:
            if not should_retry(exc):
                raise
            if attempt > retries:
                logger.error("%s failed after %d attempts: %s", name, attempt, exc)
                raise
            wait = min(delay, max_delay)
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.1fs",
                name,
                attempt,
                retries + 1,
                exc,
                wait,
            )
            sleep(wait)
            delay *= backoff_factor
    raise AssertionError("unreachable")
