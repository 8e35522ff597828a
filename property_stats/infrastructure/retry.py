"""Synchronous retry helper with jittered exponential backoff."""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts."""

    total: int = 5  # retries, not counting the first attempt
    base: float = 0.05  # base backoff seconds
    cap: float = 1.0  # max backoff seconds
    jitter: bool = True

    def backoff(self, attempt: int) -> float:
        """Return the sleep before retry number ``attempt`` (0-based)."""
        delay = min(self.cap, self.base * (2**attempt))
        if self.jitter:
            delay = random.uniform(0, delay)  # noqa: S311
        return delay


def retry_call(
    fn: Callable[[], T],
    *,
    policy: RetryPolicy,
    retry_on: Callable[[Exception], bool],
    sleep: Callable[[float], None] = time.sleep,
    logger=None,
) -> T:
    """Call ``fn`` until it succeeds or the retry budget is exhausted.

    Args:
        fn: Zero-arg function to execute.
        policy: RetryPolicy defining count/backoff.
        retry_on: Predicate returning True for exceptions worth retrying.
        sleep: Sleep function, replaced in tests.
        logger: Optional logger notified before each retry.

    Returns:
        The return value of ``fn``.

    Raises:
        The last exception if it is not retryable or retries are exhausted.
    """
    attempt = 0
    while True:
        try:
            return fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= policy.total or not retry_on(exc):
                raise
            delay = policy.backoff(attempt)
            if logger is not None:
                logger.warning(
                    f"Retrying after transient error "
                    f"(attempt {attempt + 1}/{policy.total}): {exc}"
                )
        sleep(delay)
        attempt += 1


__all__ = ["RetryPolicy", "retry_call"]
