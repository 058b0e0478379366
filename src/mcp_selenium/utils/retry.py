"""Retry logic for transient driver failures."""

import asyncio
from typing import Awaitable, Callable, Optional

import logging
logger = logging.getLogger(__name__)


class RetryExhausted(Exception):
    """All attempts failed (or a non-retryable fault stopped the loop early)."""

    def __init__(self, attempts: int, last: BaseException):
        self.attempts = attempts
        self.last = last
        super().__init__(f"gave up after {attempts} attempt(s): {last}")


async def retry_op(
    fn: Callable[[], Awaitable],
    attempts: int = 3,
    base_delay: float = 0.0,
    should_retry: Optional[Callable[[BaseException], bool]] = None,
    label: str = "operation",
):
    """
    Await fn() up to `attempts` times.

    Args:
        fn: Zero-argument coroutine factory; called once per attempt
        attempts: Maximum number of attempts (at least 1)
        base_delay: Delay before the second attempt in seconds, doubled for each
            further attempt. 0 retries immediately.
        should_retry: Predicate deciding whether a fault is worth another attempt
        label: Name used in log messages

    Returns:
        The result of the first successful call

    Raises:
        RetryExhausted: carrying the attempt count and the last fault
    """
    attempts = max(1, int(attempts))
    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if attempt == attempts:
                raise RetryExhausted(attempt, e) from e
            if should_retry is not None and not should_retry(e):
                logger.info(f"{label} failed with non-retryable {e.__class__.__name__}; not retrying")
                raise RetryExhausted(attempt, e) from e
            logger.warning(f"{label} attempt {attempt}/{attempts} failed: {e.__class__.__name__}: {e}")
            if base_delay > 0:
                await asyncio.sleep(base_delay * (2 ** (attempt - 1)))


__all__ = ["RetryExhausted", "retry_op"]
