"""Navigation with retry and page-ready waiting."""

import asyncio
from typing import Optional

from selenium.common.exceptions import InvalidArgumentException

from ..constants import PAGE_READY_POLL_SECS
from ..errors import NavigationFailed
from ..utils.retry import RetryExhausted, retry_op

import logging
logger = logging.getLogger(__name__)


def is_retryable(exc: BaseException) -> bool:
    """A malformed URL fails the same way every time; everything else may be transient."""
    return not isinstance(exc, InvalidArgumentException)


async def wait_document_ready(handle, timeout_ms: int, poll_secs: float = PAGE_READY_POLL_SECS) -> Optional[bool]:
    """
    Poll document.readyState until it is complete or timeout_ms passes.

    Returns:
        True when ready, False on timeout (not fatal), None if waiting is disabled
    """
    if not timeout_ms or timeout_ms <= 0:
        return None

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000.0
    while True:
        try:
            if await asyncio.to_thread(handle.is_document_ready):
                return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Not fatal; the page may be mid-navigation
            logger.debug(f"readyState check failed: {e}")
        if loop.time() >= deadline:
            logger.warning(f"Page not ready after {timeout_ms}ms; continuing")
            return False
        await asyncio.sleep(poll_secs)


async def navigate_to_url(
    handle,
    url: str,
    attempts: int = 3,
    backoff_secs: float = 0.0,
    page_load_timeout_ms: int = 30000,
) -> dict:
    """
    Load url, retrying failed load calls, then wait for the page to settle.

    Raises:
        NavigationFailed: every attempt failed (or the URL was rejected outright)
    """
    try:
        await retry_op(
            lambda: asyncio.to_thread(handle.navigate, url),
            attempts=attempts,
            base_delay=backoff_secs,
            should_retry=is_retryable,
            label=f"navigate {url}",
        )
    except RetryExhausted as e:
        raise NavigationFailed(url, e.attempts, e.last) from e.last

    ready = await wait_document_ready(handle, page_load_timeout_ms)
    return {"url": url, "page_ready": ready}


__all__ = ["is_retryable", "wait_document_ready", "navigate_to_url"]
