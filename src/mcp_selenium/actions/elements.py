"""Element location and interaction."""

import asyncio
from typing import Any, Optional

from selenium.common.exceptions import NoSuchElementException, TimeoutException

from ..errors import ActionFailed, ElementNotFound, RelayError
from ..locators import Locator


async def wait_for_element(
    handle,
    locator: Locator,
    timeout_ms: int,
    visible: bool = False,
    side: Optional[str] = None,
    action: str = "find_element",
):
    """
    Wait until locator matches an element (and is displayed, if visible).

    Polling is left to the driver's wait; the call runs in a worker thread
    so the event loop keeps serving signals while it waits.

    Raises:
        ElementNotFound: nothing matched within timeout_ms
        ActionFailed: the driver failed for another reason
    """
    query = locator.query()
    try:
        return await asyncio.to_thread(handle.wait_for, query, timeout_ms / 1000.0, visible)
    except (TimeoutException, NoSuchElementException) as e:
        raise ElementNotFound(locator.strategy, locator.value, timeout_ms, side=side) from e
    except RelayError:
        raise
    except Exception as e:
        raise ActionFailed(action, e) from e


async def perform(handle, action: str, element: Any, op: str, args: Optional[dict] = None):
    """Run one driver action, wrapping driver faults in ActionFailed."""
    try:
        return await asyncio.to_thread(handle.act, element, op, args)
    except RelayError:
        raise
    except Exception as e:
        raise ActionFailed(action, e) from e


__all__ = ["wait_for_element", "perform"]
