# mcp_selenium/decorators/envelope.py

import os
import asyncio
import inspect
import functools
import traceback
from typing import Callable

from ..errors import RelayError
from ..results import Err, Ok

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "command_envelope",
    "error_result",
]


def _include_traceback() -> bool:
    return os.getenv("MCP_SELENIUM_ERRORS_TRACEBACK", "0") not in ("0", "false", "False", "")


def error_result(err: Exception, action: str = "command") -> Err:
    """Convert any exception into an error result."""
    if isinstance(err, RelayError):
        return Err(message=str(err), code=err.code)

    logger.exception(f"Unexpected failure in {action}")
    details = None
    if _include_traceback():
        details = {"type": err.__class__.__name__, "traceback": traceback.format_exc()}
    return Err(
        message=f"Error in {action}: {err.__class__.__name__}: {err}",
        code="unexpected_error",
        details=details,
    )


def command_envelope(func: Callable):
    """
    Decorator for async command handlers:
      - A returned dict (or None) becomes Ok(payload); a returned Ok/Err passes through.
      - Any exception becomes an Err; RelayError keeps its message and code.
      - asyncio.CancelledError is re-raised.
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"command_envelope needs an async handler, got {func.__name__}")
    action = func.__name__.lstrip("_").removeprefix("cmd_")

    def _wrap(value):
        if isinstance(value, (Ok, Err)):
            return value
        return Ok(dict(value or {}))

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return error_result(e, action)
        return _wrap(result)
    return wrapper
