"""Typed faults raised by command handlers.

Handlers raise one of these; the command envelope turns it into an error
result, so no handler formats its own error response.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for every fault reported back to the client."""

    code = "relay_error"


class InvalidCommand(RelayError):
    code = "invalid_command"


class UnsupportedStrategy(RelayError, ValueError):
    code = "unsupported_strategy"

    def __init__(self, strategy):
        self.strategy = strategy
        super().__init__(f"Unsupported locator strategy: {strategy}")


class InvalidLocatorValue(RelayError, ValueError):
    code = "invalid_locator"


class NoActiveSession(RelayError):
    code = "no_active_session"

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "No active browser session. Please start a browser session using the start_browser tool."
        )


class RegistryClosed(RelayError):
    code = "shutting_down"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "The server is shutting down; no new browser sessions are accepted.")


class DriverExecutableNotFound(RelayError, FileNotFoundError):
    code = "driver_not_found"

    def __init__(self, kind: str, searched):
        self.kind = kind
        self.searched = list(searched)
        where = ", ".join(self.searched) or "<no candidates>"
        super().__init__(f"{kind} driver executable not found in any known path (searched: {where})")


class ElementNotFound(RelayError):
    code = "element_not_found"

    def __init__(self, strategy: str, value: str, timeout_ms: int, side: Optional[str] = None):
        self.strategy = strategy
        self.value = value
        self.timeout_ms = timeout_ms
        self.side = side
        which = f"{side} element" if side else "Element"
        super().__init__(f"{which} not found: {strategy}={value!r} (waited {timeout_ms}ms)")


class NavigationFailed(RelayError):
    code = "navigation_failed"

    def __init__(self, url: str, attempts: int, cause: Optional[BaseException]):
        self.url = url
        self.attempts = attempts
        self.cause = cause
        noun = "attempt" if attempts == 1 else "attempts"
        super().__init__(f"Navigation to {url} failed after {attempts} {noun}: {_describe(cause)}")


class ActionFailed(RelayError):
    code = "action_failed"

    def __init__(self, action: str, cause: BaseException):
        self.action = action
        self.cause = cause
        super().__init__(f"Error performing {action}: {_describe(cause)}")


class ScreenshotWriteError(RelayError, OSError):
    code = "io_error"

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write screenshot to {path}: {_describe(cause)}")


def _describe(exc: Optional[BaseException]) -> str:
    if exc is None:
        return "unknown error"
    # WebDriverException keeps the useful part in .msg and pads str() with stacktrace noise
    msg = getattr(exc, "msg", None) or str(exc)
    return f"{exc.__class__.__name__}: {msg.strip()}" if msg else exc.__class__.__name__


__all__ = [
    "RelayError",
    "InvalidCommand",
    "UnsupportedStrategy",
    "InvalidLocatorValue",
    "NoActiveSession",
    "RegistryClosed",
    "DriverExecutableNotFound",
    "ElementNotFound",
    "NavigationFailed",
    "ActionFailed",
    "ScreenshotWriteError",
]
