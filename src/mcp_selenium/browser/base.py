"""Driver handle abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

Query = Tuple[str, str]


class DriverHandle(ABC):
    """
    Narrow interface over one browser-driver process.

    The dispatcher only talks to browsers through these verbs.
    """

    kind: str = ""
    profile_dir: Optional[str] = None

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Load url in the current window; returns when the driver's load call returns."""

    @abstractmethod
    def locate(self, query: Query) -> Any:
        """Return an element reference for query, raising if it does not exist now."""

    @abstractmethod
    def wait_for(self, query: Query, timeout: float, visible: bool = False) -> Any:
        """Poll until query matches (and is displayed, if visible) or raise TimeoutException."""

    @abstractmethod
    def act(self, element: Any, op: str, args: Optional[dict] = None) -> Any:
        """Perform op on element (element is None for page-level ops such as press_key)."""

    @abstractmethod
    def screenshot(self) -> bytes:
        """Capture the viewport as PNG bytes."""

    @abstractmethod
    def is_document_ready(self) -> bool:
        """True once document.readyState reports complete."""

    @abstractmethod
    def quit(self) -> None:
        """Terminate the browser and its driver process."""

    @property
    def service_pid(self) -> Optional[int]:
        """PID of the driver service process, if known."""
        return None
