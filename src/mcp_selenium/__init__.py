"""
MCP server relaying browser automation commands to Selenium WebDriver.

One process may own several browser sessions. Commands go to the current
session, which is the most recently started one unless select_session
changed it. All sessions are quit exactly once when the process receives
SIGINT or SIGTERM.
"""

from .dispatcher import CommandDispatcher
from .results import Command, Err, Ok
from .sessions import SessionRegistry
from .shutdown import ShutdownCoordinator

__version__ = "1.0.0"

__all__ = [
    "CommandDispatcher",
    "Command",
    "Ok",
    "Err",
    "SessionRegistry",
    "ShutdownCoordinator",
]
