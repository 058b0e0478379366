"""Driver executable and browser binary resolution."""

import os
from typing import Iterable, List, Optional

from ..constants import DRIVER_KNOWN_PATHS, BINARY_KNOWN_PATHS
from ..errors import DriverExecutableNotFound

import logging
logger = logging.getLogger(__name__)


def is_executable(path: Optional[str]) -> bool:
    return bool(path) and os.path.isfile(path) and os.access(path, os.X_OK)


def driver_candidates(kind: str, config: dict) -> List[str]:
    """Ordered search list: the environment override first, then well-known paths."""
    override = (config.get("driver_paths") or {}).get(kind)
    candidates = [override] if override else []
    candidates.extend(DRIVER_KNOWN_PATHS.get(kind, ()))
    return candidates


def find_driver_executable(kind: str, config: dict, candidates: Optional[Iterable[str]] = None) -> str:
    """
    Locate the WebDriver executable (chromedriver / geckodriver) for kind.

    Args:
        kind: "chrome" or "firefox"
        config: Configuration dict from get_env_config()
        candidates: Explicit search list (defaults to driver_candidates())

    Returns:
        str: Path to an executable driver

    Raises:
        DriverExecutableNotFound: If no candidate is an executable file
    """
    searched = list(candidates) if candidates is not None else driver_candidates(kind, config)
    for candidate in searched:
        if is_executable(candidate):
            logger.debug(f"Using {kind} driver at {candidate}")
            return candidate
        logger.debug(f"{kind} driver candidate not executable: {candidate}")
    raise DriverExecutableNotFound(kind, searched)


def resolve_browser_binary(kind: str, config: dict) -> Optional[str]:
    """
    Browser binary to launch, or None to let the driver pick its default.

    An explicit override (CHROME_BIN / FIREFOX_BIN) is used as-is.
    """
    override = (config.get("binary_paths") or {}).get(kind)
    if override:
        return override
    for candidate in BINARY_KNOWN_PATHS.get(kind, ()):
        if is_executable(candidate):
            return candidate
    return None


__all__ = [
    "is_executable",
    "driver_candidates",
    "find_driver_executable",
    "resolve_browser_binary",
]
