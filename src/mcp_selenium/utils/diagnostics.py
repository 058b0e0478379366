"""Diagnostics and debugging information utility functions."""

import sys
import platform
from typing import Optional

import selenium

from ..constants import SUPPORTED_BROWSERS
from ..browser.executable import driver_candidates, is_executable, resolve_browser_binary


def collect_diagnostics(registry, config: Optional[dict] = None) -> str:
    """
    Collect diagnostic information about the environment, drivers and sessions.

    Args:
        registry: The SessionRegistry to report on
        config: Configuration dictionary

    Returns:
        str: Formatted diagnostic information
    """
    config = config or {}

    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"Selenium          : {getattr(selenium, '__version__', '?')}",
    ]

    for kind in SUPPORTED_BROWSERS:
        driver = next((c for c in driver_candidates(kind, config) if is_executable(c)), None)
        parts.append(f"{kind + ' driver':<18}: {driver or '<not found>'}")
        parts.append(f"{kind + ' binary':<18}: {resolve_browser_binary(kind, config) or '<driver default>'}")

    sessions = registry.list_sessions()
    parts.append(f"Current session   : {registry.current_id or '<none>'}")
    parts.append(f"Open sessions     : {len(sessions)}")
    for s in sessions:
        marker = "*" if s["current"] else " "
        parts.append(f"  {marker} {s['session_id']} ({s['browser']})")

    return "\n".join(parts)


__all__ = ["collect_diagnostics"]
