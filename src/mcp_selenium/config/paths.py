"""Per-session filesystem locations."""

import shutil
import tempfile
from pathlib import Path
from typing import Optional

import logging
logger = logging.getLogger(__name__)


def make_profile_dir(kind: str, parent: Optional[str] = None) -> str:
    """
    Create a fresh profile/cache directory for one browser session.

    Every session gets its own directory so two sessions of the same browser
    kind never contend for a profile lock.

    Args:
        kind: "chrome" or "firefox"; used in the directory prefix
        parent: Optional parent directory (MCP_SELENIUM_TMP_DIR); system temp dir otherwise

    Returns:
        Absolute path of the new directory
    """
    if parent:
        Path(parent).mkdir(parents=True, exist_ok=True)
    prefix = "chrome-data-" if kind == "chrome" else f"{kind}-profile-"
    return tempfile.mkdtemp(prefix=prefix, dir=parent)


def remove_profile_dir(path: Optional[str]) -> None:
    """Best-effort removal of a session's profile directory."""
    if not path:
        return
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug(f"Could not remove profile dir {path}: {e}")


__all__ = ["make_profile_dir", "remove_profile_dir"]
