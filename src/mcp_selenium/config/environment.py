"""Environment configuration."""

import os
from typing import Optional

from dotenv import load_dotenv, find_dotenv

from ..constants import (
    ELEMENT_TIMEOUT_MS,
    PAGE_LOAD_TIMEOUT_MS,
    NAV_ATTEMPTS,
    NAV_BACKOFF_SECS,
    QUIT_TIMEOUT_SECS,
    DRIVER_ENV_OVERRIDES,
    BINARY_ENV_OVERRIDES,
)

import logging
logger = logging.getLogger(__name__)

_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv(find_dotenv(filename=".env", usecwd=True))
        _DOTENV_LOADED = True


def _str_env(name: str) -> Optional[str]:
    return (os.getenv(name) or "").strip() or None


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
        return default


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}; using {default}")
        return default


def get_env_config() -> dict:
    """
    Read the environment (after loading a .env file, if any) into a config dict.

    Optional:   CHROMEDRIVER_BIN, GECKODRIVER_BIN   driver executable overrides
                CHROME_BIN, FIREFOX_BIN             browser binary overrides
                MCP_SELENIUM_ELEMENT_TIMEOUT_MS     default element wait (10000)
                MCP_SELENIUM_PAGE_LOAD_TIMEOUT_MS   default page-ready wait (30000)
                MCP_SELENIUM_NAV_ATTEMPTS           navigation attempts (3)
                MCP_SELENIUM_NAV_BACKOFF_SECS       base retry delay (0 = none)
                MCP_SELENIUM_QUIT_TIMEOUT           per-driver quit timeout on shutdown (10)
                MCP_SELENIUM_TMP_DIR                parent of per-session profile dirs
    """
    _load_dotenv_once()

    return {
        "driver_paths": {kind: _str_env(var) for kind, var in DRIVER_ENV_OVERRIDES.items()},
        "binary_paths": {kind: _str_env(var) for kind, var in BINARY_ENV_OVERRIDES.items()},
        "element_timeout_ms": _int_env("MCP_SELENIUM_ELEMENT_TIMEOUT_MS", ELEMENT_TIMEOUT_MS),
        "page_load_timeout_ms": _int_env("MCP_SELENIUM_PAGE_LOAD_TIMEOUT_MS", PAGE_LOAD_TIMEOUT_MS),
        "nav_attempts": max(1, _int_env("MCP_SELENIUM_NAV_ATTEMPTS", NAV_ATTEMPTS)),
        "nav_backoff_secs": max(0.0, _float_env("MCP_SELENIUM_NAV_BACKOFF_SECS", NAV_BACKOFF_SECS)),
        "quit_timeout_secs": _float_env("MCP_SELENIUM_QUIT_TIMEOUT", QUIT_TIMEOUT_SECS),
        "tmp_dir": _str_env("MCP_SELENIUM_TMP_DIR"),
    }


__all__ = ["get_env_config"]
