"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Timeouts
# ============================================================================

ELEMENT_TIMEOUT_MS = int(os.getenv("MCP_SELENIUM_ELEMENT_TIMEOUT_MS", "10000"))
"""Default wait for an element to be located, in milliseconds."""

PAGE_LOAD_TIMEOUT_MS = int(os.getenv("MCP_SELENIUM_PAGE_LOAD_TIMEOUT_MS", "30000"))
"""Default wait for document.readyState after a navigation, in milliseconds."""

PAGE_READY_POLL_SECS = 0.25
"""Interval between document.readyState checks."""

QUIT_TIMEOUT_SECS = float(os.getenv("MCP_SELENIUM_QUIT_TIMEOUT", "10"))
"""How long shutdown waits for a single driver to quit."""


# ============================================================================
# Navigation Retry
# ============================================================================

NAV_ATTEMPTS = int(os.getenv("MCP_SELENIUM_NAV_ATTEMPTS", "3"))
"""Number of page-load attempts before navigation is reported as failed."""

NAV_BACKOFF_SECS = float(os.getenv("MCP_SELENIUM_NAV_BACKOFF_SECS", "0"))
"""Base delay between navigation attempts (doubled per attempt). 0 = immediate retry."""


# ============================================================================
# Browser Launch
# ============================================================================

SUPPORTED_BROWSERS = ("chrome", "firefox")

CHROME_BASELINE_ARGS = (
    "--headless",
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--use-gl=swiftshader",
)
"""Always applied to Chrome; caller arguments are appended after these."""

FIREFOX_BASELINE_ARGS = (
    "--headless",
)
"""Always applied to Firefox. Its sandbox and GPU switches are preferences, see FIREFOX_BASELINE_PREFS."""

FIREFOX_BASELINE_PREFS = {
    "layers.acceleration.disabled": True,
    "gfx.webrender.software": True,
    "media.hardware-video-decoding.enabled": False,
    "security.sandbox.content.level": 0,
}
"""Firefox counterparts of Chrome's --disable-gpu and --no-sandbox. Firefox has no
/dev/shm switch; the per-session profile dir keeps its cache on disk."""

DRIVER_ENV_OVERRIDES = {
    "chrome": "CHROMEDRIVER_BIN",
    "firefox": "GECKODRIVER_BIN",
}

DRIVER_KNOWN_PATHS = {
    "chrome": (
        "/usr/bin/chromedriver",
        "/usr/lib/chromium/chromedriver",
        "/usr/bin/chromium-chromedriver",
        "/usr/local/bin/chromedriver",
    ),
    "firefox": (
        "/usr/bin/geckodriver",
        "/usr/local/bin/geckodriver",
    ),
}

BINARY_ENV_OVERRIDES = {
    "chrome": "CHROME_BIN",
    "firefox": "FIREFOX_BIN",
}

BINARY_KNOWN_PATHS = {
    "chrome": (
        "/usr/bin/chromium",
        "/usr/bin/chromium-browser",
        "/usr/bin/google-chrome",
    ),
    "firefox": (
        "/usr/bin/firefox",
        "/usr/bin/firefox-esr",
    ),
}


__all__ = [
    "ELEMENT_TIMEOUT_MS",
    "PAGE_LOAD_TIMEOUT_MS",
    "PAGE_READY_POLL_SECS",
    "QUIT_TIMEOUT_SECS",
    "NAV_ATTEMPTS",
    "NAV_BACKOFF_SECS",
    "SUPPORTED_BROWSERS",
    "CHROME_BASELINE_ARGS",
    "FIREFOX_BASELINE_ARGS",
    "FIREFOX_BASELINE_PREFS",
    "DRIVER_ENV_OVERRIDES",
    "DRIVER_KNOWN_PATHS",
    "BINARY_ENV_OVERRIDES",
    "BINARY_KNOWN_PATHS",
]
