#region Overview
"""
## MCP Selenium

Relays browser automation commands from an MCP client to Selenium WebDriver.

Each `start_browser` call launches a new headless browser with its own
temporary profile and makes it the current session. Every other tool acts on
the current session (or on the one named by `session_id`). If no session is
marked current but browsers are open, the oldest one is used.

Element tools wait for the element before acting; `timeout` is in
milliseconds (default 10000). `navigate` retries a failed page load up to
three times and then waits for `document.readyState` (default 30000 ms); a
page that never settles is reported with `page_ready: false`, not as an
error.

Every tool returns a JSON object: `{"ok": true, ...}` on success or
`{"ok": false, "error": "...", "code": "..."}` on failure.

On SIGINT / SIGTERM all browsers are quit once and the process exits with 0.

## Environment

    CHROMEDRIVER_BIN / GECKODRIVER_BIN   driver executable overrides
    CHROME_BIN / FIREFOX_BIN             browser binary overrides
    MCP_SELENIUM_LOG_LEVEL               logging level (INFO)
"""
#endregion

#region Imports
import os
import sys
import logging
import argparse
from typing import Optional

from mcp.server.fastmcp import FastMCP
#endregion

#region Import from your package
from mcp_selenium.config import get_env_config
from mcp_selenium.browser.executable import find_driver_executable
from mcp_selenium.constants import SUPPORTED_BROWSERS
from mcp_selenium.dispatcher import CommandDispatcher
from mcp_selenium.errors import DriverExecutableNotFound
from mcp_selenium.sessions import SessionRegistry
from mcp_selenium.shutdown import ShutdownCoordinator
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion


#region Server
def create_server(dispatcher: CommandDispatcher, name: str = "MCP Selenium") -> FastMCP:
    """Build the FastMCP server; every tool forwards to the dispatcher."""
    mcp = FastMCP(name)

    async def _run(name: str, timeout: Optional[int] = None, **args) -> str:
        result = await dispatcher.run(name, timeout_ms=timeout, **args)
        return result.to_json()

    #region Tools -- Browser
    @mcp.tool()
    async def start_browser(browser: str, options: Optional[dict] = None) -> str:
        """
        Launches a browser session.

        Args:
            browser: Browser to launch (chrome or firefox)
            options: Optional {"headless": bool, "arguments": [str]}. Extra arguments are
                appended to the fixed headless/sandbox-less baseline.

        Returns:
            JSON with the new session_id. The new session becomes the current one.
        """
        return await _run("start_browser", browser=browser, options=options)

    @mcp.tool()
    async def list_sessions() -> str:
        """Lists open browser sessions and marks the current one."""
        return await _run("list_sessions")

    @mcp.tool()
    async def select_session(session_id: str) -> str:
        """Makes an open browser session the current one."""
        return await _run("select_session", session_id=session_id)

    @mcp.tool()
    async def close_session(session_id: Optional[str] = None) -> str:
        """Quits one browser session (the current one if session_id is omitted)."""
        return await _run("close_session", session_id=session_id)

    @mcp.tool()
    async def get_debug_info() -> str:
        """Returns OS, Selenium version, driver/binary resolution and open sessions."""
        return await _run("get_debug_info")
    #endregion

    #region Tools -- Navigation
    @mcp.tool()
    async def navigate(url: str, page_load_timeout: Optional[int] = None) -> str:
        """
        Navigates to a URL.

        Args:
            url: Absolute URL to load
            page_load_timeout: Milliseconds to wait for the document to be ready (default 30000)
        """
        return await _run("navigate", timeout=page_load_timeout, url=url)
    #endregion

    #region Tools -- Elements
    @mcp.tool()
    async def find_element(by: str, value: str, timeout: Optional[int] = None) -> str:
        """
        Finds an element.

        Args:
            by: Locator strategy (id, css, xpath, name, tag, class)
            value: Value for the locator strategy
            timeout: Maximum time to wait for element in milliseconds (default 10000)
        """
        return await _run("find_element", timeout=timeout, by=by, value=value)

    @mcp.tool()
    async def click_element(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Clicks an element."""
        return await _run("click_element", timeout=timeout, by=by, value=value)

    @mcp.tool()
    async def send_keys(by: str, value: str, text: str, timeout: Optional[int] = None) -> str:
        """Sends keys to an element (typing). The field is cleared first."""
        return await _run("send_keys", timeout=timeout, by=by, value=value, text=text)

    @mcp.tool()
    async def get_element_text(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Gets the text() of an element."""
        return await _run("get_element_text", timeout=timeout, by=by, value=value)

    @mcp.tool()
    async def hover(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Moves the mouse to hover over an element."""
        return await _run("hover", timeout=timeout, by=by, value=value)

    @mcp.tool()
    async def drag_and_drop(
        by: str,
        value: str,
        targetBy: str,
        targetValue: str,
        timeout: Optional[int] = None,
    ) -> str:
        """
        Drags an element and drops it onto another element.

        Args:
            by / value: Locator of the element to drag
            targetBy / targetValue: Locator of the drop target
            timeout: Maximum wait for each element in milliseconds
        """
        return await _run(
            "drag_and_drop",
            timeout=timeout,
            by=by,
            value=value,
            targetBy=targetBy,
            targetValue=targetValue,
        )

    @mcp.tool()
    async def double_click(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Performs a double click on an element."""
        return await _run("double_click", timeout=timeout, by=by, value=value)

    @mcp.tool()
    async def right_click(by: str, value: str, timeout: Optional[int] = None) -> str:
        """Performs a right click (context click) on an element."""
        return await _run("right_click", timeout=timeout, by=by, value=value)

    @mcp.tool()
    async def upload_file(by: str, value: str, filePath: str, timeout: Optional[int] = None) -> str:
        """Uploads a file using a file input element. filePath must be absolute."""
        return await _run("upload_file", timeout=timeout, by=by, value=value, filePath=filePath)
    #endregion

    #region Tools -- Keyboard & Screenshots
    @mcp.tool()
    async def press_key(key: str) -> str:
        """Simulates pressing a keyboard key (e.g., 'Enter', 'Tab', 'a')."""
        return await _run("press_key", key=key)

    @mcp.tool()
    async def take_screenshot(outputPath: Optional[str] = None) -> str:
        """
        Captures a screenshot of the current page.

        Args:
            outputPath: Optional path where to save the PNG. If not provided, returns base64 data.
        """
        return await _run("take_screenshot", outputPath=outputPath)
    #endregion

    #region Resources
    @mcp.resource("browser-status://current")
    async def browser_status() -> str:
        """Current browser session status."""
        result = await dispatcher.run("browser_status")
        return result.payload["message"] if result.ok else result.message
    #endregion

    return mcp
#endregion


#region Entry point
def _configure_logging() -> None:
    level = (os.getenv("MCP_SELENIUM_LOG_LEVEL") or "INFO").upper()
    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mcp-selenium", description="MCP server relaying commands to Selenium")
    parser.add_argument(
        "--transport",
        choices=("stdio", "sse", "streamable-http"),
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument(
        "--preflight",
        action="append",
        choices=SUPPORTED_BROWSERS,
        default=[],
        help="Fail at startup unless the driver for this browser can be found (repeatable)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    _configure_logging()

    try:
        config = get_env_config()
        for kind in args.preflight:
            logger.info(f"{kind} driver: {find_driver_executable(kind, config)}")
    except DriverExecutableNotFound as e:
        logger.error(str(e))
        return 1
    except Exception:
        logger.exception("Could not initialize configuration")
        return 1

    registry = SessionRegistry()
    dispatcher = CommandDispatcher(registry, config=config)
    coordinator = ShutdownCoordinator(registry, quit_timeout=config["quit_timeout_secs"])
    coordinator.install()

    server = create_server(dispatcher)
    logger.info(f"Starting MCP Selenium server ({args.transport})")
    try:
        server.run(transport=args.transport)
    except Exception:
        logger.exception("MCP server failed")
        coordinator.uninstall()
        coordinator.shutdown("server failure", exit_code=1)
        return 1

    # Transport closed (client went away): quit browsers the same way a signal would.
    coordinator.shutdown("transport closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
#endregion
