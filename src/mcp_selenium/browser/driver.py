"""WebDriver creation and the Selenium-backed driver handle."""

import os
import threading
from typing import Any, Optional

from selenium import webdriver
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from ..config.paths import remove_profile_dir
from ..constants import FIREFOX_BASELINE_PREFS
from .base import DriverHandle, Query
from .options import LaunchConfig

import logging
logger = logging.getLogger(__name__)


class SeleniumDriverHandle(DriverHandle):
    """DriverHandle over a local Selenium WebDriver and its service process."""

    def __init__(self, driver: webdriver.Remote, kind: str, profile_dir: Optional[str] = None):
        self.driver = driver
        self.kind = kind
        self.profile_dir = profile_dir
        self._quit_lock = threading.Lock()
        self._quit = False

    # ------------------------------------------------------------------
    # Page
    # ------------------------------------------------------------------

    def navigate(self, url: str) -> None:
        self.driver.get(url)

    def is_document_ready(self) -> bool:
        return self.driver.execute_script("return document.readyState") == "complete"

    def screenshot(self) -> bytes:
        return self.driver.get_screenshot_as_png()

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def locate(self, query: Query) -> Any:
        return self.driver.find_element(*query)

    def wait_for(self, query: Query, timeout: float, visible: bool = False) -> Any:
        condition = EC.visibility_of_element_located if visible else EC.presence_of_element_located
        return WebDriverWait(self.driver, timeout).until(condition(query))

    def act(self, element: Any, op: str, args: Optional[dict] = None) -> Any:
        args = args or {}
        chain = ActionChains(self.driver)

        if op == "click":
            element.click()
        elif op == "type":
            element.clear()
            element.send_keys(args["text"])
        elif op == "text":
            return element.text
        elif op == "hover":
            chain.move_to_element(element).perform()
        elif op == "double_click":
            chain.double_click(element).perform()
        elif op == "context_click":
            chain.context_click(element).perform()
        elif op == "drag_to":
            chain.drag_and_drop(element, args["target"]).perform()
        elif op == "upload":
            element.send_keys(args["path"])
        elif op == "press_key":
            chain.key_down(args["key"]).key_up(args["key"]).perform()
        else:
            raise ValueError(f"Unknown element operation: {op}")
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def service_pid(self) -> Optional[int]:
        try:
            return self.driver.service.process.pid
        except AttributeError:
            return None

    def quit(self) -> None:
        """Quit the driver once; later calls are no-ops. The profile dir is always removed."""
        with self._quit_lock:
            if self._quit:
                return
            self._quit = True
        try:
            self.driver.quit()
        finally:
            remove_profile_dir(self.profile_dir)


def _chrome(config: LaunchConfig) -> webdriver.Chrome:
    from selenium.webdriver.chrome.options import Options
    from selenium.webdriver.chrome.service import Service as ChromeService

    # Chromium stalls on D-Bus lookups in containers without a session bus
    os.environ.setdefault("DBUS_SESSION_BUS_ADDRESS", "/dev/null")

    options = Options()
    if config.binary_path:
        options.binary_location = config.binary_path
    for arg in config.arguments:
        options.add_argument(arg)
    if config.profile_dir:
        options.add_argument(f"--user-data-dir={config.profile_dir}")

    service = ChromeService(executable_path=config.driver_path)
    return webdriver.Chrome(service=service, options=options)


def _firefox(config: LaunchConfig) -> webdriver.Firefox:
    from selenium.webdriver.firefox.options import Options
    from selenium.webdriver.firefox.service import Service as FirefoxService

    # Content processes cannot start their sandbox in unprivileged containers
    os.environ.setdefault("MOZ_DISABLE_CONTENT_SANDBOX", "1")

    options = Options()
    for name, value in FIREFOX_BASELINE_PREFS.items():
        options.set_preference(name, value)
    if config.binary_path:
        options.binary_location = config.binary_path
    for arg in config.arguments:
        options.add_argument(arg)
    if config.profile_dir:
        options.add_argument("-profile")
        options.add_argument(config.profile_dir)
        options.set_preference("browser.cache.disk.parent_directory", config.profile_dir)

    service = FirefoxService(executable_path=config.driver_path)
    return webdriver.Firefox(service=service, options=options)


_LAUNCHERS = {
    "chrome": _chrome,
    "firefox": _firefox,
}


def launch(kind: str, config: LaunchConfig) -> SeleniumDriverHandle:
    """
    Start a browser of the given kind and wrap it in a handle.

    The profile directory is removed again if the driver fails to start.
    """
    factory = _LAUNCHERS.get(kind)
    if factory is None:
        raise ValueError(f"Unsupported browser: {kind}")

    logger.info(f"Launching {kind} (driver={config.driver_path}, binary={config.binary_path or '<default>'})")
    logger.debug(f"{kind} arguments: {' '.join(config.arguments)}")
    try:
        driver = factory(config)
    except Exception:
        remove_profile_dir(config.profile_dir)
        raise
    return SeleniumDriverHandle(driver, kind=kind, profile_dir=config.profile_dir)


__all__ = ["SeleniumDriverHandle", "launch"]
