# tests/_fakes.py
#
# Stand-ins for Selenium so dispatcher, registry and shutdown tests run without a browser.

import threading

from selenium.common.exceptions import TimeoutException

from mcp_selenium.browser.base import DriverHandle
from mcp_selenium.browser.options import LaunchConfig


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def make_config(**overrides):
    config = {
        "driver_paths": {"chrome": None, "firefox": None},
        "binary_paths": {"chrome": None, "firefox": None},
        "element_timeout_ms": 10000,
        "page_load_timeout_ms": 0,
        "nav_attempts": 3,
        "nav_backoff_secs": 0.0,
        "quit_timeout_secs": 2.0,
        "tmp_dir": None,
    }
    config.update(overrides)
    return config


class FakeElement:
    def __init__(self, name, text="", displayed=True):
        self.name = name
        self.text = text
        self.displayed = displayed

    def __repr__(self):
        return f"FakeElement({self.name!r})"


class FakeHandle(DriverHandle):
    """
    Records every call. Configure with:
        elements:        {(By, value): FakeElement}
        navigate_errors: exceptions raised by successive navigate() calls (None = succeed)
        ready:           what is_document_ready() returns
        act_error:       exception raised by act()
        quit_error:      exception raised by quit()
        quit_block:      threading.Event that quit() waits on before returning
    """

    def __init__(self, kind="chrome", elements=None, navigate_errors=None, ready=True,
                 act_error=None, quit_error=None, quit_block=None, pid=None, png=PNG_BYTES):
        self.kind = kind
        self.elements = dict(elements or {})
        self.navigate_errors = list(navigate_errors or [])
        self.ready = ready
        self.act_error = act_error
        self.quit_error = quit_error
        self.quit_block = quit_block
        self.pid = pid
        self.png = png

        self.navigated = []
        self.waits = []
        self.actions = []
        self.quit_calls = 0
        self._lock = threading.Lock()

    def navigate(self, url):
        self.navigated.append(url)
        if self.navigate_errors:
            err = self.navigate_errors.pop(0)
            if err is not None:
                raise err

    def locate(self, query):
        return self.elements[query]

    def wait_for(self, query, timeout, visible=False):
        self.waits.append((query, timeout, visible))
        el = self.elements.get(query)
        if el is None or (visible and not el.displayed):
            raise TimeoutException(f"Waiting for {query} timed out after {timeout}s")
        return el

    def act(self, element, op, args=None):
        self.actions.append((element, op, args))
        if self.act_error is not None:
            raise self.act_error
        if op == "text":
            return element.text
        return None

    def screenshot(self):
        return self.png

    def is_document_ready(self):
        return self.ready

    def quit(self):
        with self._lock:
            self.quit_calls += 1
        if self.quit_block is not None:
            self.quit_block.wait(5)
        if self.quit_error is not None:
            raise self.quit_error

    @property
    def service_pid(self):
        return self.pid


class FakeLauncher:
    """Replaces browser.driver.launch; hands out FakeHandles and remembers the configs."""

    def __init__(self, error=None, **handle_kwargs):
        self.error = error
        self.handle_kwargs = handle_kwargs
        self.launched = []

    def __call__(self, kind, config):
        if self.error is not None:
            raise self.error
        handle = FakeHandle(kind=kind, **self.handle_kwargs)
        self.launched.append((kind, config, handle))
        return handle


def fake_prepare_launch(kind, options, config):
    return LaunchConfig(kind=kind, arguments=["--headless"], driver_path="/fake/driver")
