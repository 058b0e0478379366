"""MCP server wiring and entry point."""

import json
import asyncio

import pytest

import mcp_selenium.__main__ as entry
from mcp_selenium.__main__ import create_server, main
from mcp_selenium.dispatcher import CommandDispatcher
from mcp_selenium.errors import DriverExecutableNotFound
from mcp_selenium.sessions import SessionRegistry

from _fakes import FakeLauncher, fake_prepare_launch, make_config

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


EXPECTED_TOOLS = {
    "start_browser",
    "list_sessions",
    "select_session",
    "close_session",
    "get_debug_info",
    "navigate",
    "find_element",
    "click_element",
    "send_keys",
    "get_element_text",
    "hover",
    "drag_and_drop",
    "double_click",
    "right_click",
    "upload_file",
    "press_key",
    "take_screenshot",
}


@pytest.fixture
def server():
    dispatcher = CommandDispatcher(
        SessionRegistry(), config=make_config(), launcher=FakeLauncher(), prepare_launch=fake_prepare_launch
    )
    return create_server(dispatcher)


def test_tools_registered(event_loop, server):
    tools = event_loop.run_until_complete(server.list_tools())
    assert {t.name for t in tools} == EXPECTED_TOOLS


def test_status_resource_registered(event_loop, server):
    resources = event_loop.run_until_complete(server.list_resources())
    assert "browser-status://current" in {str(r.uri).rstrip("/") for r in resources}


def test_tool_call_returns_json_result(event_loop, server):
    content = event_loop.run_until_complete(server.call_tool("find_element", {"by": "id", "value": "x"}))
    # call_tool returns content blocks (older mcp) or (blocks, structured) (newer mcp)
    blocks = content[0] if isinstance(content, tuple) else content
    payload = json.loads(blocks[0].text)
    assert payload["ok"] is False
    assert payload["code"] == "no_active_session"


def test_start_browser_through_tool(event_loop, server):
    content = event_loop.run_until_complete(server.call_tool("start_browser", {"browser": "chrome"}))
    blocks = content[0] if isinstance(content, tuple) else content
    payload = json.loads(blocks[0].text)
    assert payload["ok"] is True
    assert payload["session_id"].startswith("chrome_")


def test_preflight_failure_exits_nonzero(monkeypatch):
    def not_found(kind, config):
        raise DriverExecutableNotFound(kind, ["/usr/bin/chromedriver"])

    monkeypatch.setattr(entry, "find_driver_executable", not_found)
    monkeypatch.setattr(entry, "get_env_config", make_config)

    assert main(["--preflight", "chrome"]) == 1


def test_transport_close_drains_sessions(monkeypatch):
    calls = []

    class FakeCoordinator:
        def __init__(self, registry, quit_timeout):
            calls.append(("init", quit_timeout))

        def install(self):
            calls.append("install")

        def uninstall(self):
            calls.append("uninstall")

        def shutdown(self, reason, exit_code=0):
            calls.append(("shutdown", reason, exit_code))

    class FakeServer:
        def __init__(self, fail=False):
            self.fail = fail

        def run(self, transport):
            calls.append(("run", transport))
            if self.fail:
                raise RuntimeError("transport broke")

    monkeypatch.setattr(entry, "get_env_config", make_config)
    monkeypatch.setattr(entry, "ShutdownCoordinator", FakeCoordinator)
    monkeypatch.setattr(entry, "create_server", lambda dispatcher: FakeServer())

    assert main([]) == 0
    assert calls == [("init", 2.0), "install", ("run", "stdio"), ("shutdown", "transport closed", 0)]

    calls.clear()
    monkeypatch.setattr(entry, "create_server", lambda dispatcher: FakeServer(fail=True))
    assert main(["--transport", "sse"]) == 1
    assert calls[-2:] == ["uninstall", ("shutdown", "server failure", 1)]
