# tests/tests_decorators/test_envelope.py
import json
import asyncio
import pytest

from mcp_selenium.decorators import command_envelope, error_result
from mcp_selenium.errors import ElementNotFound, NoActiveSession
from mcp_selenium.results import Err, Ok

## We DO NOT want to use pytest-asyncio.
## Instead, use event_loop.run_until_complete()!


@pytest.fixture(scope="function")
def event_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


def test_envelope_async_success_wraps_dict(event_loop):
    @command_envelope
    async def _cmd_ok():
        await asyncio.sleep(0)
        return {"message": "done"}

    result = event_loop.run_until_complete(_cmd_ok())
    assert isinstance(result, Ok)
    assert json.loads(result.to_json()) == {"ok": True, "message": "done"}


def test_envelope_none_becomes_empty_ok(event_loop):
    @command_envelope
    async def _cmd_nothing():
        return None

    result = event_loop.run_until_complete(_cmd_nothing())
    assert result == Ok({})


def test_envelope_passes_through_results(event_loop):
    err = Err("nope", code="custom")

    @command_envelope
    async def _cmd_passthrough():
        return err

    assert event_loop.run_until_complete(_cmd_passthrough()) is err


def test_envelope_relay_error_keeps_code(event_loop):
    @command_envelope
    async def _cmd_click_element():
        raise ElementNotFound("id", "submit", 500)

    result = event_loop.run_until_complete(_cmd_click_element())
    assert result.ok is False
    assert result.code == "element_not_found"
    assert result.message == "Element not found: id='submit' (waited 500ms)"


def test_envelope_unexpected_error_is_contained(event_loop, caplog):
    @command_envelope
    async def _cmd_hover():
        raise ZeroDivisionError("division by zero")

    result = event_loop.run_until_complete(_cmd_hover())
    assert result.code == "unexpected_error"
    assert result.message == "Error in hover: ZeroDivisionError: division by zero"
    assert result.details is None
    assert "Unexpected failure in hover" in caplog.text


def test_envelope_traceback_opt_in(event_loop, monkeypatch):
    monkeypatch.setenv("MCP_SELENIUM_ERRORS_TRACEBACK", "1")

    @command_envelope
    async def _cmd_hover():
        raise KeyError("x")

    result = event_loop.run_until_complete(_cmd_hover())
    payload = result.to_dict()
    assert payload["details"]["type"] == "KeyError"
    assert "Traceback" in payload["details"]["traceback"]


def test_envelope_rejects_sync_function():
    def list_things():
        return {"items": []}

    with pytest.raises(TypeError):
        command_envelope(list_things)


def test_envelope_relay_error_from_method(event_loop):
    class Handlers:
        @command_envelope
        async def _cmd_list_things(self, fail=False):
            if fail:
                raise NoActiveSession()
            return {"items": []}

    handlers = Handlers()
    assert event_loop.run_until_complete(handlers._cmd_list_things()) == Ok({"items": []})
    failed = event_loop.run_until_complete(handlers._cmd_list_things(fail=True))
    assert failed.code == "no_active_session"


def test_envelope_propagates_cancellation(event_loop):
    @command_envelope
    async def _cmd_slow():
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        event_loop.run_until_complete(_cmd_slow())


def test_envelope_preserves_name():
    @command_envelope
    async def _cmd_navigate():
        return {}

    assert _cmd_navigate.__name__ == "_cmd_navigate"


def test_error_result_for_relay_error():
    err = error_result(NoActiveSession("gone"), "navigate")
    assert err.to_dict() == {"ok": False, "error": "gone", "code": "no_active_session"}
