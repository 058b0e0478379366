"""
Command dispatcher.

Every command follows the same path: validate the arguments, resolve the
target session, run one or more driver steps, wrap the outcome. Handlers
raise typed faults (see errors.py); command_envelope turns them into error
results, so nothing raised by a handler reaches the transport.

Element commands wait for the element before acting. The wait bound is the
command's timeout_ms (default 10000). Click-like commands additionally wait
for the element to be displayed.
"""

import asyncio
from pathlib import Path
from typing import Callable, Optional

from .actions import (
    capture_png,
    encode_png,
    navigate_to_url,
    perform,
    resolve_key,
    save_png,
    wait_for_element,
)
from .browser.driver import launch
from .browser.options import build_launch_config
from .config import get_env_config
from .decorators import command_envelope
from .errors import ActionFailed, InvalidCommand, NoActiveSession, RegistryClosed
from .locators import Locator
from .results import Command, Err, Result
from .sessions import Session, SessionRegistry
from .utils.diagnostics import collect_diagnostics

import logging
logger = logging.getLogger(__name__)


COMMANDS = (
    "start_browser",
    "navigate",
    "find_element",
    "click_element",
    "send_keys",
    "get_element_text",
    "hover",
    "drag_and_drop",
    "double_click",
    "right_click",
    "press_key",
    "upload_file",
    "take_screenshot",
    "browser_status",
    "list_sessions",
    "select_session",
    "close_session",
    "get_debug_info",
)


class CommandDispatcher:
    """
    Routes commands to the current (or named) browser session.

    Args:
        registry: The process's SessionRegistry
        config: Configuration dict (get_env_config() if omitted)
        launcher: launch(kind, LaunchConfig) -> DriverHandle
        prepare_launch: build_launch_config(kind, options, config) -> LaunchConfig
    """

    def __init__(
        self,
        registry: SessionRegistry,
        config: Optional[dict] = None,
        launcher: Callable = launch,
        prepare_launch: Callable = build_launch_config,
    ):
        self.registry = registry
        self.config = config if config is not None else get_env_config()
        self._launcher = launcher
        self._prepare_launch = prepare_launch
        self._handlers = {name: getattr(self, f"_cmd_{name}") for name in COMMANDS}

    @property
    def commands(self) -> tuple:
        return tuple(self._handlers)

    async def dispatch(self, command: Command) -> Result:
        handler = self._handlers.get(command.name)
        if handler is None:
            return Err(f"Unknown command: {command.name}", code=InvalidCommand.code)
        logger.debug(f"Dispatching {command.name}")
        result = await handler(command)
        if not result.ok:
            logger.info(f"{command.name} failed: {result.message}")
        return result

    async def run(self, name: str, timeout_ms: Optional[int] = None, **args) -> Result:
        """Convenience wrapper: build a Command from keyword arguments and dispatch it."""
        return await self.dispatch(Command(name=name, args=args, timeout_ms=timeout_ms))

    # ------------------------------------------------------------------
    # Argument and session helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_str(command: Command, key: str) -> str:
        value = command.arg(key)
        if not isinstance(value, str) or not value:
            raise InvalidCommand(f"'{key}' is required and must be a non-empty string")
        return value

    @staticmethod
    def _locator(command: Command, by_key: str = "by", value_key: str = "value") -> Locator:
        """Read and validate a locator; an unsupported strategy fails here, before any session lookup."""
        locator = Locator(command.arg(by_key), command.arg(value_key))
        locator.query()
        return locator

    def _element_timeout(self, command: Command) -> int:
        return self._timeout(command.timeout_ms, self.config["element_timeout_ms"])

    @staticmethod
    def _timeout(value, default: int) -> int:
        if value is None:
            return int(default)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise InvalidCommand(f"timeout must be a non-negative number of milliseconds, got {value!r}")
        return int(value)

    def _session(self, command: Command) -> Session:
        session_id = command.arg("session_id")
        if session_id:
            return self.registry.get(session_id)
        return self.registry.resolve_current()

    async def _locate_and_act(self, command: Command, action: str, op: str, visible: bool, args=None):
        locator = self._locator(command)
        timeout_ms = self._element_timeout(command)
        session = self._session(command)
        element = await wait_for_element(session.handle, locator, timeout_ms, visible=visible, action=action)
        return await perform(session.handle, action, element, op, args)

    # ------------------------------------------------------------------
    # Browser lifecycle
    # ------------------------------------------------------------------

    @command_envelope
    async def _cmd_start_browser(self, command: Command):
        kind = command.arg("browser") or command.arg("kind")
        if not isinstance(kind, str):
            raise InvalidCommand("'browser' is required (chrome or firefox)")
        kind = kind.strip().lower()

        with self.registry.launching():
            launch_config = self._prepare_launch(kind, command.arg("options"), self.config)
            try:
                handle = await asyncio.to_thread(self._launcher, kind, launch_config)
            except Exception as e:
                raise ActionFailed("start_browser", e) from e

            try:
                session_id = self.registry.create(kind, handle)
            except RegistryClosed:
                logger.warning(f"Shutdown started while {kind} was launching; quitting it")
                try:
                    await asyncio.to_thread(handle.quit)
                except Exception as e:
                    logger.error(f"Error quitting {kind} launched during shutdown: {e}")
                raise
        return {
            "session_id": session_id,
            "browser": kind,
            "message": f"Browser started with session_id: {session_id}",
        }

    @command_envelope
    async def _cmd_close_session(self, command: Command):
        session_id = command.arg("session_id") or self.registry.resolve_current().id
        session = self.registry.remove(session_id)
        try:
            await asyncio.to_thread(session.handle.quit)
        except Exception as e:
            raise ActionFailed(f"close_session {session_id}", e) from e
        return {"session_id": session_id, "message": f"Browser session {session_id} closed"}

    @command_envelope
    async def _cmd_select_session(self, command: Command):
        session = self.registry.select(self._require_str(command, "session_id"))
        return {"session_id": session.id, "message": f"Current session is now {session.id}"}

    @command_envelope
    async def _cmd_list_sessions(self, command: Command):
        return {"sessions": self.registry.list_sessions(), "current": self.registry.current_id}

    @command_envelope
    async def _cmd_browser_status(self, command: Command):
        try:
            session = self.registry.resolve_current()
        except NoActiveSession:
            return {"session_id": None, "message": "No active browser session"}
        return {"session_id": session.id, "message": f"Active browser session: {session.id}"}

    @command_envelope
    async def _cmd_get_debug_info(self, command: Command):
        return {"diagnostics": collect_diagnostics(self.registry, self.config)}

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @command_envelope
    async def _cmd_navigate(self, command: Command):
        url = self._require_str(command, "url")
        page_load_timeout = self._timeout(
            command.timeout_ms if command.timeout_ms is not None else command.arg("page_load_timeout"),
            self.config["page_load_timeout_ms"],
        )
        session = self._session(command)
        outcome = await navigate_to_url(
            session.handle,
            url,
            attempts=self.config["nav_attempts"],
            backoff_secs=self.config["nav_backoff_secs"],
            page_load_timeout_ms=page_load_timeout,
        )
        return {**outcome, "message": f"Navigated to {url}"}

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    @command_envelope
    async def _cmd_find_element(self, command: Command):
        locator = self._locator(command)
        timeout_ms = self._element_timeout(command)
        session = self._session(command)
        await wait_for_element(session.handle, locator, timeout_ms)
        return {"message": "Element found"}

    @command_envelope
    async def _cmd_click_element(self, command: Command):
        await self._locate_and_act(command, "click_element", "click", visible=True)
        return {"message": "Element clicked"}

    @command_envelope
    async def _cmd_send_keys(self, command: Command):
        text = command.arg("text")
        if not isinstance(text, str):
            raise InvalidCommand("'text' is required and must be a string")
        await self._locate_and_act(command, "send_keys", "type", visible=True, args={"text": text})
        return {"message": f'Text "{text}" entered into element'}

    @command_envelope
    async def _cmd_get_element_text(self, command: Command):
        text = await self._locate_and_act(command, "get_element_text", "text", visible=False)
        return {"text": text or ""}

    @command_envelope
    async def _cmd_hover(self, command: Command):
        await self._locate_and_act(command, "hover", "hover", visible=True)
        return {"message": "Hovered over element"}

    @command_envelope
    async def _cmd_double_click(self, command: Command):
        await self._locate_and_act(command, "double_click", "double_click", visible=True)
        return {"message": "Double click performed"}

    @command_envelope
    async def _cmd_right_click(self, command: Command):
        await self._locate_and_act(command, "right_click", "context_click", visible=True)
        return {"message": "Right click performed"}

    @command_envelope
    async def _cmd_drag_and_drop(self, command: Command):
        source = self._locator(command)
        target = self._locator(command, "targetBy", "targetValue")
        timeout_ms = self._element_timeout(command)
        session = self._session(command)

        source_el = await wait_for_element(
            session.handle, source, timeout_ms, visible=True, side="source", action="drag_and_drop"
        )
        target_el = await wait_for_element(
            session.handle, target, timeout_ms, visible=True, side="target", action="drag_and_drop"
        )
        await perform(session.handle, "drag_and_drop", source_el, "drag_to", {"target": target_el})
        return {"message": "Drag and drop completed"}

    @command_envelope
    async def _cmd_upload_file(self, command: Command):
        file_path = self._require_str(command, "filePath")
        if not Path(file_path).is_file():
            raise InvalidCommand(f"File to upload does not exist: {file_path}")
        await self._locate_and_act(
            command, "upload_file", "upload", visible=False, args={"path": str(Path(file_path).resolve())}
        )
        return {"message": "File upload initiated"}

    # ------------------------------------------------------------------
    # Page-level input and capture
    # ------------------------------------------------------------------

    @command_envelope
    async def _cmd_press_key(self, command: Command):
        key = command.arg("key")
        resolved = resolve_key(key)
        session = self._session(command)
        await perform(session.handle, "press_key", None, "press_key", {"key": resolved})
        return {"message": f"Key '{key}' pressed"}

    @command_envelope
    async def _cmd_take_screenshot(self, command: Command):
        output_path = command.arg("outputPath")
        if output_path is not None and (not isinstance(output_path, str) or not output_path):
            raise InvalidCommand("'outputPath' must be a non-empty string when given")
        session = self._session(command)
        png = await capture_png(session.handle)

        if output_path:
            saved = await save_png(png, output_path)
            return {"path": saved, "message": f"Screenshot saved to {saved}"}
        return {
            "data": encode_png(png),
            "mime_type": "image/png",
            "message": "Screenshot captured as base64",
        }


__all__ = ["COMMANDS", "CommandDispatcher"]
