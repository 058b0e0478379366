"""
Process shutdown.

SIGINT / SIGTERM start a single drain pass: close the registry to new sessions,
detach every session, quit each driver, then exit with status 0.

    RUNNING --signal--> DRAINING --all quits attempted--> TERMINATED

The signal handler itself only starts a thread. The drain never runs inside
the handler, because the interrupted main thread may be holding the
registry lock at that moment.
"""

import os
import enum
import signal
import logging
import threading
import concurrent.futures
from typing import Callable, List, Optional, Tuple

import psutil

from .constants import QUIT_TIMEOUT_SECS
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)


class State(enum.Enum):
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


def _exit_process(code: int) -> None:
    logging.shutdown()
    os._exit(code)


def kill_process_tree(pid: Optional[int]) -> List[int]:
    """Kill a driver service process and its children (the browser). Returns the killed PIDs."""
    if not pid:
        return []
    killed = []
    try:
        root = psutil.Process(pid)
        procs = root.children(recursive=True) + [root]
    except psutil.NoSuchProcess:
        return []
    for p in procs:
        try:
            p.kill()
            killed.append(p.pid)
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Could not kill process {p.pid}: {e}")
    return killed


class ShutdownCoordinator:
    """
    Drives the exactly-once drain of a SessionRegistry.

    Args:
        registry: Registry whose sessions are quit on shutdown
        quit_timeout: Seconds to wait for each driver's quit() before killing its process tree
        exit_fn: Called with the exit code (0 unless told otherwise) after the drain (os._exit by default)
    """

    def __init__(
        self,
        registry: SessionRegistry,
        quit_timeout: float = QUIT_TIMEOUT_SECS,
        exit_fn: Callable[[int], None] = _exit_process,
    ):
        self.registry = registry
        self.quit_timeout = quit_timeout
        self._exit_fn = exit_fn
        self._lock = threading.Lock()
        self._state = State.RUNNING
        self._done = threading.Event()
        self._previous_handlers = {}

    @property
    def state(self) -> State:
        return self._state

    def install(self, signals=(signal.SIGINT, signal.SIGTERM)) -> None:
        """Register handle_signal for the termination signals (main thread only)."""
        for sig in signals:
            self._previous_handlers[sig] = signal.signal(sig, self.handle_signal)

    def uninstall(self) -> None:
        for sig, previous in self._previous_handlers.items():
            signal.signal(sig, previous)
        self._previous_handlers.clear()

    def handle_signal(self, signum, frame=None) -> None:
        # No logging or locking here; both can deadlock inside a signal handler.
        threading.Thread(
            target=self.shutdown,
            args=(f"signal {signum}",),
            name="mcp-selenium-shutdown",
            daemon=False,
        ).start()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until a drain pass has finished."""
        return self._done.wait(timeout)

    def shutdown(self, reason: str = "shutdown", exit_code: int = 0) -> bool:
        """
        Run the drain pass once, then call exit_fn(exit_code).

        Returns:
            True for the call that performed the drain, False if a drain was
            already running or finished.
        """
        with self._lock:
            if self._state is not State.RUNNING:
                return False
            self._state = State.DRAINING

        logger.info(f"Shutting down ({reason})")
        try:
            detached = self.registry.close()
            failures = self._quit_all(detached)
            if failures:
                logger.warning(f"{len(failures)} of {len(detached)} browser session(s) did not quit cleanly")
            else:
                logger.info(f"Closed {len(detached)} browser session(s)")
            if not self.registry.wait_for_launches(self.quit_timeout):
                logger.warning(f"A browser launch was still running after {self.quit_timeout}s")
        except Exception:
            logger.exception("Browser cleanup failed during shutdown")
        finally:
            self._state = State.TERMINATED
            self._done.set()
            self._exit_fn(exit_code)
        return True

    def _quit_all(self, detached: List[Tuple[str, object]]) -> List[str]:
        """Quit every handle concurrently; one failure or hang does not block the others."""
        if not detached:
            return []

        failures = []
        pool = concurrent.futures.ThreadPoolExecutor(
            max_workers=len(detached), thread_name_prefix="mcp-selenium-quit"
        )
        try:
            futures = {pool.submit(handle.quit): (session_id, handle) for session_id, handle in detached}
            done, pending = concurrent.futures.wait(futures, timeout=self.quit_timeout)

            for future in done:
                session_id, handle = futures[future]
                exc = future.exception()
                if exc is None:
                    logger.debug(f"Session {session_id} quit")
                    continue
                logger.error(f"Error closing browser session {session_id}: {exc}")
                failures.append(session_id)
                self._force_kill(session_id, handle)

            for future in pending:
                session_id, handle = futures[future]
                logger.error(f"Browser session {session_id} did not quit within {self.quit_timeout}s")
                failures.append(session_id)
                self._force_kill(session_id, handle)
        finally:
            # Do not wait for hung quit() calls; the process is about to exit.
            pool.shutdown(wait=False, cancel_futures=True)
        return failures

    @staticmethod
    def _force_kill(session_id: str, handle) -> None:
        try:
            pid = getattr(handle, "service_pid", None)
        except Exception:
            pid = None
        killed = kill_process_tree(pid)
        if killed:
            logger.warning(f"Killed {len(killed)} leftover process(es) of session {session_id}")


__all__ = ["State", "ShutdownCoordinator", "kill_process_tree"]
