"""
Browser session registry.

Holds every live browser session of this process and the "current session"
pointer that commands without an explicit target are routed to.

Ownership:
    One SessionRegistry is created by the server entry point and handed to
    the CommandDispatcher and the ShutdownCoordinator. There is no module
    level instance.

Thread Safety:
    Driver calls run in worker threads and shutdown runs in its own thread,
    so every read and mutation holds an internal threading.Lock. A reader
    never sees a half-inserted session or a current pointer that names a
    removed entry.
"""

import time
import threading
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import NoActiveSession, RegistryClosed

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    One launched browser plus its driver handle.

    Attributes:
        id: Opaque identifier, "{kind}_{epoch_millis}" (suffixed on collision)
        kind: "chrome" or "firefox"
        handle: The DriverHandle owned by this session
        created_at: Wall-clock creation time
    """

    id: str
    kind: str
    handle: object
    created_at: float = field(default_factory=time.time)

    def describe(self) -> dict:
        return {"session_id": self.id, "browser": self.kind, "created_at": self.created_at}


def pick_default(sessions: Dict[str, Session]) -> Optional[str]:
    """
    Choose the session used when no current session is set.

    Policy: the oldest remaining session (first by insertion order).
    Returns None for an empty mapping.
    """
    for session_id in sessions:
        return session_id
    return None


class SessionRegistry:
    """Mapping of session id -> Session with a single current pointer."""

    def __init__(self, clock=None):
        self._clock = clock or time.time
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}
        self._current: Optional[str] = None
        self._issued = set()
        self._closed = False
        self._launching = 0
        self._idle = threading.Condition(self._lock)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_id(self) -> Optional[str]:
        with self._lock:
            return self._current

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def __contains__(self, session_id) -> bool:
        with self._lock:
            return session_id in self._sessions

    def list_sessions(self) -> List[dict]:
        with self._lock:
            return [
                {**s.describe(), "current": s.id == self._current}
                for s in self._sessions.values()
            ]

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NoActiveSession(f"No browser session with id '{session_id}'.")
        return session

    def resolve_current(self) -> Session:
        """
        Return the current session.

        If no session is marked current but sessions exist, one is picked with
        pick_default() and becomes current.

        Raises:
            NoActiveSession: the registry is empty.
        """
        with self._lock:
            if self._current is None and self._sessions:
                self._current = pick_default(self._sessions)
                logger.debug(f"No current session set; auto-selected {self._current}")
            session = self._sessions.get(self._current) if self._current else None
        if session is None:
            raise NoActiveSession()
        return session

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, kind: str, handle) -> str:
        """
        Register a launched handle as a new session and make it current.

        Raises:
            RegistryClosed: close() has been called; the caller still owns handle.
        """
        with self._lock:
            if self._closed:
                raise RegistryClosed()
            session_id = self._new_id(kind)
            self._sessions[session_id] = Session(id=session_id, kind=kind, handle=handle)
            self._current = session_id
        logger.info(f"Registered browser session {session_id}")
        return session_id

    def select(self, session_id: str) -> Session:
        """Make an existing session current."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NoActiveSession(f"No browser session with id '{session_id}'.")
            self._current = session_id
        return session

    def remove(self, session_id: str) -> Session:
        """Detach one session. The caller is responsible for quitting its handle."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                raise NoActiveSession(f"No browser session with id '{session_id}'.")
            if self._current == session_id:
                self._current = None
        logger.info(f"Removed browser session {session_id}")
        return session

    def remove_all(self) -> List[Tuple[str, object]]:
        """
        Atomically detach every session.

        Returns:
            (session_id, handle) for each session that was registered; empty
            list if there were none. Afterwards the registry is empty and no
            session is current.
        """
        with self._lock:
            detached = [(s.id, s.handle) for s in self._sessions.values()]
            self._sessions = {}
            self._current = None
        return detached

    def close(self) -> List[Tuple[str, object]]:
        """
        Detach every session and refuse new ones from now on.

        A launch still in flight when this runs gets RegistryClosed from
        create() and must quit its own handle.
        """
        with self._lock:
            self._closed = True
            detached = [(s.id, s.handle) for s in self._sessions.values()]
            self._sessions = {}
            self._current = None
        return detached

    @contextmanager
    def launching(self):
        """
        Mark a browser launch as in flight until the block exits.

        Raises:
            RegistryClosed: the registry is already closed; nothing should be launched.
        """
        with self._lock:
            if self._closed:
                raise RegistryClosed()
            self._launching += 1
        try:
            yield
        finally:
            with self._lock:
                self._launching -= 1
                self._idle.notify_all()

    def wait_for_launches(self, timeout: Optional[float] = None) -> bool:
        """Block until no launch is in flight. Returns False on timeout."""
        with self._lock:
            return self._idle.wait_for(lambda: self._launching == 0, timeout)

    def _new_id(self, kind: str) -> str:
        # Caller holds the lock. Ids are never reused, even after removal.
        base = f"{kind}_{int(self._clock() * 1000)}"
        session_id = base
        n = 1
        while session_id in self._issued:
            session_id = f"{base}_{n}"
            n += 1
        self._issued.add(session_id)
        return session_id


__all__ = ["Session", "SessionRegistry", "pick_default"]
