# Session store: thread id -> Session, plus one lock per thread so that two
# messages of the same thread are never handled at the same time.

from __future__ import annotations

import threading
import time
from typing import Dict, Optional, Protocol

from .types import Session


class SessionStore(Protocol):
    def get(self, thread_id: str) -> Optional[Session]: ...

    def put(self, session: Session) -> None: ...

    def delete(self, thread_id: str) -> None: ...

    def lock(self, thread_id: str) -> threading.Lock: ...


class InMemorySessionStore:
    """Process-lifetime store; sessions are lost on restart."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, thread_id: str) -> Optional[Session]:
        return self._sessions.get(thread_id)

    def put(self, session: Session) -> None:
        self._sessions[session.thread_id] = session

    def delete(self, thread_id: str) -> None:
        self._sessions.pop(thread_id, None)

    def lock(self, thread_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(thread_id)
            if lock is None:
                lock = self._locks[thread_id] = threading.Lock()
            return lock

    def __len__(self) -> int:
        return len(self._sessions)


class RecentRequests:
    """Drops the same text re-delivered to the same thread within ``window`` seconds."""

    def __init__(self, window: float = 15.0, clock=time.monotonic):
        self.window = window
        self._clock = clock
        self._seen: Dict[str, float] = {}
        self._guard = threading.Lock()

    def is_duplicate(self, thread_id: str, text: str) -> bool:
        key = f"{thread_id}|{text.lower()}"
        now = self._clock()
        with self._guard:
            # forget expired keys so the map stays small
            self._seen = {k: t for k, t in self._seen.items() if now - t < self.window}
            if key in self._seen:
                return True
            self._seen[key] = now
            return False
