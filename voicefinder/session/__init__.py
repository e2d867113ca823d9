# Conversation memory and follow-up handling.

from .store import InMemorySessionStore, RecentRequests, SessionStore
from .types import FilterState, Session

__all__ = ["InMemorySessionStore", "RecentRequests", "SessionStore", "FilterState", "Session"]
