"""Time-boxed admin override ("act as") sessions."""

from .session import OverrideSession
from .store import SessionStore, InMemorySessionStore, RedisSessionStore, build_session_store
from .manager import OverrideSessionManager

__all__ = [
    "OverrideSession",
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
    "build_session_store",
    "OverrideSessionManager",
]
