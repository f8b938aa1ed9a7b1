"""Keyed storage for override sessions.

Sessions are keyed by the admin's user id. Every mutation is atomic per key:
``set_if_absent`` only stores when no live session exists, and ``delete``
with ``expected`` only removes the exact session the caller looked at, so a
lazy eviction can never drop a session another request just created.

``InMemorySessionStore`` only gives consistent behaviour on a single process;
multi-instance deployments use ``RedisSessionStore``.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, List, Optional

import redis

from ..clock import utcnow
from ..config import Settings, get_settings
from ..logger import get_logger
from .session import OverrideSession


logger = get_logger(__name__)

Clock = Callable[[], datetime]


class SessionStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[OverrideSession]:
        """Return the stored session for ``key`` (expired or not)."""

    @abstractmethod
    def set_if_absent(self, key: str, session: OverrideSession) -> bool:
        """Store ``session`` unless a live one exists; True if stored."""

    @abstractmethod
    def delete(self, key: str, expected: Optional[OverrideSession] = None) -> bool:
        """Remove ``key``; with ``expected``, only if it still holds that session."""

    @abstractmethod
    def values(self) -> List[OverrideSession]:
        """All stored sessions."""


class InMemorySessionStore(SessionStore):
    """
    Process-local store guarded by a single mutex.

    Each stored session gets a daemon timer that evicts it at ``expires_at``;
    readers still check expiry themselves since timers are best effort.
    """

    def __init__(self, clock: Clock = utcnow, *, schedule_cleanup: bool = True):
        self._sessions: Dict[str, OverrideSession] = {}
        self._timers: Dict[str, threading.Timer] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self._schedule_cleanup = schedule_cleanup

    def get(self, key: str) -> Optional[OverrideSession]:
        with self._lock:
            return self._sessions.get(key)

    def set_if_absent(self, key: str, session: OverrideSession) -> bool:
        with self._lock:
            existing = self._sessions.get(key)
            if existing is not None and not existing.is_expired(self._clock()):
                return False
            self._cancel_timer(key)
            self._sessions[key] = session
            if self._schedule_cleanup:
                self._start_timer(key, session)
            return True

    def delete(self, key: str, expected: Optional[OverrideSession] = None) -> bool:
        with self._lock:
            current = self._sessions.get(key)
            if current is None or (expected is not None and current != expected):
                return False
            del self._sessions[key]
            self._cancel_timer(key)
            return True

    def values(self) -> List[OverrideSession]:
        with self._lock:
            return list(self._sessions.values())

    def close(self) -> None:
        """Cancel all pending cleanup timers."""
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()

    def _start_timer(self, key: str, session: OverrideSession) -> None:
        delay = max(0.0, (session.expires_at - self._clock()).total_seconds())
        timer = threading.Timer(delay, self._expire, args=(key, session))
        timer.daemon = True
        self._timers[key] = timer
        timer.start()

    def _cancel_timer(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()

    def _expire(self, key: str, session: OverrideSession) -> None:
        with self._lock:
            if self._sessions.get(key) != session:
                return
            if not session.is_expired(self._clock()):
                # Woke up early
                self._start_timer(key, session)
                return
            del self._sessions[key]
            self._timers.pop(key, None)
            logger.info("Override session for admin %s expired", key)


# Deletes KEYS[1] only if it still holds ARGV[1]
_DELETE_IF_EQUAL = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


class RedisSessionStore(SessionStore):
    """
    Shared store for multi-instance deployments.

    Sessions are stored as JSON with a millisecond TTL matching ``expires_at``,
    so Redis performs the scheduled cleanup.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        *,
        redis_url: Optional[str] = None,
        prefix: Optional[str] = None,
        clock: Clock = utcnow,
    ):
        settings = get_settings()
        self._redis = client or redis.from_url(
            redis_url or settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        self.prefix = prefix if prefix is not None else settings.override_key_prefix
        self._clock = clock

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[OverrideSession]:
        raw = self._redis.get(self._key(key))
        return OverrideSession.from_json(raw) if raw else None

    def set_if_absent(self, key: str, session: OverrideSession) -> bool:
        ttl_ms = int((session.expires_at - self._clock()).total_seconds() * 1000)
        if ttl_ms <= 0:
            return False
        return bool(self._redis.set(self._key(key), session.to_json(), nx=True, px=ttl_ms))

    def delete(self, key: str, expected: Optional[OverrideSession] = None) -> bool:
        if expected is None:
            return bool(self._redis.delete(self._key(key)))
        return bool(self._redis.eval(_DELETE_IF_EQUAL, 1, self._key(key), expected.to_json()))

    def values(self) -> List[OverrideSession]:
        sessions = []
        for redis_key in self._redis.scan_iter(match=f"{self.prefix}*"):
            raw = self._redis.get(redis_key)
            if raw:
                sessions.append(OverrideSession.from_json(raw))
        return sessions


def build_session_store(settings: Optional[Settings] = None) -> SessionStore:
    """Create the store selected by ``override_session_backend``."""
    settings = settings or get_settings()
    if settings.override_session_backend == "redis":
        return RedisSessionStore(redis_url=settings.redis_url, prefix=settings.override_key_prefix)
    return InMemorySessionStore()
