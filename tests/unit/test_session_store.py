"""Tests for override session stores."""

import json
import time
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from medadmin.core.clock import utcnow
from medadmin.core.override import (
    InMemorySessionStore,
    OverrideSession,
    RedisSessionStore,
    build_session_store,
)
from medadmin.core.override.store import _DELETE_IF_EQUAL


NOW = datetime(2025, 6, 1, 9, 0, 0)


def make_session(admin_id="admin-1", target_id="u-1", minutes=30, started_at=NOW):
    return OverrideSession(
        original_admin_id=admin_id,
        target_user_id=target_id,
        target_user_email=f"{target_id}@example.com",
        reason="support",
        started_at=started_at,
        expires_at=started_at + timedelta(minutes=minutes),
    )


class TestOverrideSession:

    def test_json_round_trip(self):
        session = make_session()
        assert OverrideSession.from_json(session.to_json()) == session

    def test_is_expired_at_boundary(self):
        session = make_session(minutes=30)
        assert not session.is_expired(NOW + timedelta(minutes=29))
        assert session.is_expired(NOW + timedelta(minutes=30))

    def test_to_dict_uses_iso_timestamps(self):
        data = make_session().to_dict()
        assert data["started_at"] == "2025-06-01T09:00:00"
        assert data["expires_at"] == "2025-06-01T09:30:00"


class TestInMemorySessionStore:

    @pytest.fixture
    def store(self):
        return InMemorySessionStore(clock=lambda: NOW, schedule_cleanup=False)

    def test_set_if_absent(self, store):
        first = make_session()
        assert store.set_if_absent("admin-1", first)
        assert not store.set_if_absent("admin-1", make_session(target_id="u-2"))
        assert store.get("admin-1") == first

    def test_set_replaces_expired_entry(self):
        now = [NOW]
        store = InMemorySessionStore(clock=lambda: now[0], schedule_cleanup=False)
        store.set_if_absent("admin-1", make_session(minutes=5))

        now[0] = NOW + timedelta(minutes=5)
        replacement = make_session(started_at=now[0])
        assert store.set_if_absent("admin-1", replacement)
        assert store.get("admin-1") == replacement

    def test_delete_with_expected(self, store):
        session = make_session()
        store.set_if_absent("admin-1", session)

        assert not store.delete("admin-1", expected=make_session(target_id="u-9"))
        assert store.get("admin-1") == session
        assert store.delete("admin-1", expected=session)
        assert store.get("admin-1") is None
        assert not store.delete("admin-1")

    def test_values(self, store):
        store.set_if_absent("admin-1", make_session("admin-1"))
        store.set_if_absent("admin-2", make_session("admin-2", target_id="u-2"))
        assert {s.original_admin_id for s in store.values()} == {"admin-1", "admin-2"}

    def test_timer_evicts_at_expiry(self):
        store = InMemorySessionStore()
        started = utcnow()
        session = OverrideSession(
            original_admin_id="admin-1",
            target_user_id="u-1",
            target_user_email="u-1@example.com",
            reason="support",
            started_at=started,
            expires_at=started + timedelta(milliseconds=50),
        )
        assert store.set_if_absent("admin-1", session)

        deadline = time.monotonic() + 2
        while store.get("admin-1") is not None and time.monotonic() < deadline:
            time.sleep(0.01)
        assert store.get("admin-1") is None
        store.close()

    def test_delete_cancels_timer(self):
        store = InMemorySessionStore(clock=lambda: NOW)
        session = make_session()
        store.set_if_absent("admin-1", session)
        timer = store._timers["admin-1"]

        store.delete("admin-1")
        assert "admin-1" not in store._timers
        assert timer.finished.is_set()
        store.close()


class TestRedisSessionStore:

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def store(self, client):
        return RedisSessionStore(client, prefix="override:", clock=lambda: NOW)

    def test_set_if_absent_uses_nx_and_ttl(self, store, client):
        client.set.return_value = True
        session = make_session(minutes=30)

        assert store.set_if_absent("admin-1", session)
        client.set.assert_called_once_with(
            "override:admin-1", session.to_json(), nx=True, px=30 * 60 * 1000
        )

    def test_set_if_absent_existing_key(self, store, client):
        client.set.return_value = None
        assert not store.set_if_absent("admin-1", make_session())

    def test_set_if_absent_already_expired(self, store, client):
        session = make_session(started_at=NOW - timedelta(hours=1))
        assert not store.set_if_absent("admin-1", session)
        client.set.assert_not_called()

    def test_get(self, store, client):
        session = make_session()
        client.get.return_value = session.to_json()
        assert store.get("admin-1") == session
        client.get.assert_called_once_with("override:admin-1")

    def test_get_missing(self, store, client):
        client.get.return_value = None
        assert store.get("admin-1") is None

    def test_delete_unconditional(self, store, client):
        client.delete.return_value = 1
        assert store.delete("admin-1")
        client.delete.assert_called_once_with("override:admin-1")

    def test_delete_with_expected_is_atomic(self, store, client):
        client.eval.return_value = 0
        session = make_session()

        assert not store.delete("admin-1", expected=session)
        client.eval.assert_called_once_with(
            _DELETE_IF_EQUAL, 1, "override:admin-1", session.to_json()
        )
        client.delete.assert_not_called()

    def test_values(self, store, client):
        sessions = {
            "override:admin-1": make_session("admin-1").to_json(),
            "override:admin-2": make_session("admin-2", target_id="u-2").to_json(),
        }
        client.scan_iter.return_value = iter(list(sessions) + ["override:gone"])
        client.get.side_effect = lambda key: sessions.get(key)

        values = store.values()
        assert [s.original_admin_id for s in values] == ["admin-1", "admin-2"]
        client.scan_iter.assert_called_once_with(match="override:*")

    def test_stored_value_is_json(self, store, client):
        client.set.return_value = True
        store.set_if_absent("admin-1", make_session())
        stored = json.loads(client.set.call_args[0][1])
        assert stored["target_user_id"] == "u-1"


class TestBuildSessionStore:

    def test_memory_backend(self, settings):
        assert isinstance(build_session_store(settings), InMemorySessionStore)

    def test_redis_backend(self, settings):
        settings.override_session_backend = "redis"
        settings.redis_url = "redis://cache:6379/2"
        with patch("medadmin.core.override.store.redis.from_url") as from_url:
            store = build_session_store(settings)

        assert isinstance(store, RedisSessionStore)
        assert from_url.call_args[0][0] == "redis://cache:6379/2"
