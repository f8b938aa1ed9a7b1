"""Pytest configuration and shared fixtures."""

import os

# Must be set before medadmin.db.session builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medadmin.core.config import Settings
from medadmin.db.base import Base
from tests.factories import make_actor


@pytest.fixture
def engine():
    """In-memory SQLite engine; every session shares the one connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return Settings(
        override_session_backend="memory",
        override_min_minutes=5,
        override_max_minutes=120,
        override_default_minutes=30,
        secret_key="test-secret",
        file_logging=False,
    )


@pytest.fixture
def admin_actor():
    return make_actor("admin-1", "ADMIN")


@pytest.fixture
def second_admin_actor():
    return make_actor("admin-2", "ADMIN")


@pytest.fixture
def plain_actor():
    return make_actor("user-1", "USER")
