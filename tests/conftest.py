"""
Shared fixtures: in-memory database, controllable clock, codec and service.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sessiongate.auth.factory import build_auth_service, build_request_authenticator  # noqa: E402
from sessiongate.auth.password import BcryptPasswordHasher  # noqa: E402
from sessiongate.auth.tokens import TokenCodec  # noqa: E402
from sessiongate.db import engine as engine_module  # noqa: E402
from sessiongate.db.engine import init_db  # noqa: E402

TEST_SECRET = "test-secret-key-with-at-least-32-bytes-of-entropy"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def db_engine(monkeypatch):
    """Fresh in-memory SQLite database, also installed as the app engine."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    monkeypatch.setattr(engine_module, "_engine", eng)
    yield eng
    eng.dispose()


@pytest.fixture
def codec(clock):
    return TokenCodec(TEST_SECRET, clock=clock)


@pytest.fixture
def hasher():
    # minimum cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def service(db_engine, codec, hasher, clock):
    return build_auth_service(db_engine, codec=codec, hasher=hasher, clock=clock)


@pytest.fixture
def authenticator(db_engine, codec, clock):
    return build_request_authenticator(db_engine, codec=codec, clock=clock)


@pytest.fixture
def alice(service):
    """A registered USER account and one logged-in session for it."""
    assert service.register("alice", "Secret1!", "USER").ok
    result = service.login("alice", "Secret1!")
    assert result.ok
    return result.value
