"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

# ---------------------------------------------------------------------------
# Ensure valid secrets are always set for test runs.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
_TEST_SIGNING_SECRET = "test-signing-secret"
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)
os.environ.setdefault("SLACK_SIGNING_SECRET", _TEST_SIGNING_SECRET)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from slackstats.database.models import Base  # noqa: E402
from slackstats.services.member_store import MemberStore  # noqa: E402


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all SlackStats tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used in ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def clock() -> FrozenClock:
    """A clock pinned to 15 Oct 2023, 12:00 UTC."""
    return FrozenClock(datetime(2023, 10, 15, 12, 0, tzinfo=UTC))


@pytest.fixture
def store(db_engine, clock) -> MemberStore:
    return MemberStore(db_engine, clock=clock)
