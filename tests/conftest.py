"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of hacknight.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from hacknight.database.models import (  # noqa: E402
    Attendance,
    AttendanceStatus,
    Event,
    Member,
)
from hacknight.database.seed import seed_badges  # noqa: E402

# Fixed evaluation instant: a Thursday evening, after that night's event began.
NOW = datetime(2026, 3, 5, 20, 0, tzinfo=UTC)


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all Hack Night tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used by the check-in route).
    """
    from sqlalchemy.pool import StaticPool

    from hacknight.database.models import Base

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def seeded_engine(db_engine: Engine) -> Engine:
    """``db_engine`` with the ten default badge definitions."""
    seed_badges(db_engine)
    return db_engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


# ---------------------------------------------------------------------------
# Data helpers — plain functions, importable with ``from conftest import ...``
# ---------------------------------------------------------------------------
def add_member(
    engine: Engine,
    email: str = "ada@example.com",
    **kwargs,
) -> str:
    """Insert a member and return its id."""
    with Session(engine) as session:
        member = Member(email=email, **kwargs)
        session.add(member)
        session.commit()
        return member.id


def add_weekly_events(
    engine: Engine,
    count: int,
    *,
    latest: datetime = NOW - timedelta(hours=1),
    prefix: str = "evt",
    canceled: set[int] | None = None,
) -> list[str]:
    """Insert *count* weekly events ending at *latest*.

    Returns Luma ids **most recent first**: ``[f"{prefix}-0", f"{prefix}-1", ...]``
    where ``-0`` starts at *latest* and each next one a week earlier.
    Indexes in *canceled* are marked canceled.
    """
    canceled = canceled or set()
    ids: list[str] = []
    with Session(engine) as session:
        for i in range(count):
            luma_id = f"{prefix}-{i}"
            session.add(Event(
                luma_event_id=luma_id,
                name=f"Hack Night #{count - i}",
                start_at=latest - timedelta(weeks=i),
                is_canceled=i in canceled,
            ))
            ids.append(luma_id)
        session.commit()
    return ids


def add_check_ins(
    engine: Engine,
    member_id: str,
    luma_event_ids: list[str],
    *,
    at: datetime = NOW,
) -> None:
    """Insert checked-in attendance rows for *member_id*."""
    with Session(engine) as session:
        for luma_id in luma_event_ids:
            session.add(Attendance(
                member_id=member_id,
                luma_event_id=luma_id,
                status=AttendanceStatus.CHECKED_IN.value,
                checked_in_at=at,
            ))
        session.commit()


def make_token(sub: str, *, is_admin: bool = False) -> str:
    """Create a signed JWT for API tests."""
    import jwt

    from hacknight.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode(
        {"sub": sub, "is_admin": is_admin},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


@pytest.fixture
def client(seeded_engine: Engine):
    """FastAPI TestClient wired to the in-memory engine and a fixed config."""
    from fastapi.testclient import TestClient

    from hacknight.api.deps import get_config, get_engine, get_luma_client
    from hacknight.api.main import app
    from hacknight.config import HackNightConfig

    app.dependency_overrides[get_engine] = lambda: seeded_engine
    app.dependency_overrides[get_config] = lambda: HackNightConfig(community_name="Test Night")
    app.dependency_overrides[get_luma_client] = lambda: None
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
