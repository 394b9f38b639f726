"""
Hotel Parcel Tracking — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── mock_db_session: Mock database session (service unit tests)
    ├── db_engine:       In-memory SQLite engine with the schema created
    ├── db_session:      AsyncSession bound to db_engine (repository tests)
    ├── test_client:     HTTPX AsyncClient whose requests hit db_engine
    └── make_guest / make_parcel: transient model builders
"""

import os

# Override settings for testing BEFORE any parcel_tracking import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["API_PREFIX"] = "/api"

from datetime import datetime, timezone
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from parcel_tracking.database import Base, get_db_session
from parcel_tracking.models import Guest, Parcel


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Services never touch the session directly (repositories do), so service
    tests patch the repositories and only pass this object through.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Database (repository and API tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with every table and index created.

    StaticPool keeps a single connection alive, so the schema and data
    survive across the sessions opened during one test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    get_db_session is overridden with the same commit/rollback contract, but
    bound to the in-memory test database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/guests")
            assert response.status_code == 200
    """
    from parcel_tracking.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Model Builders
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_guest():
    """Builds a transient Guest; checked in unless checked_out=True."""

    def _make(
        guest_id: int = 1,
        name: str = "Alice",
        room_number: str = "101",
        checked_out: bool = False,
    ) -> Guest:
        now = datetime.now(timezone.utc)
        return Guest(
            id=guest_id,
            name=name,
            room_number=room_number,
            check_in_time=now,
            check_out_time=now if checked_out else None,
            parcels=[],
        )

    return _make


@pytest.fixture
def make_parcel():
    """Builds a transient Parcel attached to the given guest."""

    def _make(
        guest: Guest,
        parcel_id: int = 1,
        tracking_number: str = "TRK1",
        sender: str = "DHL",
        collected: bool = False,
        description: Optional[str] = None,
    ) -> Parcel:
        now = datetime.now(timezone.utc)
        return Parcel(
            id=parcel_id,
            tracking_number=tracking_number,
            sender=sender,
            description=description,
            arrival_time=now,
            collection_time=now if collected else None,
            collected=collected,
            guest_id=guest.id,
            guest=guest,
        )

    return _make
