"""
Pytest fixtures for test database, client, authentication and a small venue.

Each test gets its own database: tables are created on a fresh engine and
dropped afterwards. TEST_DATABASE_URL selects the store; the default is an
in-memory SQLite database so the suite runs without services.
"""

import os

# Must be set before the app reads its settings
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ADMIN_EMAILS", '["admin@example.com"]')

from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from cricket_tickets.main import app
from cricket_tickets.db.base import Base
from cricket_tickets.db.session import get_db
from cricket_tickets.core.security import create_access_token, hash_password
from cricket_tickets.models import Match, Seat, Stadium, Stand, User

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
IS_SQLITE = TEST_DATABASE_URL.startswith("sqlite")


def _engine_kwargs() -> dict:
    if IS_SQLITE:
        # One shared connection, otherwise every session sees its own empty :memory: database
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs())
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _persist(db: AsyncSession, entity):
    db.add(entity)
    await db.commit()
    await db.refresh(entity)
    return entity


def headers_for(user: User) -> dict:
    """Authorization headers with a Bearer token for the given user."""
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


# Users

@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, User(
        email="test@example.com",
        username="testuser",
        hashed_password=hash_password("testpassword123"),
    ))


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, User(
        email="other@example.com",
        username="otheruser",
        hashed_password=hash_password("otherpassword123"),
    ))


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, User(
        email="admin@example.com",
        username="admin",
        hashed_password=hash_password("adminpassword123"),
        is_admin=True,
    ))


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return headers_for(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return headers_for(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


# Venue: one stadium, one stand at 100.00, two rows of three seats, one upcoming match

@pytest_asyncio.fixture
async def test_stadium(db_session: AsyncSession) -> Stadium:
    return await _persist(db_session, Stadium(
        name="Eden Gardens",
        location="Kolkata",
        capacity=68000,
    ))


@pytest_asyncio.fixture
async def test_stand(db_session: AsyncSession, test_stadium: Stadium) -> Stand:
    return await _persist(db_session, Stand(
        stadium_id=test_stadium.id,
        name="North Stand",
        category="general",
        capacity=500,
        base_price=Decimal("100.00"),
    ))


@pytest_asyncio.fixture
async def test_seats(db_session: AsyncSession, test_stand: Stand) -> list[Seat]:
    seats = [
        Seat(stand_id=test_stand.id, row_number=row, seat_number=str(n), status="available")
        for row in ("A", "B")
        for n in (1, 2, 3)
    ]
    db_session.add_all(seats)
    await db_session.commit()
    return seats


@pytest_asyncio.fixture
async def test_match(db_session: AsyncSession, test_stadium: Stadium) -> Match:
    return await _persist(db_session, Match(
        stadium_id=test_stadium.id,
        team_a="India",
        team_b="Australia",
        match_date=datetime.now(timezone.utc) + timedelta(days=7),
        status="upcoming",
    ))
