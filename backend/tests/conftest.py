"""
Pytest fixtures for test database, client, and seeded users.

Each test gets a fresh engine with the schema created on it, so tests are
isolated without a running PostgreSQL. Point TEST_DATABASE_URL at another
async URL to run the suite against a real server.
"""

import os
from typing import AsyncGenerator

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Settings are read when cinebook is first imported
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("DB_POOL_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from cinebook.main import app
from cinebook.core.config import get_settings
from cinebook.db.base import Base
from cinebook.db.session import get_db
from cinebook.core.security import hash_password
from cinebook.models import User, OccupiedSeat


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create tables on a fresh engine, dispose it after the test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def settings():
    """Live settings object; tests flip flags with monkeypatch.setattr."""
    return get_settings()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a user 'alice' with password 'wonderland'."""
    user = User(username="alice", hashed_password=hash_password("wonderland"))
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def count_rows(session: AsyncSession, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


async def seat_indices(session: AsyncSession, booking_id: int) -> list[int]:
    result = await session.execute(
        select(OccupiedSeat.seat_index)
        .where(OccupiedSeat.booking_id_fk == booking_id)
        .order_by(OccupiedSeat.seat_index)
    )
    return list(result.scalars().all())


def booking_form(**overrides) -> dict:
    form = {
        "user": "alice",
        "movie": "Dune",
        "screening_time": "2024-01-01T20:00",
        "seats_count": "2",
        "total": "25.00",
        "seats_indices": "[3,4]",
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}
