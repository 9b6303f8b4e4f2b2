"""
Async engine and per-request session dependency.

Each request gets its own AsyncSession; the session checks a connection out
of the pool on first query and returns it when the request ends. With
DB_POOL_ENABLED=False the engine uses NullPool, so every request opens and
closes a dedicated connection.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from cinebook.core.config import get_settings

settings = get_settings()


def build_engine(url: str = settings.DATABASE_URL):
    if not settings.DB_POOL_ENABLED:
        return create_async_engine(url, echo=False, poolclass=NullPool)
    return create_async_engine(
        url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


engine = build_engine()
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Services own commit/rollback; this only scopes the session."""
    async with SessionLocal() as session:
        yield session


async def dispose_engine() -> None:
    await engine.dispose()
