"""Async engine and session factory for the gateway database.

PostgreSQL (asyncpg) holds the vector index and the rate-limit buckets.
A ``sqlite:///`` URL is accepted for single-instance deployments that only
need the bucket table.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from gateway.config import get_settings

_ASYNC_DRIVERS = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite:///": "sqlite+aiosqlite:///",
}


def to_async_url(url: str) -> str:
    """Rewrite a plain database URL to use the async driver."""
    for prefix, async_prefix in _ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return async_prefix + url[len(prefix):]
    return url


def build_engine(url: str) -> AsyncEngine:
    async_url = to_async_url(url)
    if async_url.startswith("sqlite"):
        return create_async_engine(async_url)
    return create_async_engine(async_url, pool_pre_ping=True)


engine = build_engine(get_settings().database_url)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency — one session per request, committed on success."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
