"""Unit tests for SQLAlchemyCounterStore on a temporary SQLite database."""

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from gateway.application.services.rate_limiter import RateLimiter
from gateway.infrastructure.database.base import Base
from gateway.infrastructure.database.models.rate_limit_bucket import RateLimitBucketModel
from gateway.infrastructure.database.repositories.counter_store_repository import (
    SQLAlchemyCounterStore,
)


async def _make_store(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'rl.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=[RateLimitBucketModel.__table__])
    return engine, SQLAlchemyCounterStore(async_sessionmaker(engine, expire_on_commit=False))


@pytest.mark.asyncio
async def test_increment_until_limit(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        counts = [await store.increment_if_below("ip:1", 3, window_index=1) for _ in range(5)]
        assert counts == [1, 2, 3, None, None]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_purge_removes_older_windows(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        await store.increment_if_below("a:1", 5, window_index=1)
        await store.increment_if_below("b:1", 5, window_index=1)
        await store.increment_if_below("a:2", 5, window_index=2)

        assert await store.purge_before(2) == 2
        assert await store.increment_if_below("a:2", 5, window_index=2) == 2
        assert await store.increment_if_below("a:1", 5, window_index=1) == 1
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_rate_limiter_over_sqlite_stops_at_max(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        limiter = RateLimiter(store, window_seconds=60, max_requests=4, clock=lambda: 6010.0)

        decisions = [await limiter.check("1.2.3.4") for _ in range(8)]

        assert sum(d.allowed for d in decisions) == 4
        assert all(d.retry_after == 50 for d in decisions if not d.allowed)
    finally:
        await engine.dispose()
