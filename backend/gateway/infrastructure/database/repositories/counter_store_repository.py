"""SQLAlchemy implementation of CounterStore — one row per rate-limit bucket.

The admission check is a single conditional UPDATE:

    UPDATE rate_limit_buckets SET count = count + 1
    WHERE bucket_key = :key AND count < :limit
    RETURNING count

The row lock taken by the UPDATE serializes concurrent requests for the
same bucket on PostgreSQL; SQLite serializes all writers.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gateway.application.interfaces.counter_store import CounterStore
from gateway.domain.exceptions import UpstreamServiceError
from gateway.infrastructure.database.models.rate_limit_bucket import RateLimitBucketModel

logger = logging.getLogger(__name__)


class SQLAlchemyCounterStore(CounterStore):
    """Durable counter store. Each call runs in its own short transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _insert_if_absent(self, session: AsyncSession, key: str, window_index: int):
        dialect = session.bind.dialect.name if session.bind is not None else "postgresql"
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        return (
            insert(RateLimitBucketModel)
            .values(
                bucket_key=key,
                window_index=window_index,
                count=0,
                updated_at=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(index_elements=[RateLimitBucketModel.bucket_key])
        )

    async def increment_if_below(
        self, key: str, limit: int, *, window_index: int
    ) -> int | None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(
                        self._insert_if_absent(session, key, window_index)
                    )
                    result = await session.execute(
                        update(RateLimitBucketModel)
                        .where(RateLimitBucketModel.bucket_key == key)
                        .where(RateLimitBucketModel.count < limit)
                        .values(
                            count=RateLimitBucketModel.count + 1,
                            updated_at=datetime.now(timezone.utc),
                        )
                        .returning(RateLimitBucketModel.count)
                    )
                    return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise UpstreamServiceError(
                provider="counter-store", status_code=503, message=str(exc)
            ) from exc

    async def purge_before(self, window_index: int) -> int:
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(RateLimitBucketModel).where(
                        RateLimitBucketModel.window_index < window_index
                    )
                )
        count = result.rowcount or 0
        if count > 0:
            logger.info("Purged %d rate-limit buckets older than window %d", count, window_index)
        return count
