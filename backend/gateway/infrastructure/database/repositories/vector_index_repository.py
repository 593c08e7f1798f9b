"""SQLAlchemy implementation of VectorIndex — pgvector-powered similarity search."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gateway.application.interfaces.vector_index import VectorIndex
from gateway.domain.entities import VectorMatch, VectorRecord
from gateway.domain.exceptions import UpstreamServiceError
from gateway.infrastructure.database.models.vector_record import VectorRecordModel

logger = logging.getLogger(__name__)


class PgVectorIndex(VectorIndex):
    """Concrete vector index backed by PostgreSQL + pgvector."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def upsert(self, records: list[VectorRecord]) -> int:
        """Insert records, overwriting any existing row with the same id."""
        if not records:
            return 0

        now = datetime.now(timezone.utc)
        stmt = insert(VectorRecordModel).values(
            [
                {
                    "id": r.id,
                    "embedding": r.values,
                    "metadata_": r.metadata,
                    "updated_at": now,
                }
                for r in records
            ]
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[VectorRecordModel.id],
            set_={
                "embedding": stmt.excluded.embedding,
                "metadata_": stmt.excluded.metadata_,
                "updated_at": stmt.excluded.updated_at,
            },
        )

        try:
            await self._session.execute(stmt)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise UpstreamServiceError(
                provider="pgvector", status_code=503, message=str(exc)
            ) from exc

        logger.info("Upserted %d vector records", len(records))
        return len(records)

    async def query(self, vector: list[float], *, top_k: int) -> list[VectorMatch]:
        """Find the ``top_k`` records closest to ``vector`` by cosine similarity."""
        distance = VectorRecordModel.embedding.cosine_distance(vector)
        stmt = (
            select(
                VectorRecordModel.id,
                VectorRecordModel.metadata_.label("meta"),
                (1 - distance).label("score"),
            )
            .order_by(distance)
            .limit(top_k)
        )

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise UpstreamServiceError(
                provider="pgvector", status_code=503, message=str(exc)
            ) from exc

        return [
            VectorMatch(id=row.id, score=float(row.score), metadata=row.meta or {})
            for row in result.all()
        ]
