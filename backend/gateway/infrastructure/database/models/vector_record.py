"""SQLAlchemy ORM model for vector records with pgvector embeddings."""

from datetime import datetime, timezone
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from gateway.config import get_settings
from gateway.infrastructure.database.base import Base

_DIMENSIONS = get_settings().embedding_dimensions


class VectorRecordModel(Base):
    """ORM model — maps to the 'vector_records' table.

    One row per chunk id. Metadata holds pointers only (docId, title,
    chunkIndex, blobKey); chunk text lives in the blob store.
    """

    __tablename__ = "vector_records"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    embedding = mapped_column(Vector(_DIMENSIONS), nullable=False)
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONB, nullable=False, default=dict
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index(
            "idx_vector_records_embedding_hnsw",
            "embedding",
            postgresql_using="hnsw",
            postgresql_ops={"embedding": "vector_cosine_ops"},
        ),
    )

    def __repr__(self) -> str:
        return f"<VectorRecordModel(id='{self.id}')>"
