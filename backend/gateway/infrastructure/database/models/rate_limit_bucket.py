"""SQLAlchemy ORM model for fixed-window rate-limit buckets."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gateway.infrastructure.database.base import Base


class RateLimitBucketModel(Base):
    """ORM model — maps to the 'rate_limit_buckets' table.

    ``bucket_key`` is ``<client_key>:<window_index>``; ``window_index`` is
    stored separately so stale windows can be purged with one DELETE.
    """

    __tablename__ = "rate_limit_buckets"

    bucket_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    window_index: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RateLimitBucketModel(key='{self.bucket_key}', count={self.count})>"
