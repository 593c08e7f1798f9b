"""Abstract interface (port) for the vector index."""

from abc import ABC, abstractmethod

from gateway.domain.entities import VectorMatch, VectorRecord


class VectorIndex(ABC):
    """Port for vector upsert and similarity query."""

    @abstractmethod
    async def upsert(self, records: list[VectorRecord]) -> int:
        """Insert or overwrite records by id. Returns the number of records written."""
        ...

    @abstractmethod
    async def query(self, vector: list[float], *, top_k: int) -> list[VectorMatch]:
        """Return up to ``top_k`` matches ordered by descending similarity."""
        ...
