"""Domain entities for ingestion and retrieval — framework-independent."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Document:
    """A raw document submitted for ingestion. Never persisted as a unit."""

    id: str
    title: str
    text: str


@dataclass
class Chunk:
    """A bounded-length slice of a document's text.

    The chunk id is ``<doc_id>::<index>`` so re-ingesting the same
    document yields the same ids.
    """

    doc_id: str
    title: str
    index: int
    text: str

    @property
    def chunk_id(self) -> str:
        return f"{self.doc_id}::{self.index}"

    @property
    def blob_key(self) -> str:
        """Deterministic blob store key holding this chunk's text."""
        return f"chunks/{self.chunk_id}.txt"


@dataclass
class VectorRecord:
    """An embedding plus pointer metadata, as upserted into the vector index.

    Metadata holds ``docId``, ``title``, ``chunkIndex`` and ``blobKey`` only;
    chunk text lives in the blob store.
    """

    id: str
    values: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: Chunk, values: list[float]) -> "VectorRecord":
        return cls(
            id=chunk.chunk_id,
            values=values,
            metadata={
                "docId": chunk.doc_id,
                "title": chunk.title,
                "chunkIndex": chunk.index,
                "blobKey": chunk.blob_key,
            },
        )


@dataclass
class VectorMatch:
    """A single result from a vector similarity query."""

    id: str
    score: float  # cosine similarity
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class IngestResult:
    """Outcome of one ingestion call."""

    stored_chunks: int = 0
    upserted_vectors: int = 0
