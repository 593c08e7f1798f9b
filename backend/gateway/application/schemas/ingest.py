"""Pydantic v2 schemas (DTOs) for the admin ingestion endpoint."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gateway.application.schemas.fields import scalar_to_str


class DocumentSchema(BaseModel):
    """A raw document. Missing fields fall back to defaults during ingestion."""

    id: str | int | None = None
    title: str | None = None
    text: str | None = ""

    @field_validator("title", "text", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return scalar_to_str(value)


class IngestRequest(BaseModel):
    """Request body for ``POST /admin/ingest``."""

    docs: list[DocumentSchema] | None = None


class IngestResponse(BaseModel):
    """Response body for a successful ingestion."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    stored_chunks: int = Field(..., alias="storedChunks")
    upserted_vectors: int = Field(..., alias="upsertedVectors")
