"""Pydantic v2 schemas (DTOs) for the public chat endpoint."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gateway.application.schemas.fields import scalar_to_str


class ChatRequest(BaseModel):
    """Request body for ``POST /chat``."""

    message: str = Field(default="", description="The visitor's question")

    @field_validator("message", mode="before")
    @classmethod
    def _coerce_message(cls, value):
        return scalar_to_str(value)


class SourceSchema(BaseModel):
    """A citation for one retrieved snippet."""

    model_config = ConfigDict(populate_by_name=True)

    ref: str = Field(..., description="Reference tag used in the answer, e.g. '#1'")
    title: str
    doc_id: str = Field(..., alias="docId")
    chunk_index: int = Field(..., alias="chunkIndex")


class ChatResponse(BaseModel):
    """Response body for ``POST /chat``."""

    answer: str
    sources: list[SourceSchema] = Field(default_factory=list)
