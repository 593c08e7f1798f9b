"""Error response schema shared by all endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """JSON body of every non-2xx response."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    retry_after_sec: int | None = Field(default=None, alias="retryAfterSec")
