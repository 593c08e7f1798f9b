from .chat import ChatRequest, ChatResponse, SourceSchema
from .errors import ErrorResponse
from .ingest import DocumentSchema, IngestRequest, IngestResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "SourceSchema",
    "ErrorResponse",
    "DocumentSchema",
    "IngestRequest",
    "IngestResponse",
]
