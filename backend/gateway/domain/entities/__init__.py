from .chat import (
    ChatAnswer,
    ChatCompletionResult,
    ChatMessage,
    Snippet,
    SourceRef,
    TokenUsage,
)
from .document import Chunk, Document, IngestResult, VectorMatch, VectorRecord
from .rate_limit import RateLimitDecision

__all__ = [
    "ChatAnswer",
    "ChatCompletionResult",
    "ChatMessage",
    "Chunk",
    "Document",
    "IngestResult",
    "RateLimitDecision",
    "Snippet",
    "SourceRef",
    "TokenUsage",
    "VectorMatch",
    "VectorRecord",
]
