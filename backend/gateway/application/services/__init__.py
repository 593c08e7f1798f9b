from .content_policy import ContentPolicy
from .rag_service import RagService
from .rate_limiter import RateLimiter, client_key_from_headers
from .text_chunker import TextChunker, chunk_text

__all__ = [
    "ContentPolicy",
    "RagService",
    "RateLimiter",
    "client_key_from_headers",
    "TextChunker",
    "chunk_text",
]
