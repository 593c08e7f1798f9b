from .blob_store import BlobStore
from .chat_provider import ChatProvider
from .counter_store import CounterStore
from .embedding_provider import EmbeddingProvider
from .vector_index import VectorIndex

__all__ = [
    "BlobStore",
    "ChatProvider",
    "CounterStore",
    "EmbeddingProvider",
    "VectorIndex",
]
