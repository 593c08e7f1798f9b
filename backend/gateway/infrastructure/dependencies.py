"""FastAPI dependency injection — wires infrastructure to the application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gateway.application.interfaces import CounterStore
from gateway.application.services import (
    ContentPolicy,
    RagService,
    RateLimiter,
    TextChunker,
)
from gateway.config import Settings, get_settings
from gateway.domain.exceptions import AuthError
from gateway.infrastructure.database.session import async_session_factory, get_db_session
from gateway.infrastructure.database.repositories import (
    PgVectorIndex,
    SQLAlchemyCounterStore,
)
from gateway.infrastructure.openrouter import OpenRouterClient, OpenRouterEmbeddingProvider
from gateway.infrastructure.rate_limit.memory_counter_store import InMemoryCounterStore
from gateway.infrastructure.storage.local_blob_store import LocalBlobStore

_content_policy = ContentPolicy()


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with (falls back to the cached ones)."""
    return getattr(request.app.state, "settings", None) or get_settings()


def build_rate_limiter(settings: Settings) -> RateLimiter:
    """Build the process-wide RateLimiter for the configured backend."""
    store: CounterStore
    if settings.rate_limit_backend == "memory":
        store = InMemoryCounterStore()
    else:
        store = SQLAlchemyCounterStore(async_session_factory)
    return RateLimiter(
        store,
        window_seconds=settings.rl_window_sec,
        max_requests=settings.rl_max_req_per_window,
    )


async def require_admin(
    authorization: str = Header(default=""),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject the request unless it carries the configured admin bearer token."""
    token = authorization[7:] if authorization.startswith("Bearer ") else ""
    expected = settings.admin_ingest_token
    if not token or not expected or token != expected:
        raise AuthError()


async def get_rag_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[RagService, None]:
    """Provides a RagService wired to OpenRouter, pgvector and the blob store."""
    embedding_provider = OpenRouterEmbeddingProvider(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        model=settings.embed_model,
        model_dimensions=settings.embedding_dimensions,
    )
    chat_provider = OpenRouterClient(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
    )

    yield RagService(
        embedding_provider=embedding_provider,
        vector_index=PgVectorIndex(session),
        blob_store=LocalBlobStore(blob_dir=settings.blob_dir),
        chat_provider=chat_provider,
        text_model=settings.text_model,
        policy=_content_policy,
        chunker=TextChunker(
            chunk_size=settings.chunk_size,
            overlap=settings.chunk_overlap,
            min_length=settings.chunk_min_length,
        ),
        top_k=settings.top_k,
        max_input=settings.max_input,
        max_output=settings.max_output,
        snippet_max_chars=settings.snippet_max_chars,
        language=settings.response_language,
    )
