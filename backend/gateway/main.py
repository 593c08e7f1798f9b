"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from sqlalchemy import text

from gateway.application.services import RateLimiter
from gateway.config import Settings, get_settings
from gateway.infrastructure.database import Base, RateLimitBucketModel, engine
from gateway.infrastructure.dependencies import build_rate_limiter
from gateway.infrastructure.logging.log_config import setup_logging
from gateway.presentation.api.router import router as api_router
from gateway.presentation.errors import register_exception_handlers
from gateway.presentation.middleware import GatewayGuardMiddleware

logger = logging.getLogger(__name__)


async def _create_tables() -> None:
    """Create the gateway tables.

    PostgreSQL gets the pgvector extension and every table; other backends
    (e.g. SQLite for a single-instance rate limiter) get the bucket table only.
    """
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            await conn.run_sync(Base.metadata.create_all)
        else:
            await conn.run_sync(
                Base.metadata.create_all, tables=[RateLimitBucketModel.__table__]
            )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, create tables, prepare blob storage."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    try:
        await _create_tables()
    except Exception:
        logger.exception("Failed to create database tables — continuing without them")

    Path(settings.blob_dir).mkdir(parents=True, exist_ok=True)

    if not settings.admin_ingest_token:
        logger.warning("ADMIN_INGEST_TOKEN is not configured; /admin/ingest will reject all requests.")
    if not settings.openrouter_api_key.strip():
        logger.warning("OPENROUTER_API_KEY is not configured; chat and ingestion will fail upstream.")

    logger.info(
        "Gateway ready — origins=%d, rate_limit=%d/%ds (%s)",
        len(settings.origin_allowlist),
        settings.rl_max_req_per_window,
        settings.rl_window_sec,
        settings.rate_limit_backend,
    )

    yield

    await engine.dispose()


def create_app(
    settings: Settings | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Origin allowlist, rate limiting and CORS headers
    app.add_middleware(
        GatewayGuardMiddleware,
        allowlist=settings.origin_allowlist,
        rate_limiter=rate_limiter or build_rate_limiter(settings),
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gateway.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
