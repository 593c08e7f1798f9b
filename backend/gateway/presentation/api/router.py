"""Top-level API router — aggregates the gateway's endpoint routers."""

from fastapi import APIRouter

from gateway.presentation.api.endpoints.chat import router as chat_router
from gateway.presentation.api.endpoints.health import router as health_router
from gateway.presentation.api.endpoints.ingest import router as ingest_router

router = APIRouter()
router.include_router(health_router)
router.include_router(chat_router)
router.include_router(ingest_router)
