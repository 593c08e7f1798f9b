"""Health check endpoint — no dependencies beyond settings."""

from fastapi import APIRouter, Depends

from gateway.config import Settings
from gateway.infrastructure.dependencies import get_app_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict:
    """Returns the current gateway health status."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
    }
