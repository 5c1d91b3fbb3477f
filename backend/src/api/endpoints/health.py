"""
Health check endpoints.
Simple endpoints for monitoring application health and status.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.config.settings import Settings, get_settings

API_VERSION = "1.0.0"

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    version: str
    environment: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response model."""

    status: str
    timestamp: datetime
    version: str
    environment: str
    services: dict


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
        environment=settings.environment,
    )


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(settings: Settings = Depends(get_settings)):
    """Detailed health check with configuration status. Never reports credentials."""
    services = {
        "storage": "configured" if settings.storage_configured else "not_configured",
        "generation": settings.generation_mode,
    }

    return DetailedHealthResponse(
        status="ok" if settings.storage_configured else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
        environment=settings.environment,
        services=services,
    )
