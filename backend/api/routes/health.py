"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    identity_bridge: str
    token_verification: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether each collaborator is configured. Nothing is contacted.
    """
    settings = get_settings()
    database = bool(settings.supabase_url and settings.supabase_anon_key)
    bridge = bool(settings.identity_bridge_secret)
    tokens = bool(settings.supabase_jwt_secret and settings.firebase_project_id)
    return ReadinessResponse(
        status="ready" if database and bridge and tokens else "degraded",
        database="configured" if database else "missing",
        identity_bridge="configured" if bridge else "missing",
        token_verification="configured" if tokens else "missing",
    )
