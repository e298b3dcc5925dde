"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

from ..dependencies import get_container

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    session: str


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

    Ready once the service container is started and the session engine
    could reach the backend.
    """
    container = get_container()
    if not container.started:
        return ReadinessResponse(status="not_ready", database="unavailable", session="stopped")

    session = container.session.state
    reachable = not session.connection_error
    return ReadinessResponse(
        status="ready" if reachable else "degraded",
        database="connected" if reachable else "unreachable",
        session=session.status.value,
    )
