"""
Health Check Route

Simple health check endpoint for liveness probes.
"""

from fastapi import APIRouter

from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Returns service status for liveness probes."""
    return HealthResponse()


@router.get("/", response_model=HealthResponse)
async def index() -> HealthResponse:
    """Root endpoint - same as health check."""
    return HealthResponse()
