"""
Health check endpoint.
"""

from fastapi import APIRouter

from app.models.api.stats_response import HealthResponse
from app.utils.timestamps import now_iso

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    """Basic health check - always returns 200 if app is running."""
    return HealthResponse(status="ok", timestamp=now_iso())
