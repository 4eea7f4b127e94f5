"""
Health check router.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from ..config import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    service: str = "land-registry-service"
    storage_bucket: str


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness probe; returns 200 while the service is running."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        storage_bucket=settings.STORAGE_BUCKET,
    )
