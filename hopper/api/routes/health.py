# hopper/api/routes/health.py
"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from hopper.api.dependencies import get_hopper_version
from hopper.api.models.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Returns server status and version."""
    return HealthResponse(status="healthy", version=get_hopper_version())
