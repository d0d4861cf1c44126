"""
Health check route.

PUBLIC endpoint (no authentication) for load balancers and deployment checks.
"""

import logging

from fastapi import APIRouter

from dashboard.schemas.health import HealthResponse
from dashboard.services import view_cache

logger = logging.getLogger(__name__)

# Mounted at root level in main.py
router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint (no authentication required). "
        "Does not touch the database."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok", cached_views=len(view_cache))
