"""
Health check endpoint schemas.

The health endpoint is PUBLIC (no authentication required).
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health endpoint.

    Used by load balancers and deployment checks.
    """

    status: str = Field(
        default="ok",
        description="Health status of the API (always 'ok' if responding)",
        examples=["ok"]
    )
    service: str = Field(
        default="invoice-dashboard",
        description="Service name",
        examples=["invoice-dashboard"]
    )
    cached_views: int = Field(
        default=0,
        description="Number of list-view payloads currently cached in this process",
        examples=[3]
    )
