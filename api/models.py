"""
API response models for Robinson JSON endpoints.

These Pydantic v2 models define the HTTP transport contract for the small JSON
surface (health only). The HTML routes in web/ render templates instead.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for GET /api/v1/health.

    components maps a subsystem name to "ok" or "error". status is "healthy"
    even when a component reports "error" -- the process is alive and answering.
    """

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
