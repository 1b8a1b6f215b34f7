"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    version: str
    automation_engine: str = Field(description="enabled, or disabled without a database")
    runs_in_flight: int = 0
