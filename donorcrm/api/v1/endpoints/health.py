"""Health check endpoint. No database access; used for liveness probes."""

from fastapi import APIRouter, Request

from donorcrm.core.config import get_settings
from donorcrm.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok plus whether the automation engine is wired."""
    engine = getattr(request.app.state, "automation_engine", None)
    return HealthResponse(
        version=get_settings().app_version,
        automation_engine="enabled" if engine is not None else "disabled",
        runs_in_flight=engine.in_flight if engine is not None else 0,
    )
