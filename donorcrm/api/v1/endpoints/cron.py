"""Cron API: periodic sweep that resumes delayed automation executions.

Called by an external scheduler (e.g. every 5 minutes). Guarded by
CRON_SECRET when it is set.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from donorcrm.api.v1.dependencies import get_automation_engine, verify_cron_secret
from donorcrm.application.services import AutomationEngine
from donorcrm.core.limiter import limit_cron
from donorcrm.schemas.cron import SweepResponse
from donorcrm.shared.utils.datetime import utc_now

router = APIRouter()


@router.api_route("/automations", methods=["GET", "POST"], response_model=SweepResponse)
@limit_cron
async def run_automation_sweep(
    request: Request,
    _: Annotated[None, Depends(verify_cron_secret)],
    engine: Annotated[AutomationEngine, Depends(get_automation_engine)],
):
    """Resume every waiting execution whose resume_at has passed."""
    now = utc_now()
    result = await engine.sweep(now)
    return SweepResponse(
        ran_at=now,
        due=result.due,
        resumed=result.resumed,
        skipped=result.skipped,
        failed=result.failed,
    )
