"""Trigger API: CRM components report business events here."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from donorcrm.api.v1.dependencies import get_automation_engine, get_tenant_id
from donorcrm.application.services import AutomationEngine
from donorcrm.core.limiter import limit_triggers
from donorcrm.schemas.trigger import TriggerAcceptedResponse, TriggerRequest

router = APIRouter()


@router.post("", response_model=TriggerAcceptedResponse, status_code=202)
@limit_triggers
async def fire_trigger(
    request: Request,
    body: TriggerRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    engine: Annotated[AutomationEngine, Depends(get_automation_engine)],
):
    """Start matching automations. Returns once runs are launched, not finished."""
    executions = await engine.fire(tenant_id, body.trigger, body.to_context())
    return TriggerAcceptedResponse(
        trigger=body.trigger,
        execution_ids=[e.id for e in executions],
    )
