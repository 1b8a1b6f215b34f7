"""Automation API: thin routes delegating to AutomationRepository and ExecutionRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from donorcrm.api.v1.dependencies import (
    get_automation_repo,
    get_automation_repo_for_write,
    get_execution_repo,
    get_tenant_id,
)
from donorcrm.core.limiter import limit_writes
from donorcrm.domain.enums import ExecutionStatus, TriggerKind
from donorcrm.domain.exceptions import (
    AutomationActivationException,
    ResourceNotFoundException,
)
from donorcrm.infrastructure.persistence.repositories import (
    AutomationRepository,
    ExecutionRepository,
)
from donorcrm.schemas.automation import (
    AutomationCreateRequest,
    AutomationResponse,
    AutomationToggleRequest,
    AutomationUpdate,
)
from donorcrm.schemas.execution import ExecutionResponse

router = APIRouter()


@router.post("", response_model=AutomationResponse, status_code=201)
@limit_writes
async def create_automation(
    request: Request,
    body: AutomationCreateRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    automation_repo: AutomationRepository = Depends(get_automation_repo_for_write),
):
    """Create an automation with its steps (tenant-scoped). Inactive unless requested."""
    automation = await automation_repo.create_automation(tenant_id, body.to_dto())
    return AutomationResponse.model_validate(automation)


@router.get("", response_model=list[AutomationResponse])
async def list_automations(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    include_inactive: bool = True,
    trigger: TriggerKind | None = None,
    automation_repo: AutomationRepository = Depends(get_automation_repo),
):
    """List automations for tenant (newest first, paginated)."""
    automations = await automation_repo.get_by_tenant(
        tenant_id=tenant_id,
        skip=skip,
        limit=limit,
        include_inactive=include_inactive,
        trigger=trigger,
    )
    return [AutomationResponse.model_validate(a) for a in automations]


@router.get("/{automation_id}", response_model=AutomationResponse)
async def get_automation(
    automation_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    automation_repo: AutomationRepository = Depends(get_automation_repo),
):
    """Get automation by id (tenant-scoped)."""
    automation = await automation_repo.get_by_id_and_tenant(automation_id, tenant_id)
    if not automation:
        raise ResourceNotFoundException("automation", automation_id)
    return AutomationResponse.model_validate(automation)


@router.put("/{automation_id}", response_model=AutomationResponse)
@limit_writes
async def update_automation(
    request: Request,
    automation_id: str,
    body: AutomationUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    automation_repo: AutomationRepository = Depends(get_automation_repo_for_write),
):
    """Update automation (tenant-scoped). Running executions keep their loaded steps."""
    automation = await automation_repo.get_by_id_and_tenant(automation_id, tenant_id)
    if not automation:
        raise ResourceNotFoundException("automation", automation_id)
    if body.name is not None:
        automation.name = body.name
    if body.description is not None:
        automation.description = body.description
    if body.trigger is not None:
        automation.trigger = body.trigger.value
    if body.trigger_config is not None:
        automation.trigger_config = body.trigger_config
    if body.steps is not None:
        if automation.is_active and not body.steps:
            raise AutomationActivationException(
                automation_id, "an active automation needs at least one step"
            )
        await automation_repo.replace_steps(automation, [s.to_dto() for s in body.steps])
    updated = await automation_repo.update(automation)
    return AutomationResponse.model_validate(updated)


@router.post("/{automation_id}/toggle", response_model=AutomationResponse)
@limit_writes
async def toggle_automation(
    request: Request,
    automation_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    body: AutomationToggleRequest | None = None,
    automation_repo: AutomationRepository = Depends(get_automation_repo_for_write),
):
    """Activate or deactivate (flips when is_active is omitted). Needs steps to activate."""
    automation = await automation_repo.get_by_id_and_tenant(automation_id, tenant_id)
    if not automation:
        raise ResourceNotFoundException("automation", automation_id)
    target = not automation.is_active
    if body is not None and body.is_active is not None:
        target = body.is_active
    updated = await automation_repo.set_active(automation, target)
    return AutomationResponse.model_validate(updated)


@router.delete("/{automation_id}", status_code=204)
@limit_writes
async def delete_automation(
    request: Request,
    automation_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    automation_repo: AutomationRepository = Depends(get_automation_repo_for_write),
):
    """Soft-delete automation. Execution history is kept."""
    result = await automation_repo.soft_delete(automation_id, tenant_id)
    if not result:
        raise ResourceNotFoundException("automation", automation_id)


@router.get(
    "/{automation_id}/executions",
    response_model=list[ExecutionResponse],
)
async def get_automation_executions(
    automation_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    automation_repo: AutomationRepository = Depends(get_automation_repo),
    execution_repo: ExecutionRepository = Depends(get_execution_repo),
    status: ExecutionStatus | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """Execution history for an automation (newest first). Tenant-scoped."""
    automation = await automation_repo.get_by_id_and_tenant(automation_id, tenant_id)
    if not automation:
        raise ResourceNotFoundException("automation", automation_id)
    executions = await execution_repo.get_by_automation(
        automation_id=automation_id,
        tenant_id=tenant_id,
        skip=skip,
        limit=limit,
        status=status,
    )
    return [ExecutionResponse.model_validate(e) for e in executions]
