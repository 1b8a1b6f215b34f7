"""Execution API: read-only view of automation runs."""

from typing import Annotated

from fastapi import APIRouter, Depends

from donorcrm.api.v1.dependencies import get_execution_repo, get_tenant_id
from donorcrm.domain.exceptions import ResourceNotFoundException
from donorcrm.infrastructure.persistence.repositories import ExecutionRepository
from donorcrm.schemas.execution import ExecutionResponse

router = APIRouter()


@router.get("/{execution_id}", response_model=ExecutionResponse)
async def get_execution(
    execution_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    execution_repo: ExecutionRepository = Depends(get_execution_repo),
):
    """Get automation execution by id. Tenant-scoped."""
    execution = await execution_repo.get_by_id_and_tenant(execution_id, tenant_id)
    if not execution:
        raise ResourceNotFoundException("automation_execution", execution_id)
    return ExecutionResponse.model_validate(execution)
