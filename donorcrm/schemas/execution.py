"""Automation execution API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ExecutionResponse(BaseModel):
    """Automation execution response (operator-facing history)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    automation_id: str
    donor_id: str | None
    status: str
    current_step_index: int
    resume_at: datetime | None
    context_data: dict[str, Any]
    error: str | None
    started_at: datetime | None
    completed_at: datetime | None
    actions_executed: int
    actions_failed: int
    execution_log: list[dict[str, Any]]
