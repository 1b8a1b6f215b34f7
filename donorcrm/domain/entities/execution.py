"""Automation execution entity (read model of the execution state store)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from donorcrm.domain.enums import ExecutionStatus

NEXT_STEP_KEY = "next_step"
RESUME_AT_KEY = "resume_at"


@dataclass
class AutomationExecution:
    """One run of one automation against one (optional) donor."""

    id: str
    tenant_id: str
    automation_id: str
    donor_id: str | None
    status: ExecutionStatus
    current_step_index: int = 0
    resume_at: datetime | None = None
    context_data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    actions_executed: int = 0
    actions_failed: int = 0
    execution_log: list[dict[str, Any]] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def next_step(self) -> int:
        """Step order to resume from; falls back to the cursor when not suspended."""
        value = self.context_data.get(NEXT_STEP_KEY)
        if isinstance(value, int) and value >= 0:
            return value
        return self.current_step_index

    def is_due(self, now: datetime) -> bool:
        """Waiting and resume_at has elapsed."""
        return (
            self.status == ExecutionStatus.WAITING
            and self.resume_at is not None
            and self.resume_at <= now
        )
