"""Automation execution repository: the durable execution state store.

Every mutation is a single-row UPDATE keyed by id. The WHERE clauses carry
the state machine: terminal rows never transition again, the step cursor
never moves backwards, and a waiting row is claimed by exactly one caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.domain.entities import AutomationExecution as ExecutionEntity
from donorcrm.domain.enums import ExecutionStatus
from donorcrm.infrastructure.persistence.models.automation import AutomationExecution
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository
from donorcrm.shared.utils.datetime import utc_now

_NON_TERMINAL = AutomationExecution.status.not_in(ExecutionStatus.terminal_values())


def execution_to_entity(row: AutomationExecution) -> ExecutionEntity:
    """Map ORM AutomationExecution to the domain entity."""
    return ExecutionEntity(
        id=row.id,
        tenant_id=row.tenant_id,
        automation_id=row.automation_id,
        donor_id=row.donor_id,
        status=ExecutionStatus(row.status),
        current_step_index=row.current_step_index,
        resume_at=row.resume_at,
        context_data=dict(row.context_data or {}),
        error=row.error,
        started_at=row.started_at,
        completed_at=row.completed_at,
        actions_executed=row.actions_executed,
        actions_failed=row.actions_failed,
        execution_log=list(row.execution_log or []),
    )


class ExecutionRepository(BaseRepository[AutomationExecution]):
    """Execution state store over one session (caller owns the transaction)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AutomationExecution)

    async def create_execution(
        self,
        tenant_id: str,
        automation_id: str,
        donor_id: str | None,
        context_data: dict[str, Any],
    ) -> AutomationExecution:
        """Create a running execution at step 0."""
        execution = AutomationExecution(
            tenant_id=tenant_id,
            automation_id=automation_id,
            donor_id=donor_id,
            status=ExecutionStatus.RUNNING.value,
            current_step_index=0,
            context_data=context_data,
            execution_log=[],
            started_at=utc_now(),
        )
        return await self.create(execution)

    async def get_by_id_and_tenant(
        self, execution_id: str, tenant_id: str
    ) -> AutomationExecution | None:
        result = await self.db.execute(
            select(AutomationExecution).where(
                AutomationExecution.id == execution_id,
                AutomationExecution.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_by_automation(
        self,
        automation_id: str,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        status: ExecutionStatus | None = None,
    ) -> list[AutomationExecution]:
        """Execution history for one automation (newest first)."""
        q = select(AutomationExecution).where(
            AutomationExecution.automation_id == automation_id,
            AutomationExecution.tenant_id == tenant_id,
        )
        if status is not None:
            q = q.where(AutomationExecution.status == status.value)
        q = q.order_by(AutomationExecution.started_at.desc()).offset(skip).limit(limit)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def set_current_step(self, execution_id: str, step_index: int) -> bool:
        """Advance the cursor. No-op when it would go backwards or the row is terminal."""
        result = await self.db.execute(
            update(AutomationExecution)
            .where(
                AutomationExecution.id == execution_id,
                AutomationExecution.current_step_index <= step_index,
                _NON_TERMINAL,
            )
            .values(current_step_index=step_index)
        )
        return result.rowcount == 1

    async def record_step(
        self, execution_id: str, entry: dict[str, Any], *, failed: bool
    ) -> None:
        """Append a step outcome to execution_log and bump the counters."""
        row = await self.get_by_id(execution_id)
        if row is None:
            return
        values: dict[str, Any] = {
            "execution_log": [*(row.execution_log or []), entry],
            "actions_executed": AutomationExecution.actions_executed + 1,
        }
        if failed:
            values["actions_failed"] = AutomationExecution.actions_failed + 1
        await self.db.execute(
            update(AutomationExecution)
            .where(AutomationExecution.id == execution_id, _NON_TERMINAL)
            .values(**values)
        )

    async def suspend(
        self, execution_id: str, resume_at: datetime, context_data: dict[str, Any]
    ) -> bool:
        """running -> waiting with resume_at and the resume bookkeeping."""
        result = await self.db.execute(
            update(AutomationExecution)
            .where(
                AutomationExecution.id == execution_id,
                AutomationExecution.status == ExecutionStatus.RUNNING.value,
            )
            .values(
                status=ExecutionStatus.WAITING.value,
                resume_at=resume_at,
                context_data=context_data,
            )
        )
        return result.rowcount == 1

    async def complete(self, execution_id: str, completed_at: datetime) -> bool:
        result = await self.db.execute(
            update(AutomationExecution)
            .where(AutomationExecution.id == execution_id, _NON_TERMINAL)
            .values(
                status=ExecutionStatus.COMPLETED.value,
                completed_at=completed_at,
                resume_at=None,
            )
        )
        return result.rowcount == 1

    async def fail(self, execution_id: str, error: str, completed_at: datetime) -> bool:
        result = await self.db.execute(
            update(AutomationExecution)
            .where(AutomationExecution.id == execution_id, _NON_TERMINAL)
            .values(
                status=ExecutionStatus.FAILED.value,
                error=error,
                completed_at=completed_at,
                resume_at=None,
            )
        )
        return result.rowcount == 1

    async def list_due(self, now: datetime, limit: int) -> list[AutomationExecution]:
        """Waiting executions whose resume_at has elapsed (oldest first)."""
        result = await self.db.execute(
            select(AutomationExecution)
            .where(
                AutomationExecution.status == ExecutionStatus.WAITING.value,
                AutomationExecution.resume_at <= now,
            )
            .order_by(AutomationExecution.resume_at.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def claim(self, execution_id: str) -> bool:
        """Atomic waiting -> running. Only one concurrent caller sees True."""
        result = await self.db.execute(
            update(AutomationExecution)
            .where(
                AutomationExecution.id == execution_id,
                AutomationExecution.status == ExecutionStatus.WAITING.value,
            )
            .values(status=ExecutionStatus.RUNNING.value)
        )
        return result.rowcount == 1

