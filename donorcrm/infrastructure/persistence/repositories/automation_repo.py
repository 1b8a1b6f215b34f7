"""Automation repository: definitions with their ordered steps.

Create/update/toggle append audit entries when an AuditLogRepository is
injected (write dependencies); read dependencies pass none.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.application.dtos.automation import AutomationCreate, StepCreate
from donorcrm.application.dtos.channel import AuditEntry
from donorcrm.domain.entities import AutomationDefinition, AutomationStep as StepEntity
from donorcrm.domain.entities import validate_step_order
from donorcrm.domain.enums import ActionKind, TriggerKind
from donorcrm.domain.exceptions import AutomationActivationException
from donorcrm.infrastructure.persistence.models.automation import (
    Automation,
    AutomationStep,
)
from donorcrm.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository
from donorcrm.shared.utils.datetime import utc_now

AUTOMATION_ENTITY_TYPE = "Automation"


def automation_to_definition(row: Automation) -> AutomationDefinition:
    """Map ORM Automation (steps loaded) to the domain entity."""
    return AutomationDefinition(
        id=row.id,
        tenant_id=row.tenant_id,
        name=row.name,
        description=row.description,
        trigger=TriggerKind(row.trigger),
        trigger_config=row.trigger_config,
        is_active=row.is_active,
        steps=[
            StepEntity(
                order=s.step_order,
                action=ActionKind(s.action),
                config=dict(s.config or {}),
                delay_minutes=s.delay_minutes,
            )
            for s in row.steps
        ],
    )


def _build_steps(steps: list[StepCreate]) -> list[AutomationStep]:
    """Validate order/delays through the domain entity and build ORM rows."""
    validated = validate_step_order(
        StepEntity(
            order=s.order,
            action=s.action,
            config=dict(s.config),
            delay_minutes=s.delay_minutes,
        )
        for s in steps
    )
    return [
        AutomationStep(
            step_order=s.order,
            action=s.action.value,
            config=s.config,
            delay_minutes=s.delay_minutes,
        )
        for s in validated
    ]


class AutomationRepository(BaseRepository[Automation]):
    """Automation repository. Soft delete via deleted_at; never hard-deletes."""

    def __init__(
        self, db: AsyncSession, audit_log: AuditLogRepository | None = None
    ) -> None:
        super().__init__(db, Automation)
        self._audit_log = audit_log

    def _serialize_for_audit(self, obj: Automation) -> dict[str, Any]:
        return {
            "name": obj.name,
            "trigger": obj.trigger,
            "is_active": obj.is_active,
            "step_count": len(obj.steps),
        }

    async def _audit(self, obj: Automation, action: str) -> None:
        if self._audit_log is None:
            return
        await self._audit_log.create(
            AuditEntry(
                tenant_id=obj.tenant_id,
                action=action,
                entity_type=AUTOMATION_ENTITY_TYPE,
                entity_id=obj.id,
                details=self._serialize_for_audit(obj),
            )
        )

    async def _on_after_create(self, obj: Automation) -> None:
        await self._audit(obj, "AUTOMATION_CREATED")

    async def _on_after_update(self, obj: Automation) -> None:
        await self._audit(obj, "AUTOMATION_UPDATED")

    async def get_by_id_and_tenant(
        self, automation_id: str, tenant_id: str
    ) -> Automation | None:
        result = await self.db.execute(
            select(Automation).where(
                Automation.id == automation_id,
                Automation.tenant_id == tenant_id,
                Automation.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_by_tenant(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        include_inactive: bool = True,
        trigger: TriggerKind | None = None,
    ) -> list[Automation]:
        q = select(Automation).where(
            Automation.tenant_id == tenant_id,
            Automation.deleted_at.is_(None),
        )
        if not include_inactive:
            q = q.where(Automation.is_active.is_(True))
        if trigger is not None:
            q = q.where(Automation.trigger == trigger.value)
        q = q.order_by(Automation.created_at.desc()).offset(skip).limit(limit)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def get_by_trigger(self, tenant_id: str, trigger: TriggerKind) -> list[Automation]:
        """Active, non-deleted automations of tenant listening to trigger (oldest first)."""
        result = await self.db.execute(
            select(Automation)
            .where(
                Automation.tenant_id == tenant_id,
                Automation.trigger == trigger.value,
                Automation.is_active.is_(True),
                Automation.deleted_at.is_(None),
            )
            .order_by(Automation.created_at.asc())
        )
        return list(result.scalars().all())

    async def create_automation(
        self, tenant_id: str, data: AutomationCreate, created_by: str | None = None
    ) -> Automation:
        """Create automation with its steps; return created entity.

        Raises:
            ValidationException: step orders not contiguous or negative delay.
            AutomationActivationException: is_active requested with no steps.
        """
        steps = _build_steps(data.steps)
        if data.is_active and not steps:
            raise AutomationActivationException("new", "automation has no steps")
        automation = Automation(
            tenant_id=tenant_id,
            name=data.name,
            description=data.description,
            trigger=data.trigger.value,
            trigger_config=data.trigger_config,
            is_active=data.is_active,
            steps=steps,
            created_by=created_by,
        )
        return await self.create(automation)

    async def replace_steps(self, automation: Automation, steps: list[StepCreate]) -> None:
        """Replace all steps (delete-orphan removes the old rows)."""
        new_steps = _build_steps(steps)
        automation.steps.clear()
        # Old rows must be gone before new ones reuse (automation_id, step_order).
        await self.db.flush()
        automation.steps.extend(new_steps)

    async def set_active(self, automation: Automation, is_active: bool) -> Automation:
        """Activate or deactivate; activation requires at least one step."""
        if is_active and not automation.steps:
            raise AutomationActivationException(automation.id, "automation has no steps")
        automation.is_active = is_active
        await self.db.flush()
        await self.db.refresh(automation)
        await self._audit(
            automation, "AUTOMATION_ACTIVATED" if is_active else "AUTOMATION_DEACTIVATED"
        )
        return automation

    async def soft_delete(self, automation_id: str, tenant_id: str) -> bool:
        """Deactivate and mark deleted; executions keep referencing the row."""
        automation = await self.get_by_id_and_tenant(automation_id, tenant_id)
        if automation is None:
            return False
        automation.is_active = False
        automation.deleted_at = utc_now()
        await self.db.flush()
        await self._audit(automation, "AUTOMATION_DELETED")
        return True
