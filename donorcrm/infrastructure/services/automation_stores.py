"""SQL implementations of the automation engine's ports.

Runs outlive the HTTP request that fired them, so every adapter holds the
session factory rather than a session and opens one short transaction per
call. Two runs never share a session, and each step's progress is
committed as soon as it is recorded.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from donorcrm.application.dtos.channel import AuditEntry
from donorcrm.domain.entities import (
    AutomationDefinition,
    AutomationExecution,
    DonorContact,
    TenantProfile,
)
from donorcrm.domain.enums import TriggerKind
from donorcrm.domain.exceptions import ResourceNotFoundException
from donorcrm.infrastructure.persistence.repositories import (
    AuditLogRepository,
    AutomationRepository,
    DonorRepository,
    ExecutionRepository,
    TagRepository,
    TenantRepository,
    UserRepository,
    automation_to_definition,
    donor_to_contact,
    execution_to_entity,
    tenant_to_profile,
)
from donorcrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class _SessionScoped:
    """Base for adapters that open a transaction per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory


class SqlAutomationDirectory(_SessionScoped):
    """IAutomationDirectory over AutomationRepository."""

    async def list_active_by_trigger(
        self, tenant_id: str, trigger: TriggerKind
    ) -> list[AutomationDefinition]:
        async with self._session_factory() as session:
            rows = await AutomationRepository(session).get_by_trigger(tenant_id, trigger)
            return [automation_to_definition(row) for row in rows]

    async def get_definition(self, automation_id: str) -> AutomationDefinition | None:
        async with self._session_factory() as session:
            row = await AutomationRepository(session).get_by_id(automation_id)
            if row is None or row.deleted_at is not None:
                return None
            return automation_to_definition(row)


class SqlExecutionStore(_SessionScoped):
    """IExecutionStore over ExecutionRepository (one transaction per update)."""

    async def create(
        self,
        tenant_id: str,
        automation_id: str,
        donor_id: str | None,
        context_data: dict[str, Any],
    ) -> AutomationExecution:
        async with self._session_factory() as session, session.begin():
            row = await ExecutionRepository(session).create_execution(
                tenant_id, automation_id, donor_id, context_data
            )
            return execution_to_entity(row)

    async def get(self, execution_id: str) -> AutomationExecution | None:
        async with self._session_factory() as session:
            row = await ExecutionRepository(session).get_by_id(execution_id)
            return execution_to_entity(row) if row is not None else None

    async def set_current_step(self, execution_id: str, step_index: int) -> None:
        async with self._session_factory() as session, session.begin():
            moved = await ExecutionRepository(session).set_current_step(
                execution_id, step_index
            )
        if not moved:
            logger.debug(
                "Step cursor of execution %s not moved to %d", execution_id, step_index
            )

    async def record_step(
        self, execution_id: str, entry: dict[str, Any], *, failed: bool
    ) -> None:
        async with self._session_factory() as session, session.begin():
            await ExecutionRepository(session).record_step(execution_id, entry, failed=failed)

    async def suspend(
        self, execution_id: str, resume_at: datetime, context_data: dict[str, Any]
    ) -> None:
        async with self._session_factory() as session, session.begin():
            suspended = await ExecutionRepository(session).suspend(
                execution_id, resume_at, context_data
            )
        if not suspended:
            logger.warning("Execution %s was not running; suspend ignored", execution_id)

    async def complete(self, execution_id: str, completed_at: datetime) -> None:
        async with self._session_factory() as session, session.begin():
            done = await ExecutionRepository(session).complete(execution_id, completed_at)
        if not done:
            logger.warning("Execution %s already terminal; complete ignored", execution_id)

    async def fail(self, execution_id: str, error: str, completed_at: datetime) -> None:
        async with self._session_factory() as session, session.begin():
            done = await ExecutionRepository(session).fail(execution_id, error, completed_at)
        if not done:
            logger.warning("Execution %s already terminal; fail ignored", execution_id)

    async def list_due(self, now: datetime, limit: int) -> list[AutomationExecution]:
        async with self._session_factory() as session:
            rows = await ExecutionRepository(session).list_due(now, limit)
            return [execution_to_entity(row) for row in rows]

    async def claim(self, execution_id: str) -> bool:
        async with self._session_factory() as session, session.begin():
            return await ExecutionRepository(session).claim(execution_id)


class SqlDonorDirectory(_SessionScoped):
    """IDonorDirectory over DonorRepository."""

    async def get_contact(self, tenant_id: str, donor_id: str) -> DonorContact | None:
        async with self._session_factory() as session:
            row = await DonorRepository(session).get_by_id_and_tenant(donor_id, tenant_id)
            return donor_to_contact(row) if row is not None else None


class SqlTenantDirectory(_SessionScoped):
    """ITenantDirectory over TenantRepository."""

    async def get_profile(self, tenant_id: str) -> TenantProfile | None:
        async with self._session_factory() as session:
            row = await TenantRepository(session).get_by_id(tenant_id)
            return tenant_to_profile(row) if row is not None else None


class SqlTagStore(_SessionScoped):
    """ITagStore over TagRepository. Assignments are idempotent inserts/deletes."""

    async def assign(self, tenant_id: str, donor_id: str, tag_id: str) -> bool:
        async with self._session_factory() as session, session.begin():
            repo = TagRepository(session)
            if await repo.get_by_id_and_tenant(tag_id, tenant_id) is None:
                raise ResourceNotFoundException("tag", tag_id)
            return await repo.assign(donor_id, tag_id)

    async def unassign(self, tenant_id: str, donor_id: str, tag_id: str) -> bool:
        async with self._session_factory() as session, session.begin():
            repo = TagRepository(session)
            if await repo.get_by_id_and_tenant(tag_id, tenant_id) is None:
                return False
            return await repo.unassign(donor_id, tag_id)

    async def resolve_tag(
        self, tenant_id: str, name: str, *, create: bool = False
    ) -> str | None:
        async with self._session_factory() as session, session.begin():
            repo = TagRepository(session)
            if create:
                return (await repo.get_or_create(tenant_id, name)).id
            tag = await repo.get_by_name(tenant_id, name)
            return tag.id if tag is not None else None


class SqlAdminDirectory(_SessionScoped):
    """IAdminDirectory over UserRepository."""

    async def list_admin_emails(self, tenant_id: str) -> list[str]:
        async with self._session_factory() as session:
            return await UserRepository(session).get_admin_emails(tenant_id)


class SqlAuditLog(_SessionScoped):
    """IAuditLog over AuditLogRepository."""

    async def record(self, entry: AuditEntry) -> None:
        async with self._session_factory() as session, session.begin():
            await AuditLogRepository(session).create(entry)
