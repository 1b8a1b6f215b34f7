"""Repository interfaces (ports) for the application layer.

Protocols define contracts for data access (DIP). The SQL implementations
live in donorcrm.infrastructure.services.automation_stores; tests use
in-memory fakes.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from donorcrm.domain.entities import (
        AutomationDefinition,
        AutomationExecution,
        DonorContact,
        TenantProfile,
    )
    from donorcrm.domain.enums import TriggerKind


class IAutomationDirectory(Protocol):
    """Protocol for loading automation definitions for the engine."""

    async def list_active_by_trigger(
        self, tenant_id: str, trigger: TriggerKind
    ) -> list[AutomationDefinition]:
        """Return active, non-deleted definitions of tenant for trigger (with steps)."""

    async def get_definition(self, automation_id: str) -> AutomationDefinition | None:
        """Return a definition by id regardless of its active flag (resume path)."""


class IExecutionStore(Protocol):
    """Protocol for the durable execution state store.

    All mutations are single-row point updates keyed by execution id.
    Updates never move a terminal execution and never move the step
    cursor backwards.
    """

    async def create(
        self,
        tenant_id: str,
        automation_id: str,
        donor_id: str | None,
        context_data: dict[str, Any],
    ) -> AutomationExecution:
        """Create a running execution at step 0."""

    async def get(self, execution_id: str) -> AutomationExecution | None:
        """Return execution by id, or None."""

    async def set_current_step(self, execution_id: str, step_index: int) -> None:
        """Advance the step cursor (no-op if it would go backwards)."""

    async def record_step(
        self, execution_id: str, entry: dict[str, Any], *, failed: bool
    ) -> None:
        """Append entry to execution_log and bump actions_executed / actions_failed."""

    async def suspend(
        self, execution_id: str, resume_at: datetime, context_data: dict[str, Any]
    ) -> None:
        """Persist status=waiting with resume_at and the resume bookkeeping."""

    async def complete(self, execution_id: str, completed_at: datetime) -> None:
        """Persist status=completed (only from a non-terminal status)."""

    async def fail(self, execution_id: str, error: str, completed_at: datetime) -> None:
        """Persist status=failed with error (only from a non-terminal status)."""

    async def list_due(self, now: datetime, limit: int) -> list[AutomationExecution]:
        """Return waiting executions with resume_at <= now (oldest first)."""

    async def claim(self, execution_id: str) -> bool:
        """Atomically move waiting -> running. True only for the single winner."""


class IDonorDirectory(Protocol):
    """Protocol for reading donor contact channels and consents."""

    async def get_contact(self, tenant_id: str, donor_id: str) -> DonorContact | None:
        """Return the donor's contact view, or None if not found in tenant."""


class ITenantDirectory(Protocol):
    """Protocol for reading tenant sender profile."""

    async def get_profile(self, tenant_id: str) -> TenantProfile | None:
        """Return tenant slug/name/sender settings, or None."""
