"""In-memory stores, recording providers and a fake clock for engine tests.

The execution store applies the same conditional-update rules as the SQL
store: claims only win from waiting, terminal rows never move, and the
step cursor never goes backwards.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from donorcrm.application.dtos.channel import (
    AuditEntry,
    EmailMessage,
    SendResult,
    SmsMessage,
)
from donorcrm.application.dtos.execution import SweepResult
from donorcrm.application.services import (
    ActionDispatcher,
    AutomationEngine,
    RunExecutor,
    SweepScheduler,
    TaskSupervisor,
    TriggerMatcher,
)
from donorcrm.domain.entities import (
    AutomationDefinition,
    AutomationExecution,
    AutomationStep,
    DonorContact,
    TenantProfile,
)
from donorcrm.domain.enums import ActionKind, ExecutionStatus, TriggerKind

START = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    async def sleep(self, seconds: float) -> None:
        """Stand-in for asyncio.sleep: records the wait and advances time."""
        self.sleeps.append(seconds)
        self.now = self.now + timedelta(seconds=seconds)
        await asyncio.sleep(0)


class InMemoryExecutionStore:
    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self._rows: dict[str, AutomationExecution] = {}
        self._seq = 0

    def __getitem__(self, execution_id: str) -> AutomationExecution:
        return self._rows[execution_id]

    def all(self) -> list[AutomationExecution]:
        return list(self._rows.values())

    def put(self, execution: AutomationExecution) -> AutomationExecution:
        self._rows[execution.id] = execution
        return execution

    async def create(
        self,
        tenant_id: str,
        automation_id: str,
        donor_id: str | None,
        context_data: dict[str, Any],
    ) -> AutomationExecution:
        self._seq += 1
        execution = AutomationExecution(
            id=f"exec-{self._seq}",
            tenant_id=tenant_id,
            automation_id=automation_id,
            donor_id=donor_id,
            status=ExecutionStatus.RUNNING,
            context_data=dict(context_data),
            started_at=self._clock(),
        )
        self._rows[execution.id] = execution
        return copy.deepcopy(execution)

    async def get(self, execution_id: str) -> AutomationExecution | None:
        row = self._rows.get(execution_id)
        return copy.deepcopy(row) if row else None

    def _live(self, execution_id: str) -> AutomationExecution | None:
        row = self._rows.get(execution_id)
        if row is None or row.is_terminal:
            return None
        return row

    async def set_current_step(self, execution_id: str, step_index: int) -> None:
        row = self._live(execution_id)
        if row is not None and row.current_step_index <= step_index:
            row.current_step_index = step_index

    async def record_step(
        self, execution_id: str, entry: dict[str, Any], *, failed: bool
    ) -> None:
        row = self._live(execution_id)
        if row is None:
            return
        row.execution_log.append(dict(entry))
        row.actions_executed += 1
        if failed:
            row.actions_failed += 1

    async def suspend(
        self, execution_id: str, resume_at: datetime, context_data: dict[str, Any]
    ) -> None:
        row = self._rows.get(execution_id)
        if row is None or row.status != ExecutionStatus.RUNNING:
            return
        row.status = ExecutionStatus.WAITING
        row.resume_at = resume_at
        row.context_data = dict(context_data)

    async def complete(self, execution_id: str, completed_at: datetime) -> None:
        row = self._live(execution_id)
        if row is not None:
            row.status = ExecutionStatus.COMPLETED
            row.completed_at = completed_at
            row.resume_at = None

    async def fail(self, execution_id: str, error: str, completed_at: datetime) -> None:
        row = self._live(execution_id)
        if row is not None:
            row.status = ExecutionStatus.FAILED
            row.error = error
            row.completed_at = completed_at
            row.resume_at = None

    async def list_due(self, now: datetime, limit: int) -> list[AutomationExecution]:
        due = [r for r in self._rows.values() if r.is_due(now)]
        due.sort(key=lambda r: r.resume_at)
        return [copy.deepcopy(r) for r in due[:limit]]

    async def claim(self, execution_id: str) -> bool:
        row = self._rows.get(execution_id)
        if row is None or row.status != ExecutionStatus.WAITING:
            return False
        row.status = ExecutionStatus.RUNNING
        return True


class InMemoryAutomationDirectory:
    def __init__(self) -> None:
        self.definitions: dict[str, AutomationDefinition] = {}
        self.deleted: set[str] = set()

    def add(self, definition: AutomationDefinition) -> AutomationDefinition:
        self.definitions[definition.id] = definition
        return definition

    async def list_active_by_trigger(
        self, tenant_id: str, trigger: TriggerKind
    ) -> list[AutomationDefinition]:
        return [
            d
            for d in self.definitions.values()
            if d.tenant_id == tenant_id
            and d.trigger == trigger
            and d.is_active
            and d.id not in self.deleted
        ]

    async def get_definition(self, automation_id: str) -> AutomationDefinition | None:
        if automation_id in self.deleted:
            return None
        return self.definitions.get(automation_id)


class FakeDonorDirectory:
    def __init__(self) -> None:
        self.donors: dict[tuple[str, str], DonorContact] = {}

    def add(self, donor: DonorContact) -> DonorContact:
        self.donors[(donor.tenant_id, donor.id)] = donor
        return donor

    async def get_contact(self, tenant_id: str, donor_id: str) -> DonorContact | None:
        return self.donors.get((tenant_id, donor_id))


class FakeTenantDirectory:
    def __init__(self) -> None:
        self.tenants: dict[str, TenantProfile] = {}

    def add(self, tenant: TenantProfile) -> TenantProfile:
        self.tenants[tenant.id] = tenant
        return tenant

    async def get_profile(self, tenant_id: str) -> TenantProfile | None:
        return self.tenants.get(tenant_id)


class InMemoryTagStore:
    def __init__(self) -> None:
        self.tags: dict[tuple[str, str], str] = {}
        self.assignments: set[tuple[str, str, str]] = set()

    def add_tag(self, tenant_id: str, name: str, tag_id: str) -> str:
        self.tags[(tenant_id, name)] = tag_id
        return tag_id

    async def assign(self, tenant_id: str, donor_id: str, tag_id: str) -> bool:
        key = (tenant_id, donor_id, tag_id)
        if key in self.assignments:
            return False
        self.assignments.add(key)
        return True

    async def unassign(self, tenant_id: str, donor_id: str, tag_id: str) -> bool:
        key = (tenant_id, donor_id, tag_id)
        if key not in self.assignments:
            return False
        self.assignments.discard(key)
        return True

    async def resolve_tag(
        self, tenant_id: str, name: str, *, create: bool = False
    ) -> str | None:
        tag_id = self.tags.get((tenant_id, name))
        if tag_id is None and create:
            tag_id = self.add_tag(tenant_id, name, f"tag-{name}")
        return tag_id


class FakeAdminDirectory:
    def __init__(self, emails: dict[str, list[str]] | None = None) -> None:
        self.emails = emails or {}

    async def list_admin_emails(self, tenant_id: str) -> list[str]:
        return list(self.emails.get(tenant_id, []))


class RecordingAuditLog:
    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

    async def record(self, entry: AuditEntry) -> None:
        self.entries.append(entry)


class RecordingEmailProvider:
    """Records messages; rejects addresses in reject and raises for those in explode."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.reject: set[str] = set()
        self.explode: set[str] = set()

    async def send(self, message: EmailMessage) -> SendResult:
        if message.to in self.explode:
            raise ConnectionError(f"connection reset sending to {message.to}")
        if message.to in self.reject:
            return SendResult(success=False, error="rejected")
        self.sent.append(message)
        return SendResult(success=True, message_id=f"email-{len(self.sent)}")


class RecordingSmsProvider:
    def __init__(self) -> None:
        self.sent: list[SmsMessage] = []
        self.fail_with: str | None = None

    async def send(self, message: SmsMessage) -> SendResult:
        if self.fail_with:
            return SendResult(success=False, error=self.fail_with)
        self.sent.append(message)
        return SendResult(success=True, message_id=f"sms-{len(self.sent)}")


def make_definition(
    steps: list[tuple[ActionKind, int] | tuple[ActionKind, int, dict[str, Any]]],
    *,
    automation_id: str = "auto-1",
    tenant_id: str = "tenant-a",
    trigger: TriggerKind = TriggerKind.NEW_DONATION,
    trigger_config: dict[str, Any] | None = None,
    is_active: bool = True,
) -> AutomationDefinition:
    """Definition whose steps are (action, delay_minutes[, config]) in order."""
    built = [
        AutomationStep(
            order=i,
            action=entry[0],
            delay_minutes=entry[1],
            config=entry[2] if len(entry) > 2 else {},
        )
        for i, entry in enumerate(steps)
    ]
    return AutomationDefinition(
        id=automation_id,
        tenant_id=tenant_id,
        name=f"Automation {automation_id}",
        trigger=trigger,
        trigger_config=trigger_config,
        is_active=is_active,
        steps=built,
    )


class EngineHarness:
    """AutomationEngine wired to the fakes above."""

    def __init__(
        self,
        clock: FakeClock,
        *,
        resume_honors_step_delays: bool = True,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self.clock = clock
        self.store = InMemoryExecutionStore(clock)
        self.automations = InMemoryAutomationDirectory()
        self.donors = FakeDonorDirectory()
        self.tenants = FakeTenantDirectory()
        self.tags = InMemoryTagStore()
        self.admins = FakeAdminDirectory()
        self.audit = RecordingAuditLog()
        self.email = RecordingEmailProvider()
        self.sms = RecordingSmsProvider()
        self.tenants.add(
            TenantProfile(
                id="tenant-a",
                slug="hope-ngo",
                name="Hope NGO",
                sender_email="hello@hope.example",
                sender_name="Hope Team",
                sms_sender_id="HOPE",
            )
        )
        self.dispatcher = ActionDispatcher(
            email_provider=self.email,
            sms_provider=self.sms,
            tag_store=self.tags,
            admin_directory=self.admins,
            audit_log=self.audit,
            donors=self.donors,
            tenants=self.tenants,
            app_url="https://crm.example",
        )
        self.executor = RunExecutor(
            self.store,
            self.dispatcher,
            resume_honors_step_delays=resume_honors_step_delays,
            clock=clock,
            sleep=sleep or clock.sleep,
        )
        self.matcher = TriggerMatcher(self.automations)
        self.supervisor = TaskSupervisor()
        self.sweeper = SweepScheduler(
            self.store, self.automations, self.executor, self.supervisor, clock=clock
        )
        self.engine = AutomationEngine(
            matcher=self.matcher,
            store=self.store,
            executor=self.executor,
            sweep_scheduler=self.sweeper,
            supervisor=self.supervisor,
        )

    def add_donor(
        self,
        donor_id: str = "donor-1",
        *,
        email: str | None = "ana@example.org",
        phone: str | None = "0721 000 000",
        email_consent: bool = True,
        sms_consent: bool = True,
        tenant_id: str = "tenant-a",
    ) -> DonorContact:
        return self.donors.add(
            DonorContact(
                id=donor_id,
                tenant_id=tenant_id,
                email=email,
                phone=phone,
                email_consent=email_consent,
                sms_consent=sms_consent,
            )
        )

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        """Sweep, then wait for the resumed runs the sweep launched."""
        result = await self.sweeper.sweep(now)
        await self.supervisor.drain(timeout=5)
        return result

    async def start(
        self, definition: AutomationDefinition, donor_id: str | None = "donor-1"
    ) -> AutomationExecution:
        """Create an execution for definition and run it to its first stop."""
        execution = await self.store.create(
            tenant_id=definition.tenant_id,
            automation_id=definition.id,
            donor_id=donor_id,
            context_data={"trigger": definition.trigger.value},
        )
        await self.executor.run(execution, definition)
        return self.store[execution.id]
