"""Automation engine: entry point for trigger emitters and the periodic sweep.

fire() returns as soon as executions are created and their runs launched;
the emitter never waits for a workflow to finish. Runs are independent: two
triggers for the same donor produce two executions.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from donorcrm.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from donorcrm.application.dtos.execution import SweepResult
    from donorcrm.application.interfaces.repositories import IExecutionStore
    from donorcrm.application.services.run_executor import RunExecutor
    from donorcrm.application.services.sweep_scheduler import SweepScheduler
    from donorcrm.application.services.task_supervisor import TaskSupervisor
    from donorcrm.application.services.trigger_matcher import TriggerMatcher
    from donorcrm.domain.entities import AutomationExecution
    from donorcrm.domain.enums import TriggerKind
    from donorcrm.domain.value_objects import TriggerContext

logger = get_logger(__name__)


class AutomationEngine:
    """Facade wiring matcher, store, executor, sweep and task supervision."""

    def __init__(
        self,
        matcher: TriggerMatcher,
        store: IExecutionStore,
        executor: RunExecutor,
        sweep_scheduler: SweepScheduler,
        supervisor: TaskSupervisor,
    ) -> None:
        self._matcher = matcher
        self._store = store
        self._executor = executor
        self._sweep_scheduler = sweep_scheduler
        self._supervisor = supervisor

    async def fire(
        self, tenant_id: str, trigger: TriggerKind, context: TriggerContext
    ) -> list[AutomationExecution]:
        """Start one execution per matching automation; return them once launched."""
        definitions = await self._matcher.match(tenant_id, trigger, context)
        executions: list[AutomationExecution] = []
        for definition in definitions:
            execution = await self._store.create(
                tenant_id=tenant_id,
                automation_id=definition.id,
                donor_id=context.donor_id,
                context_data=context.to_context_data(trigger),
            )
            self._supervisor.spawn(
                self._executor.run(execution, definition),
                name=f"automation:{definition.id}:{execution.id}",
            )
            executions.append(execution)
        if executions:
            logger.info(
                "Trigger %s started %d execution(s) (tenant_id=%s, donor_id=%s)",
                trigger.value,
                len(executions),
                tenant_id,
                context.donor_id,
            )
        return executions

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        """Resume due suspended executions."""
        return await self._sweep_scheduler.sweep(now)

    async def drain(self, timeout: float | None = None) -> bool:
        """Wait for launched runs to finish (shutdown, tests)."""
        return await self._supervisor.drain(timeout)

    @property
    def in_flight(self) -> int:
        return len(self._supervisor)
