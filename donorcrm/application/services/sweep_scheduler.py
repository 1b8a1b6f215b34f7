"""Sweep scheduler: resume durably suspended executions whose delay elapsed.

Invoked periodically from outside (cron endpoint or scripts/run_automation_sweep).
Each due execution is claimed with a conditional waiting -> running update
before it is resumed, so overlapping sweeps never resume the same run twice.
Claimed runs are launched on the task supervisor; one run's in-process delay
never holds up another, and the sweep returns once every run is launched.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from donorcrm.application.dtos.execution import SweepResult
from donorcrm.shared.telemetry.logging import get_logger
from donorcrm.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from donorcrm.application.interfaces.repositories import (
        IAutomationDirectory,
        IExecutionStore,
    )
    from donorcrm.application.services.run_executor import RunExecutor
    from donorcrm.application.services.task_supervisor import TaskSupervisor
    from donorcrm.domain.entities import AutomationDefinition, AutomationExecution

logger = get_logger(__name__)

# Batch size for listing due executions per sweep
SWEEP_BATCH_SIZE = 500


class SweepScheduler:
    """Loads due waiting executions, claims each, and hands it to the executor."""

    def __init__(
        self,
        store: IExecutionStore,
        automations: IAutomationDirectory,
        executor: RunExecutor,
        supervisor: TaskSupervisor,
        *,
        batch_size: int = SWEEP_BATCH_SIZE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._automations = automations
        self._executor = executor
        self._supervisor = supervisor
        self._batch_size = batch_size
        self._clock = clock

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        """Launch a resume for every execution with status=waiting and resume_at <= now.

        resumed lists runs handed to the supervisor; their outcome is recorded
        on the execution itself. failed lists runs failed before launch.
        """
        now = now or self._clock()
        result = SweepResult()
        due = await self._store.list_due(now, self._batch_size)
        for execution in due:
            if not execution.is_due(now):
                continue
            if not await self._store.claim(execution.id):
                logger.info("Execution %s already claimed by another sweep", execution.id)
                result.skipped.append(execution.id)
                continue
            try:
                definition = await self._automations.get_definition(execution.automation_id)
                if definition is None:
                    await self._store.fail(
                        execution.id,
                        f"Automation not found: {execution.automation_id}",
                        self._clock(),
                    )
                    result.failed.append(execution.id)
                    continue
                self._supervisor.spawn(
                    self._resume(execution, definition),
                    name=f"automation:{definition.id}:{execution.id}:resume",
                )
            except Exception as e:
                logger.exception(
                    "Sweep could not resume execution %s (automation_id=%s)",
                    execution.id,
                    execution.automation_id,
                )
                await self._fail_claimed(execution, e)
                result.failed.append(execution.id)
                continue
            result.resumed.append(execution.id)
        if result.due:
            logger.info(
                "Automation sweep at %s: resumed=%d skipped=%d failed=%d",
                now.isoformat(),
                len(result.resumed),
                len(result.skipped),
                len(result.failed),
            )
        return result

    async def _resume(
        self, execution: AutomationExecution, definition: AutomationDefinition
    ) -> None:
        try:
            await self._executor.resume(execution, definition)
        except Exception as e:
            logger.exception(
                "Resumed execution %s escaped the executor (automation_id=%s)",
                execution.id,
                definition.id,
            )
            await self._fail_claimed(execution, e)

    async def _fail_claimed(self, execution: AutomationExecution, error: Exception) -> None:
        """Mark a claimed execution failed; a store error here is logged, not raised."""
        try:
            await self._store.fail(execution.id, str(error) or type(error).__name__, self._clock())
        except Exception:
            logger.exception(
                "Could not mark execution %s failed; it stays running", execution.id
            )
