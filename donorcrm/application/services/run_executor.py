"""Run executor: drive one automation execution through its steps.

Delay policy per step (delay applied before the step runs):
- 0 minutes: run immediately.
- up to short_delay_minutes: await in process, then run.
- longer: persist status=waiting with resume_at and next_step, and return
  without running the step. The sweep resumes it later.

Progress is persisted after every step. An unexpected exception halts the
run and is stored on the execution (status=failed, error) before the run
returns; nothing already sent is rolled back and nothing is retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from donorcrm.application.dtos.execution import RunContext
from donorcrm.domain.entities.execution import NEXT_STEP_KEY, RESUME_AT_KEY
from donorcrm.domain.enums import ExecutionStatus
from donorcrm.shared.enums import StepOutcome
from donorcrm.shared.telemetry.logging import get_logger
from donorcrm.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from donorcrm.application.interfaces.repositories import IExecutionStore
    from donorcrm.application.services.action_dispatcher import ActionDispatcher
    from donorcrm.domain.entities import (
        AutomationDefinition,
        AutomationExecution,
        AutomationStep,
    )

logger = get_logger(__name__)

SHORT_DELAY_THRESHOLD_MINUTES = 5


class RunExecutor:
    """Executes an automation's steps for one execution, start or resume."""

    def __init__(
        self,
        store: IExecutionStore,
        dispatcher: ActionDispatcher,
        *,
        short_delay_minutes: int = SHORT_DELAY_THRESHOLD_MINUTES,
        resume_honors_step_delays: bool = True,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._short_delay_minutes = short_delay_minutes
        self._resume_honors_step_delays = resume_honors_step_delays
        self._clock = clock
        self._sleep = sleep

    async def run(
        self, execution: AutomationExecution, definition: AutomationDefinition
    ) -> ExecutionStatus:
        """Start (or continue) execution from its current step cursor."""
        return await self._drive(
            execution,
            definition,
            start=execution.current_step_index,
            first_delay_served=False,
            apply_delays=True,
        )

    async def resume(
        self, execution: AutomationExecution, definition: AutomationDefinition
    ) -> ExecutionStatus:
        """Continue a claimed execution from context_data.next_step.

        The delay that suspended the run has already elapsed. Later steps get
        their own delay when resume_honors_step_delays is set; otherwise they
        run back to back.
        """
        return await self._drive(
            execution,
            definition,
            start=execution.next_step,
            first_delay_served=True,
            apply_delays=self._resume_honors_step_delays,
        )

    async def _drive(
        self,
        execution: AutomationExecution,
        definition: AutomationDefinition,
        *,
        start: int,
        first_delay_served: bool,
        apply_delays: bool,
    ) -> ExecutionStatus:
        run = RunContext(
            tenant_id=execution.tenant_id,
            automation_id=definition.id,
            execution_id=execution.id,
            donor_id=execution.donor_id,
            metadata=dict(execution.context_data),
        )
        try:
            for position, step in enumerate(definition.steps[start:]):
                await self._store.set_current_step(execution.id, step.order)

                delay_served = first_delay_served and position == 0
                if apply_delays and not delay_served and step.delay_minutes > 0:
                    if step.delay_minutes > self._short_delay_minutes:
                        await self._suspend(execution, step)
                        return ExecutionStatus.WAITING
                    await self._sleep(step.delay_minutes * 60)

                result = await self._dispatcher.apply(step, run)
                await self._store.record_step(
                    execution.id,
                    result.to_log_entry(step.order, step.action.value),
                    failed=result.outcome == StepOutcome.FAILED,
                )
                if not result.ok:
                    logger.warning(
                        "Automation %s step %s (%s) failed without halting: %s (execution_id=%s)",
                        definition.id,
                        step.order,
                        step.action.value,
                        result.reason,
                        execution.id,
                    )
        except Exception as e:
            logger.exception(
                "Automation %s execution failed (tenant_id=%s, execution_id=%s)",
                definition.id,
                execution.tenant_id,
                execution.id,
            )
            await self._store.fail(execution.id, str(e) or type(e).__name__, self._clock())
            return ExecutionStatus.FAILED

        await self._store.complete(execution.id, self._clock())
        return ExecutionStatus.COMPLETED

    async def _suspend(self, execution: AutomationExecution, step: AutomationStep) -> None:
        resume_at = self._clock() + timedelta(minutes=step.delay_minutes)
        context_data = {
            **execution.context_data,
            NEXT_STEP_KEY: step.order,
            RESUME_AT_KEY: resume_at.isoformat(),
        }
        await self._store.suspend(execution.id, resume_at, context_data)
        logger.info(
            "Execution %s waiting %d min before step %s (resume_at=%s)",
            execution.id,
            step.delay_minutes,
            step.order,
            resume_at.isoformat(),
        )
