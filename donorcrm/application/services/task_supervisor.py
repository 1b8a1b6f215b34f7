"""Supervised background tasks for automation runs.

Runs are launched without the caller awaiting them. The supervisor keeps a
reference to every task (so none is garbage collected mid-run), logs any
exception that escapes a run, and can drain in-flight runs at shutdown.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from donorcrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class TaskSupervisor:
    """Owns fire-and-forget asyncio tasks started by the automation engine."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        """Schedule coro on the running loop and track it until done."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)

        def _done(done_task: asyncio.Task[Any]) -> None:
            self._tasks.discard(done_task)
            if done_task.cancelled():
                logger.warning("Task %s was cancelled", done_task.get_name())
                return
            exc = done_task.exception()
            if exc is not None:
                logger.error("Task %s failed", done_task.get_name(), exc_info=exc)

        task.add_done_callback(_done)
        return task

    async def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight tasks. Returns False if some were still pending at timeout."""
        if not self._tasks:
            return True
        pending = set(self._tasks)
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            logger.warning(
                "%d automation task(s) still running after %.1fs drain",
                len(still_pending),
                timeout or 0.0,
            )
            return False
        return True
