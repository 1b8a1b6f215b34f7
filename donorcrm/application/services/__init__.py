"""Automation use cases: trigger matching, dispatch, execution, sweep."""

from donorcrm.application.services.action_dispatcher import ActionDispatcher
from donorcrm.application.services.automation_engine import AutomationEngine
from donorcrm.application.services.run_executor import RunExecutor
from donorcrm.application.services.sweep_scheduler import SweepScheduler
from donorcrm.application.services.task_supervisor import TaskSupervisor
from donorcrm.application.services.trigger_matcher import TriggerMatcher

__all__ = [
    "ActionDispatcher",
    "AutomationEngine",
    "RunExecutor",
    "SweepScheduler",
    "TaskSupervisor",
    "TriggerMatcher",
]
