"""DTOs produced while running automations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from donorcrm.shared.enums import StepOutcome


@dataclass(frozen=True)
class RunContext:
    """What an action needs to know about the run it belongs to."""

    tenant_id: str
    automation_id: str
    execution_id: str
    donor_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionResult:
    """Uniform result of one dispatched action.

    skipped covers expected unavailability (no address, no consent, no
    recipients); failed is a provider rejection. Neither halts the run.
    """

    outcome: StepOutcome
    reason: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome != StepOutcome.FAILED

    @classmethod
    def success(cls, **details: Any) -> ActionResult:
        return cls(StepOutcome.SUCCESS, details=details)

    @classmethod
    def skipped(cls, reason: str, **details: Any) -> ActionResult:
        return cls(StepOutcome.SKIPPED, reason=reason, details=details)

    @classmethod
    def failed(cls, reason: str, **details: Any) -> ActionResult:
        return cls(StepOutcome.FAILED, reason=reason, details=details)

    def to_log_entry(self, order: int, action: str) -> dict[str, Any]:
        """Entry appended to the execution's execution_log."""
        entry: dict[str, Any] = {"step": order, "action": action, "status": self.outcome.value}
        if self.reason:
            entry["reason"] = self.reason
        if self.details:
            entry.update(self.details)
        return entry


@dataclass
class SweepResult:
    """Summary of one sweep: ids resumed, lost to a concurrent claim, or failed."""

    resumed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def due(self) -> int:
        return len(self.resumed) + len(self.skipped) + len(self.failed)
