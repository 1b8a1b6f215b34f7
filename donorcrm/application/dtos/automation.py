"""DTOs for creating and updating automation definitions."""

from dataclasses import dataclass, field
from typing import Any

from donorcrm.domain.enums import ActionKind, TriggerKind


@dataclass(frozen=True)
class StepCreate:
    """Input for one step (write-model)."""

    order: int
    action: ActionKind
    config: dict[str, Any] = field(default_factory=dict)
    delay_minutes: int = 0


@dataclass(frozen=True)
class AutomationCreate:
    """Input for creating an automation. Repo persists and returns the ORM row."""

    name: str
    trigger: TriggerKind
    steps: list[StepCreate]
    description: str | None = None
    trigger_config: dict[str, Any] | None = None
    is_active: bool = False
