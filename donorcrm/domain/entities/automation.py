"""Automation domain entities.

An automation is a definition: a trigger (kind + optional config) and an
ordered list of steps. Executions are runs of a definition for one donor.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from donorcrm.domain.enums import ActionKind, TriggerKind
from donorcrm.domain.exceptions import ValidationException
from donorcrm.domain.value_objects.action_config import ActionConfig, parse_action_config
from donorcrm.domain.value_objects.trigger_config import (
    TriggerConfig,
    TriggerContext,
    parse_trigger_config,
)


@dataclass(frozen=True)
class AutomationStep:
    """One step: action, config, and the delay applied before it runs."""

    order: int
    action: ActionKind
    config: dict[str, Any] = field(default_factory=dict)
    delay_minutes: int = 0

    def __post_init__(self) -> None:
        if self.delay_minutes < 0:
            raise ValidationException(
                f"delay_minutes must be >= 0 (step {self.order})", field="delay_minutes"
            )

    def parsed_config(self) -> ActionConfig:
        return parse_action_config(self.action, self.config)


def validate_step_order(steps: Iterable[AutomationStep]) -> list[AutomationStep]:
    """Return steps sorted by order; orders must be exactly 0..n-1.

    Raises:
        ValidationException: on a gap or duplicate order.
    """
    ordered = sorted(steps, key=lambda s: s.order)
    for expected, step in enumerate(ordered):
        if step.order != expected:
            raise ValidationException(
                f"Step orders must be contiguous from 0; expected {expected}, got {step.order}",
                field="order",
            )
    return ordered


@dataclass
class AutomationDefinition:
    """Domain entity for an automation definition (trigger + ordered steps)."""

    id: str
    tenant_id: str
    name: str
    trigger: TriggerKind
    trigger_config: dict[str, Any] | None
    is_active: bool
    steps: list[AutomationStep]
    description: str | None = None

    def __post_init__(self) -> None:
        self.steps = validate_step_order(self.steps)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def belongs_to_tenant(self, tenant_id: str) -> bool:
        """Return whether this automation belongs to the given tenant."""
        return self.tenant_id == tenant_id

    def can_trigger_on(self, trigger: TriggerKind) -> bool:
        """Return whether this automation is active and listens to trigger."""
        return self.is_active and self.trigger == trigger

    def parsed_trigger_config(self) -> TriggerConfig | None:
        return parse_trigger_config(self.trigger, self.trigger_config)

    def matches(self, trigger: TriggerKind, context: TriggerContext) -> bool:
        """Active, same trigger kind, and trigger config satisfied by context."""
        if not self.can_trigger_on(trigger):
            return False
        config = self.parsed_trigger_config()
        return config is None or config.matches(context)
