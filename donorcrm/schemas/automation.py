"""Automation API schemas."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from donorcrm.application.dtos.automation import AutomationCreate, StepCreate
from donorcrm.domain.enums import ActionKind, TriggerKind


class StepRequest(BaseModel):
    """One automation step. delay_minutes is applied before the step runs."""

    order: int = Field(..., ge=0)
    action: ActionKind
    config: dict[str, Any] = Field(default_factory=dict)
    delay_minutes: int = Field(default=0, ge=0)

    def to_dto(self) -> StepCreate:
        return StepCreate(
            order=self.order,
            action=self.action,
            config=self.config,
            delay_minutes=self.delay_minutes,
        )


def _check_contiguous(steps: list[StepRequest]) -> None:
    orders = sorted(s.order for s in steps)
    if orders != list(range(len(orders))):
        raise ValueError("step orders must be unique and contiguous from 0")


class AutomationCreateRequest(BaseModel):
    """Request body for creating an automation."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    trigger: TriggerKind
    trigger_config: dict[str, Any] | None = None
    is_active: bool = False
    steps: list[StepRequest] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_steps(self) -> "AutomationCreateRequest":
        _check_contiguous(self.steps)
        if self.is_active and not self.steps:
            raise ValueError("an active automation needs at least one step")
        return self

    def to_dto(self) -> AutomationCreate:
        return AutomationCreate(
            name=self.name,
            description=self.description,
            trigger=self.trigger,
            trigger_config=self.trigger_config,
            is_active=self.is_active,
            steps=[s.to_dto() for s in self.steps],
        )


class AutomationUpdate(BaseModel):
    """Request body for updating an automation (partial; steps replace all)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    trigger: TriggerKind | None = None
    trigger_config: dict[str, Any] | None = None
    steps: list[StepRequest] | None = None

    @model_validator(mode="after")
    def validate_steps(self) -> "AutomationUpdate":
        if self.steps is not None:
            _check_contiguous(self.steps)
        return self


class AutomationToggleRequest(BaseModel):
    """Explicit target state; omitted flips the current one."""

    is_active: bool | None = None


class StepResponse(BaseModel):
    """Automation step response."""

    model_config = ConfigDict(from_attributes=True)

    order: int = Field(validation_alias=AliasChoices("order", "step_order"))
    action: str
    config: dict[str, Any]
    delay_minutes: int


class AutomationResponse(BaseModel):
    """Automation response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    description: str | None
    trigger: str
    trigger_config: dict[str, Any] | None
    is_active: bool
    steps: list[StepResponse]
    created_at: datetime
    updated_at: datetime
