"""Automation, AutomationStep and AutomationExecution ORM models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from donorcrm.domain.enums import ActionKind, ExecutionStatus, TriggerKind
from donorcrm.infrastructure.persistence.database import Base
from donorcrm.infrastructure.persistence.models.mixins import (
    AuditedMultiTenantModel,
    CuidMixin,
    MultiTenantModel,
    TimestampMixin,
)


def _in_check(column: str, values: list[str]) -> str:
    return "{} IN ({})".format(
        column, ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    )


class Automation(AuditedMultiTenantModel, Base):
    """Automation definition. Table: automation. Trigger + ordered steps."""

    __tablename__ = "automation"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    trigger: Mapped[str] = mapped_column(String, nullable=False, index=True)
    trigger_config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )

    steps: Mapped[list["AutomationStep"]] = relationship(
        back_populates="automation",
        cascade="all, delete-orphan",
        order_by="AutomationStep.step_order",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_automation_tenant_trigger_active", "tenant_id", "trigger", "is_active"),
        CheckConstraint(_in_check("trigger", TriggerKind.values()), name="automation_trigger_check"),
    )


class AutomationStep(CuidMixin, TimestampMixin, Base):
    """One step of an automation. Table: automation_step. Unique (automation_id, step_order)."""

    __tablename__ = "automation_step"

    automation_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("automation.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict, server_default=sa.text("'{}'")
    )
    delay_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )

    automation: Mapped[Automation] = relationship(back_populates="steps")

    __table_args__ = (
        UniqueConstraint("automation_id", "step_order", name="uq_automation_step_order"),
        CheckConstraint("step_order >= 0", name="automation_step_order_check"),
        CheckConstraint("delay_minutes >= 0", name="automation_step_delay_check"),
        CheckConstraint(_in_check("action", ActionKind.values()), name="automation_step_action_check"),
    )


class AutomationExecution(MultiTenantModel, Base):
    """One run of an automation for one donor. Table: automation_execution."""

    __tablename__ = "automation_execution"

    automation_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("automation.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    donor_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("donor.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default=ExecutionStatus.RUNNING.value,
        index=True,
    )
    current_step_index: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    resume_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    context_data: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict, server_default=sa.text("'{}'")
    )
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    actions_executed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    actions_failed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    execution_log: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list, server_default=sa.text("'[]'")
    )

    __table_args__ = (
        Index("ix_automation_execution_status_resume_at", "status", "resume_at"),
        Index(
            "ix_automation_execution_tenant_automation",
            "tenant_id",
            "automation_id",
        ),
        CheckConstraint(
            _in_check("status", ExecutionStatus.values()),
            name="automation_execution_status_check",
        ),
        CheckConstraint(
            "status <> 'waiting' OR resume_at IS NOT NULL",
            name="automation_execution_waiting_resume_at_check",
        ),
        CheckConstraint(
            "current_step_index >= 0", name="automation_execution_step_index_check"
        ),
    )
