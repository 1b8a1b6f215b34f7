"""Initial schema: tenants, users, donors, tags, automations, executions, audit log

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.118204

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create initial schema."""
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("sender_email", sa.String(), nullable=True),
        sa.Column("sender_name", sa.String(), nullable=True),
        sa.Column("sms_sender_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tenant_slug", "tenant", ["slug"], unique=True)

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('SUPER_ADMIN', 'NGO_ADMIN', 'NGO_MEMBER')", name="app_user_role_check"
        ),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "email", name="uq_tenant_email"),
    )
    op.create_index("ix_app_user_tenant_id", "app_user", ["tenant_id"])
    op.create_index("ix_app_user_role", "app_user", ["role"])

    op.create_table(
        "donor",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("email_consent", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("sms_consent", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_donor_tenant_id", "donor", ["tenant_id"])
    op.create_index("ix_donor_deleted_at", "donor", ["deleted_at"])
    op.create_index("ix_donor_tenant_email", "donor", ["tenant_id", "email"])

    op.create_table(
        "tag",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("color", sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "name", name="uq_tag_tenant_name"),
    )
    op.create_index("ix_tag_tenant_id", "tag", ["tenant_id"])

    op.create_table(
        "donor_tag_assignment",
        sa.Column("donor_id", sa.String(), nullable=False),
        sa.Column("tag_id", sa.String(), nullable=False),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["donor_id"], ["donor.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tag.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("donor_id", "tag_id"),
    )
    op.create_index("ix_donor_tag_assignment_tag_id", "donor_tag_assignment", ["tag_id"])

    op.create_table(
        "automation",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("trigger", sa.String(), nullable=False),
        sa.Column("trigger_config", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("updated_by", sa.String(), nullable=True),
        sa.CheckConstraint(
            "trigger IN ('NEW_DONATION', 'DONOR_CREATED', 'CAMPAIGN_GOAL_REACHED', "
            "'NO_DONATION_PERIOD', 'NEW_SUBSCRIBER', 'TAG_ADDED', 'CAMPAIGN_ENDED', 'MANUAL')",
            name="automation_trigger_check",
        ),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["app_user.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["updated_by"], ["app_user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_automation_tenant_id", "automation", ["tenant_id"])
    op.create_index("ix_automation_trigger", "automation", ["trigger"])
    op.create_index("ix_automation_deleted_at", "automation", ["deleted_at"])
    op.create_index("ix_automation_created_by", "automation", ["created_by"])
    op.create_index(
        "ix_automation_tenant_trigger_active",
        "automation",
        ["tenant_id", "trigger", "is_active"],
    )

    op.create_table(
        "automation_step",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("automation_id", sa.String(), nullable=False),
        sa.Column("step_order", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("config", sa.JSON(), server_default=sa.text("'{}'"), nullable=False),
        sa.Column("delay_minutes", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("step_order >= 0", name="automation_step_order_check"),
        sa.CheckConstraint("delay_minutes >= 0", name="automation_step_delay_check"),
        sa.CheckConstraint(
            "action IN ('SEND_EMAIL', 'SEND_SMS', 'WAIT', 'ADD_TAG', 'REMOVE_TAG', "
            "'NOTIFY_ADMIN', 'AI_SUGGESTION', 'CONDITION')",
            name="automation_step_action_check",
        ),
        sa.ForeignKeyConstraint(["automation_id"], ["automation.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("automation_id", "step_order", name="uq_automation_step_order"),
    )
    op.create_index("ix_automation_step_automation_id", "automation_step", ["automation_id"])

    op.create_table(
        "automation_execution",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("automation_id", sa.String(), nullable=False),
        sa.Column("donor_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column(
            "current_step_index", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("resume_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("context_data", sa.JSON(), server_default=sa.text("'{}'"), nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actions_executed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("actions_failed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("execution_log", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('running', 'waiting', 'completed', 'failed')",
            name="automation_execution_status_check",
        ),
        sa.CheckConstraint(
            "status <> 'waiting' OR resume_at IS NOT NULL",
            name="automation_execution_waiting_resume_at_check",
        ),
        sa.CheckConstraint(
            "current_step_index >= 0", name="automation_execution_step_index_check"
        ),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["automation_id"], ["automation.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["donor_id"], ["donor.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_automation_execution_tenant_id", "automation_execution", ["tenant_id"])
    op.create_index(
        "ix_automation_execution_automation_id", "automation_execution", ["automation_id"]
    )
    op.create_index("ix_automation_execution_donor_id", "automation_execution", ["donor_id"])
    op.create_index("ix_automation_execution_status", "automation_execution", ["status"])
    op.create_index(
        "ix_automation_execution_status_resume_at",
        "automation_execution",
        ["status", "resume_at"],
    )
    op.create_index(
        "ix_automation_execution_tenant_automation",
        "automation_execution",
        ["tenant_id", "automation_id"],
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=True),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_tenant_id", "audit_log", ["tenant_id"])
    op.create_index("ix_audit_log_user_id", "audit_log", ["user_id"])
    op.create_index("ix_audit_log_action", "audit_log", ["action"])


def downgrade() -> None:
    """Drop initial schema."""
    op.drop_table("audit_log")
    op.drop_table("automation_execution")
    op.drop_table("automation_step")
    op.drop_table("automation")
    op.drop_table("donor_tag_assignment")
    op.drop_table("tag")
    op.drop_table("donor")
    op.drop_table("app_user")
    op.drop_table("tenant")
