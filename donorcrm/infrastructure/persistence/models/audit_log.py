"""Audit log ORM model. Append-only record of automation activity."""

from datetime import datetime
from typing import Any

from sqlalchemy import Connection, DateTime, ForeignKey, String, event, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from donorcrm.infrastructure.persistence.database import Base
from donorcrm.shared.utils.generators import generate_cuid


class AuditLog(Base):
    """Audit log entry: what happened to which entity, when. No update/delete."""

    __tablename__ = "audit_log"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)
    tenant_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    action: Mapped[str] = mapped_column(String, nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String, nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()"), nullable=False
    )


@event.listens_for(AuditLog, "before_update")
def _prevent_audit_log_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditLog
) -> None:
    """Audit log entries are append-only; updates are forbidden."""
    raise ValueError("Audit log entries are immutable and cannot be updated.")


@event.listens_for(AuditLog, "before_delete")
def _prevent_audit_log_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: AuditLog
) -> None:
    """Audit log entries cannot be deleted."""
    raise ValueError("Audit log entries cannot be deleted.")
