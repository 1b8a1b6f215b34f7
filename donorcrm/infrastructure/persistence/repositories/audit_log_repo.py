"""Audit log repository. Append-only."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.application.dtos.channel import AuditEntry
from donorcrm.infrastructure.persistence.models.audit_log import AuditLog
from donorcrm.shared.utils.generators import generate_cuid


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, entry: AuditEntry) -> AuditLog:
        """Append one audit log entry; return created row."""
        row = AuditLog(
            id=generate_cuid(),
            tenant_id=entry.tenant_id,
            user_id=entry.user_id,
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            details=entry.details or None,
        )
        self.db.add(row)
        await self.db.flush()
        return row

    async def list_for_entity(
        self,
        tenant_id: str,
        entity_type: str,
        entity_id: str,
        *,
        limit: int = 100,
    ) -> list[AuditLog]:
        """List entries for one entity (newest first)."""
        result = await self.db.execute(
            select(AuditLog)
            .where(
                AuditLog.tenant_id == tenant_id,
                AuditLog.entity_type == entity_type,
                AuditLog.entity_id == entity_id,
            )
            .order_by(AuditLog.timestamp.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
