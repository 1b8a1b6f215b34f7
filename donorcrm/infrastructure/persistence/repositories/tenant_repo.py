"""Tenant repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.domain.entities import TenantProfile
from donorcrm.infrastructure.persistence.models.tenant import Tenant
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository


def tenant_to_profile(t: Tenant) -> TenantProfile:
    """Map ORM Tenant to the sender profile used by channel actions."""
    return TenantProfile(
        id=t.id,
        slug=t.slug,
        name=t.name,
        sender_email=t.sender_email,
        sender_name=t.sender_name,
        sms_sender_id=t.sms_sender_id,
    )


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)
