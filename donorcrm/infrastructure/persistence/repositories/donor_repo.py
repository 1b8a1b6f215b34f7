"""Donor repository: contact channels and consents for automation actions."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.domain.entities import DonorContact
from donorcrm.infrastructure.persistence.models.donor import Donor
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository


def donor_to_contact(row: Donor) -> DonorContact:
    return DonorContact(
        id=row.id,
        tenant_id=row.tenant_id,
        email=row.email,
        phone=row.phone,
        email_consent=row.email_consent,
        sms_consent=row.sms_consent,
        display_name=row.display_name,
    )


class DonorRepository(BaseRepository[Donor]):
    """Donor repository (tenant-scoped reads)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Donor)

    async def get_by_id_and_tenant(self, donor_id: str, tenant_id: str) -> Donor | None:
        result = await self.db.execute(
            select(Donor).where(
                Donor.id == donor_id,
                Donor.tenant_id == tenant_id,
                Donor.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()
