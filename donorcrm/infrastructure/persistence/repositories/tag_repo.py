"""Tag repository: tenant tags and idempotent donor/tag assignments."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.domain.exceptions import ResourceNotFoundException
from donorcrm.infrastructure.persistence.models.tag import DonorTagAssignment, Tag
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository
from donorcrm.shared.utils.generators import generate_cuid


class TagRepository(BaseRepository[Tag]):
    """Tag repository. assign/unassign report whether anything changed."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tag)

    async def get_by_id_and_tenant(self, tag_id: str, tenant_id: str) -> Tag | None:
        result = await self.db.execute(
            select(Tag).where(Tag.id == tag_id, Tag.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, tenant_id: str, name: str) -> Tag | None:
        result = await self.db.execute(
            select(Tag).where(Tag.tenant_id == tenant_id, Tag.name == name)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, tenant_id: str, name: str) -> Tag:
        """Return tag by name, creating it (race-safe on the unique name) when missing."""
        await self.db.execute(
            pg_insert(Tag)
            .values(id=generate_cuid(), tenant_id=tenant_id, name=name)
            .on_conflict_do_nothing(constraint="uq_tag_tenant_name")
        )
        tag = await self.get_by_name(tenant_id, name)
        if tag is None:
            raise ResourceNotFoundException("tag", name)
        return tag

    async def assign(self, donor_id: str, tag_id: str) -> bool:
        """Insert the assignment; False when it already existed."""
        result = await self.db.execute(
            pg_insert(DonorTagAssignment)
            .values(donor_id=donor_id, tag_id=tag_id)
            .on_conflict_do_nothing(index_elements=["donor_id", "tag_id"])
        )
        return result.rowcount == 1

    async def unassign(self, donor_id: str, tag_id: str) -> bool:
        """Delete the assignment; False when it was already absent."""
        result = await self.db.execute(
            delete(DonorTagAssignment).where(
                DonorTagAssignment.donor_id == donor_id,
                DonorTagAssignment.tag_id == tag_id,
            )
        )
        return result.rowcount == 1
