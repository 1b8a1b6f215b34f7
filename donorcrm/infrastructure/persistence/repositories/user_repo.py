"""User repository (tenant staff)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.infrastructure.persistence.models.user import User
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository
from donorcrm.shared.enums import UserRole


class UserRepository(BaseRepository[User]):
    """User repository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_admin_emails(self, tenant_id: str) -> list[str]:
        """Emails of active NGO_ADMIN / SUPER_ADMIN users of the tenant."""
        result = await self.db.execute(
            select(User.email)
            .where(
                User.tenant_id == tenant_id,
                User.role.in_(UserRole.admin_roles()),
                User.is_active.is_(True),
            )
            .order_by(User.email.asc())
        )
        return list(result.scalars().all())
