"""User ORM model (tenant-scoped staff accounts; admins receive notifications)."""

from sqlalchemy import Boolean, CheckConstraint, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from donorcrm.infrastructure.persistence.database import Base
from donorcrm.infrastructure.persistence.models.mixins import MultiTenantModel
from donorcrm.shared.enums import UserRole


class User(MultiTenantModel, Base):
    """User model. Table: app_user. Unique (tenant_id, email)."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(
        String, nullable=False, default=UserRole.NGO_MEMBER.value, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_tenant_email"),
        CheckConstraint(
            "role IN ({})".format(
                ", ".join("'{}'".format(v.replace("'", "''")) for v in UserRole.values())
            ),
            name="app_user_role_check",
        ),
    )
