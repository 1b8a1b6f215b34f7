"""Donor ORM model. Contact channels and per-channel consent."""

from sqlalchemy import Boolean, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from donorcrm.infrastructure.persistence.database import Base
from donorcrm.infrastructure.persistence.models.mixins import (
    MultiTenantModel,
    SoftDeleteMixin,
)


class Donor(MultiTenantModel, SoftDeleteMixin, Base):
    """Donor. Table: donor. Email/SMS actions require the matching consent flag."""

    __tablename__ = "donor"

    first_name: Mapped[str | None] = mapped_column(String, nullable=True)
    last_name: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    email_consent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    sms_consent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (Index("ix_donor_tenant_email", "tenant_id", "email"),)

    @property
    def display_name(self) -> str | None:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None
