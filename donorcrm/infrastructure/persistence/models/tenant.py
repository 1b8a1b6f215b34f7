"""Tenant ORM model. One NGO; root of the multi-tenant hierarchy (no tenant_id)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from donorcrm.infrastructure.persistence.database import Base
from donorcrm.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Tenant(CuidMixin, TimestampMixin, Base):
    """Root tenant entity. Table: tenant. Slug appears in unsubscribe links."""

    __tablename__ = "tenant"

    slug: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    sender_email: Mapped[str | None] = mapped_column(String, nullable=True)
    sender_name: Mapped[str | None] = mapped_column(String, nullable=True)
    sms_sender_id: Mapped[str | None] = mapped_column(String, nullable=True)
