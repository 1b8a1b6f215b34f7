"""Tag and DonorTagAssignment ORM models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from donorcrm.infrastructure.persistence.database import Base
from donorcrm.infrastructure.persistence.models.mixins import MultiTenantModel


class Tag(MultiTenantModel, Base):
    """Donor tag. Table: tag. Unique (tenant_id, name)."""

    __tablename__ = "tag"

    name: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_tag_tenant_name"),)


class DonorTagAssignment(Base):
    """Donor/tag association. Table: donor_tag_assignment. Composite key donor + tag."""

    __tablename__ = "donor_tag_assignment"

    donor_id: Mapped[str] = mapped_column(
        String, ForeignKey("donor.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        String, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
