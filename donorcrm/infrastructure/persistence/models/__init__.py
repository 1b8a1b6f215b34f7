"""Persistence models: ORM entities and mixins."""

from donorcrm.infrastructure.persistence.models.audit_log import AuditLog
from donorcrm.infrastructure.persistence.models.automation import (
    Automation,
    AutomationExecution,
    AutomationStep,
)
from donorcrm.infrastructure.persistence.models.donor import Donor
from donorcrm.infrastructure.persistence.models.mixins import (
    AuditedMultiTenantModel,
    CuidMixin,
    MultiTenantModel,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
    UserAuditMixin,
)
from donorcrm.infrastructure.persistence.models.tag import DonorTagAssignment, Tag
from donorcrm.infrastructure.persistence.models.tenant import Tenant
from donorcrm.infrastructure.persistence.models.user import User

__all__ = [
    "AuditLog",
    "AuditedMultiTenantModel",
    "Automation",
    "AutomationExecution",
    "AutomationStep",
    "CuidMixin",
    "Donor",
    "DonorTagAssignment",
    "MultiTenantModel",
    "SoftDeleteMixin",
    "Tag",
    "TenantMixin",
    "Tenant",
    "TimestampMixin",
    "User",
    "UserAuditMixin",
]
