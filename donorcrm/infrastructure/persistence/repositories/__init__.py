"""Persistence repositories."""

from donorcrm.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)
from donorcrm.infrastructure.persistence.repositories.automation_repo import (
    AutomationRepository,
    automation_to_definition,
)
from donorcrm.infrastructure.persistence.repositories.base import BaseRepository
from donorcrm.infrastructure.persistence.repositories.donor_repo import (
    DonorRepository,
    donor_to_contact,
)
from donorcrm.infrastructure.persistence.repositories.execution_repo import (
    ExecutionRepository,
    execution_to_entity,
)
from donorcrm.infrastructure.persistence.repositories.tag_repo import TagRepository
from donorcrm.infrastructure.persistence.repositories.tenant_repo import (
    TenantRepository,
    tenant_to_profile,
)
from donorcrm.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "AuditLogRepository",
    "AutomationRepository",
    "BaseRepository",
    "DonorRepository",
    "ExecutionRepository",
    "TagRepository",
    "TenantRepository",
    "UserRepository",
    "automation_to_definition",
    "donor_to_contact",
    "execution_to_entity",
    "tenant_to_profile",
]
