"""Infrastructure services: SQL port adapters and engine composition."""

from donorcrm.infrastructure.services.automation_stores import (
    SqlAdminDirectory,
    SqlAuditLog,
    SqlAutomationDirectory,
    SqlDonorDirectory,
    SqlExecutionStore,
    SqlTagStore,
    SqlTenantDirectory,
)
from donorcrm.infrastructure.services.engine_factory import build_automation_engine

__all__ = [
    "SqlAdminDirectory",
    "SqlAuditLog",
    "SqlAutomationDirectory",
    "SqlDonorDirectory",
    "SqlExecutionStore",
    "SqlTagStore",
    "SqlTenantDirectory",
    "build_automation_engine",
]
