"""Ports (Protocols) the automation use cases depend on."""

from donorcrm.application.interfaces.repositories import (
    IAutomationDirectory,
    IDonorDirectory,
    IExecutionStore,
    ITenantDirectory,
)
from donorcrm.application.interfaces.services import (
    IAdminDirectory,
    IAuditLog,
    IEmailProvider,
    ISmsProvider,
    ITagStore,
)

__all__ = [
    "IAdminDirectory",
    "IAuditLog",
    "IAutomationDirectory",
    "IDonorDirectory",
    "IEmailProvider",
    "IExecutionStore",
    "ISmsProvider",
    "ITagStore",
    "ITenantDirectory",
]
