"""Domain entities."""

from donorcrm.domain.entities.automation import (
    AutomationDefinition,
    AutomationStep,
    validate_step_order,
)
from donorcrm.domain.entities.contact import DonorContact, TenantProfile
from donorcrm.domain.entities.execution import AutomationExecution

__all__ = [
    "AutomationDefinition",
    "AutomationExecution",
    "AutomationStep",
    "DonorContact",
    "TenantProfile",
    "validate_step_order",
]
