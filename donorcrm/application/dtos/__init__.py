"""DTOs for automation use cases (no dependency on ORM or presentation schemas)."""

from donorcrm.application.dtos.automation import AutomationCreate, StepCreate
from donorcrm.application.dtos.channel import AuditEntry, EmailMessage, SendResult, SmsMessage
from donorcrm.application.dtos.execution import ActionResult, RunContext, SweepResult

__all__ = [
    "ActionResult",
    "AuditEntry",
    "AutomationCreate",
    "EmailMessage",
    "RunContext",
    "SendResult",
    "SmsMessage",
    "StepCreate",
    "SweepResult",
]
