"""DTOs exchanged with channel providers and the audit log."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class EmailMessage:
    """One outgoing email. unsubscribe_url is set for donor-facing mail only."""

    to: str
    subject: str
    html: str
    from_address: str | None = None
    from_name: str | None = None
    unsubscribe_url: str | None = None


@dataclass(frozen=True)
class SmsMessage:
    """One outgoing SMS; to is already normalized to international format."""

    to: str
    body: str
    sender_id: str | None = None


@dataclass(frozen=True)
class SendResult:
    """Provider answer. success=False is an expected, non-fatal failure."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class AuditEntry:
    """Append-only audit record (e.g. AI_SUGGESTION, AUTOMATION_ACTIVATED)."""

    tenant_id: str
    action: str
    entity_type: str
    entity_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    user_id: str | None = None
