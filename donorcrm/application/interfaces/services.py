"""Service interfaces (ports) for the application layer.

Channel providers, tag store, admin directory and audit log are external
collaborators of the automation engine; implementations are injected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from donorcrm.application.dtos.channel import (
        AuditEntry,
        EmailMessage,
        SendResult,
        SmsMessage,
    )


# Email provider interface (SEND_EMAIL, NOTIFY_ADMIN)
class IEmailProvider(Protocol):
    """Protocol for sending one email."""

    async def send(self, message: EmailMessage) -> SendResult:
        """Send; return success=False (not raise) when the provider rejects it."""


# SMS provider interface (SEND_SMS)
class ISmsProvider(Protocol):
    """Protocol for sending one SMS to an already-normalized number."""

    async def send(self, message: SmsMessage) -> SendResult:
        """Send; return success=False (not raise) when the provider rejects it."""


# Tag store (ADD_TAG / REMOVE_TAG)
class ITagStore(Protocol):
    """Protocol for idempotent donor/tag associations."""

    async def assign(self, tenant_id: str, donor_id: str, tag_id: str) -> bool:
        """Associate tag with donor. Returns False when it was already present."""

    async def unassign(self, tenant_id: str, donor_id: str, tag_id: str) -> bool:
        """Remove association. Returns False when it was already absent."""

    async def resolve_tag(
        self, tenant_id: str, name: str, *, create: bool = False
    ) -> str | None:
        """Return tag id by name in tenant; create it when create=True and missing."""


# Admin directory (NOTIFY_ADMIN)
class IAdminDirectory(Protocol):
    """Protocol for resolving tenant administrator addresses."""

    async def list_admin_emails(self, tenant_id: str) -> list[str]:
        """Return emails of active admin-role users of the tenant."""


# Audit log (AI_SUGGESTION, automation toggles)
class IAuditLog(Protocol):
    """Protocol for appending audit records."""

    async def record(self, entry: AuditEntry) -> None:
        """Append one audit record."""
