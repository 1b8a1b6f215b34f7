"""Read-only views of CRM records the automation actions need."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DonorContact:
    """Donor channels and consents (subject of an automation run)."""

    id: str
    tenant_id: str
    email: str | None
    phone: str | None
    email_consent: bool
    sms_consent: bool
    display_name: str | None = None

    def can_email(self) -> bool:
        return bool(self.email) and self.email_consent

    def can_sms(self) -> bool:
        return bool(self.phone) and self.sms_consent


@dataclass(frozen=True)
class TenantProfile:
    """Tenant (NGO) branding used as email/SMS sender."""

    id: str
    slug: str
    name: str
    sender_email: str | None = None
    sender_name: str | None = None
    sms_sender_id: str | None = None
