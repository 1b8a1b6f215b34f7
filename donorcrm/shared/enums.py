"""Shared enumerations for the donorcrm application.

Cross-cutting enums used by application and infrastructure (e.g. step
outcomes, user roles). Automation enums (TriggerKind, ActionKind,
ExecutionStatus) live in donorcrm.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class StepOutcome(_ValuesMixin, str, Enum):
    """Outcome of one dispatched automation step (recorded in execution_log)."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class UserRole(_ValuesMixin, str, Enum):
    """Tenant user roles. NOTIFY_ADMIN fans out to the admin roles."""

    SUPER_ADMIN = "SUPER_ADMIN"
    NGO_ADMIN = "NGO_ADMIN"
    NGO_MEMBER = "NGO_MEMBER"

    @classmethod
    def admin_roles(cls) -> list[str]:
        """Return role values that receive admin notifications."""
        return [cls.NGO_ADMIN.value, cls.SUPER_ADMIN.value]
