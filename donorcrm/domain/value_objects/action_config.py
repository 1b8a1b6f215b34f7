"""Per-action step configuration, parsed once at the dispatch boundary.

Steps persist ``config`` as an opaque JSON map so new keys can be added
without migrations; the dispatcher only ever sees these typed shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from donorcrm.domain.enums import ActionKind

DEFAULT_EMAIL_HTML = "<p>Thank you for your support!</p>"
DEFAULT_SMS_BODY = "Thank you for your support!"
DEFAULT_ADMIN_SUBJECT = "Automation Notification"
DEFAULT_AI_SUGGESTION = "AI content suggestion triggered"


def _text(raw: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


@dataclass(frozen=True)
class SendEmailConfig:
    """SEND_EMAIL: subject and html body (body wins over template)."""

    subject: str | None = None
    html: str | None = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> SendEmailConfig:
        return cls(subject=_text(raw, "subject"), html=_text(raw, "body", "template"))


@dataclass(frozen=True)
class SendSmsConfig:
    """SEND_SMS: message body."""

    body: str = DEFAULT_SMS_BODY

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> SendSmsConfig:
        return cls(body=_text(raw, "body", "message") or DEFAULT_SMS_BODY)


@dataclass(frozen=True)
class TagConfig:
    """ADD_TAG / REMOVE_TAG: tag by id, or by name resolved per tenant."""

    tag_id: str | None = None
    tag_name: str | None = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> TagConfig:
        return cls(
            tag_id=_text(raw, "tagId", "tag_id"),
            tag_name=_text(raw, "tagName", "tag_name"),
        )

    @property
    def is_empty(self) -> bool:
        return self.tag_id is None and self.tag_name is None


@dataclass(frozen=True)
class NotifyAdminConfig:
    """NOTIFY_ADMIN: subject and html sent to every tenant admin."""

    subject: str = DEFAULT_ADMIN_SUBJECT
    html: str | None = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> NotifyAdminConfig:
        return cls(
            subject=_text(raw, "subject") or DEFAULT_ADMIN_SUBJECT,
            html=_text(raw, "body"),
        )


@dataclass(frozen=True)
class AiSuggestionConfig:
    """AI_SUGGESTION: prompt text stored for a human to review."""

    prompt: str = DEFAULT_AI_SUGGESTION

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> AiSuggestionConfig:
        return cls(prompt=_text(raw, "prompt", "suggestion") or DEFAULT_AI_SUGGESTION)


@dataclass(frozen=True)
class InertConfig:
    """WAIT / CONDITION: nothing to parse; raw kept for the execution log."""

    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> InertConfig:
        return cls(raw=dict(raw))


ActionConfig = (
    SendEmailConfig
    | SendSmsConfig
    | TagConfig
    | NotifyAdminConfig
    | AiSuggestionConfig
    | InertConfig
)

_PARSERS: dict[ActionKind, Any] = {
    ActionKind.SEND_EMAIL: SendEmailConfig,
    ActionKind.SEND_SMS: SendSmsConfig,
    ActionKind.ADD_TAG: TagConfig,
    ActionKind.REMOVE_TAG: TagConfig,
    ActionKind.NOTIFY_ADMIN: NotifyAdminConfig,
    ActionKind.AI_SUGGESTION: AiSuggestionConfig,
    ActionKind.WAIT: InertConfig,
    ActionKind.CONDITION: InertConfig,
}


def parse_action_config(action: ActionKind, raw: dict[str, Any] | None) -> ActionConfig:
    """Parse a step's stored config map into the typed shape for action."""
    data = raw if isinstance(raw, dict) else {}
    return _PARSERS[action].from_raw(data)
