"""Trigger configuration variants, parsed once from the persisted JSON map.

The stored ``trigger_config`` stays schema-less (camelCase keys as written
by the dashboard, snake_case accepted too). Matching is permissive: keys
that are absent or unknown never exclude a definition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from donorcrm.domain.enums import TriggerKind


def _pick(raw: dict[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among keys (camelCase / snake_case aliases)."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


@dataclass(frozen=True)
class TriggerContext:
    """What an event emitter knows when it fires a trigger.

    donor_id is the subject of the run; campaign_id / tag_id / tag_name are
    correlating ids some trigger configs require. metadata is copied into the
    execution's context_data.
    """

    donor_id: str | None = None
    campaign_id: str | None = None
    tag_id: str | None = None
    tag_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_context_data(self, trigger: TriggerKind) -> dict[str, Any]:
        """Initial execution context_data: trigger metadata plus correlating ids."""
        data: dict[str, Any] = dict(self.metadata)
        data["trigger"] = trigger.value
        for key in ("campaign_id", "tag_id", "tag_name"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class TriggerConfig:
    """Base variant: every trigger kind may be scoped to one campaign."""

    campaign_id: str | None = None
    unknown_keys: tuple[str, ...] = ()

    _KNOWN_KEYS = ("campaignId", "campaign_id")

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> TriggerConfig:
        return cls(
            campaign_id=_pick(raw, "campaignId", "campaign_id"),
            unknown_keys=_unknown(raw, cls._KNOWN_KEYS),
        )

    def matches(self, context: TriggerContext) -> bool:
        """Return False only when a required correlating id differs."""
        if self.campaign_id is not None and self.campaign_id != context.campaign_id:
            return False
        return True


@dataclass(frozen=True)
class TagAddedTriggerConfig(TriggerConfig):
    """TAG_ADDED: optionally restricted to one tag (by id or name)."""

    tag_id: str | None = None
    tag_name: str | None = None

    _KNOWN_KEYS = ("campaignId", "campaign_id", "tagId", "tag_id", "tagName", "tag_name")

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> TagAddedTriggerConfig:
        return cls(
            campaign_id=_pick(raw, "campaignId", "campaign_id"),
            tag_id=_pick(raw, "tagId", "tag_id"),
            tag_name=_pick(raw, "tagName", "tag_name"),
            unknown_keys=_unknown(raw, cls._KNOWN_KEYS),
        )

    def matches(self, context: TriggerContext) -> bool:
        if not super().matches(context):
            return False
        if self.tag_id is not None and self.tag_id != context.tag_id:
            return False
        if self.tag_name is not None and self.tag_name != context.tag_name:
            return False
        return True


@dataclass(frozen=True)
class NoDonationPeriodTriggerConfig(TriggerConfig):
    """NO_DONATION_PERIOD: inactive_days is read by the emitter, not matched here."""

    inactive_days: int | None = None

    _KNOWN_KEYS = ("campaignId", "campaign_id", "inactiveDays", "inactive_days")

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> NoDonationPeriodTriggerConfig:
        days = _pick(raw, "inactiveDays", "inactive_days")
        try:
            inactive_days = int(days) if days is not None else None
        except (TypeError, ValueError):
            inactive_days = None
        return cls(
            campaign_id=_pick(raw, "campaignId", "campaign_id"),
            inactive_days=inactive_days,
            unknown_keys=_unknown(raw, cls._KNOWN_KEYS),
        )


def _unknown(raw: dict[str, Any], known: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(sorted(k for k in raw if k not in known))


_VARIANTS: dict[TriggerKind, type[TriggerConfig]] = {
    TriggerKind.TAG_ADDED: TagAddedTriggerConfig,
    TriggerKind.NO_DONATION_PERIOD: NoDonationPeriodTriggerConfig,
}


def parse_trigger_config(
    trigger: TriggerKind, raw: dict[str, Any] | None
) -> TriggerConfig | None:
    """Parse the stored map into the variant for trigger; None when absent or empty."""
    if not raw or not isinstance(raw, dict):
        return None
    return _VARIANTS.get(trigger, TriggerConfig).from_raw(raw)
