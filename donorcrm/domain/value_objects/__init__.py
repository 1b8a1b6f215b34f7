"""Typed views over the schema-less trigger and step config maps."""

from donorcrm.domain.value_objects.action_config import (
    ActionConfig,
    AiSuggestionConfig,
    InertConfig,
    NotifyAdminConfig,
    SendEmailConfig,
    SendSmsConfig,
    TagConfig,
    parse_action_config,
)
from donorcrm.domain.value_objects.trigger_config import (
    NoDonationPeriodTriggerConfig,
    TagAddedTriggerConfig,
    TriggerConfig,
    TriggerContext,
    parse_trigger_config,
)

__all__ = [
    "ActionConfig",
    "AiSuggestionConfig",
    "InertConfig",
    "NoDonationPeriodTriggerConfig",
    "NotifyAdminConfig",
    "SendEmailConfig",
    "SendSmsConfig",
    "TagAddedTriggerConfig",
    "TagConfig",
    "TriggerConfig",
    "TriggerContext",
    "parse_action_config",
    "parse_trigger_config",
]
