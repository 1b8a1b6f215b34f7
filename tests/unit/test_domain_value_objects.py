"""Tests for trigger and action config parsing."""

import pytest

from donorcrm.domain.enums import ActionKind, TriggerKind
from donorcrm.domain.value_objects import (
    InertConfig,
    NoDonationPeriodTriggerConfig,
    SendEmailConfig,
    SendSmsConfig,
    TagAddedTriggerConfig,
    TagConfig,
    TriggerConfig,
    TriggerContext,
    parse_action_config,
    parse_trigger_config,
)
from donorcrm.domain.value_objects.action_config import DEFAULT_SMS_BODY


@pytest.mark.parametrize("raw", [None, {}])
def test_empty_trigger_config_parses_to_none(raw) -> None:
    assert parse_trigger_config(TriggerKind.NEW_DONATION, raw) is None


def test_trigger_config_accepts_camel_and_snake_case() -> None:
    camel = parse_trigger_config(TriggerKind.CAMPAIGN_ENDED, {"campaignId": "c1"})
    snake = parse_trigger_config(TriggerKind.CAMPAIGN_ENDED, {"campaign_id": "c1"})
    assert isinstance(camel, TriggerConfig)
    assert camel.campaign_id == snake.campaign_id == "c1"


def test_trigger_config_records_unknown_keys() -> None:
    config = parse_trigger_config(TriggerKind.NEW_DONATION, {"zeta": 1, "alpha": 2})
    assert config.unknown_keys == ("alpha", "zeta")
    assert config.matches(TriggerContext())


def test_tag_added_variant() -> None:
    config = parse_trigger_config(TriggerKind.TAG_ADDED, {"tagName": "VIP"})
    assert isinstance(config, TagAddedTriggerConfig)
    assert config.matches(TriggerContext(tag_name="VIP"))
    assert not config.matches(TriggerContext(tag_name="Other"))


def test_no_donation_period_ignores_bad_days() -> None:
    config = parse_trigger_config(TriggerKind.NO_DONATION_PERIOD, {"inactiveDays": "abc"})
    assert isinstance(config, NoDonationPeriodTriggerConfig)
    assert config.inactive_days is None
    ok = parse_trigger_config(TriggerKind.NO_DONATION_PERIOD, {"inactive_days": "90"})
    assert ok.inactive_days == 90


def test_trigger_context_to_context_data_skips_absent_ids() -> None:
    context = TriggerContext(donor_id="d1", tag_id="t1", metadata={"source": "import"})
    assert context.to_context_data(TriggerKind.TAG_ADDED) == {
        "source": "import",
        "trigger": "TAG_ADDED",
        "tag_id": "t1",
    }


def test_send_email_body_wins_over_template() -> None:
    config = parse_action_config(
        ActionKind.SEND_EMAIL, {"subject": "Hi", "body": "<p>b</p>", "template": "<p>t</p>"}
    )
    assert config == SendEmailConfig(subject="Hi", html="<p>b</p>")


def test_send_sms_falls_back_to_default_body() -> None:
    assert parse_action_config(ActionKind.SEND_SMS, {"body": "   "}) == SendSmsConfig(
        body=DEFAULT_SMS_BODY
    )
    assert parse_action_config(ActionKind.SEND_SMS, {"message": "Hey"}).body == "Hey"


def test_tag_config_is_empty_without_id_or_name() -> None:
    assert parse_action_config(ActionKind.ADD_TAG, None).is_empty
    assert parse_action_config(ActionKind.REMOVE_TAG, {"tag_id": "t1"}) == TagConfig(tag_id="t1")


def test_condition_config_is_kept_raw() -> None:
    config = parse_action_config(ActionKind.CONDITION, {"field": "amount", "op": "gt"})
    assert config == InertConfig(raw={"field": "amount", "op": "gt"})
