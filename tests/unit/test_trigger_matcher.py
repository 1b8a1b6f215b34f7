"""Tests for TriggerMatcher (kind, active flag, tenant, trigger config)."""

from donorcrm.application.services import TriggerMatcher
from donorcrm.domain.enums import ActionKind, TriggerKind
from donorcrm.domain.value_objects import TriggerContext
from tests.fakes import InMemoryAutomationDirectory, make_definition

_EMAIL = [(ActionKind.SEND_EMAIL, 0)]


def _matcher(*definitions) -> TriggerMatcher:
    directory = InMemoryAutomationDirectory()
    for definition in definitions:
        directory.add(definition)
    return TriggerMatcher(directory)


async def test_matches_active_definitions_of_trigger_kind() -> None:
    """Only active definitions listening to the fired kind are returned."""
    matcher = _matcher(
        make_definition(_EMAIL, automation_id="a1"),
        make_definition(_EMAIL, automation_id="a2", trigger=TriggerKind.DONOR_CREATED),
        make_definition(_EMAIL, automation_id="a3", is_active=False),
    )
    matched = await matcher.match("tenant-a", TriggerKind.NEW_DONATION, TriggerContext())
    assert [d.id for d in matched] == ["a1"]


async def test_other_tenant_definitions_never_match() -> None:
    matcher = _matcher(make_definition(_EMAIL, automation_id="a1", tenant_id="tenant-b"))
    matched = await matcher.match("tenant-a", TriggerKind.NEW_DONATION, TriggerContext())
    assert matched == []


async def test_campaign_scoped_config_requires_same_campaign() -> None:
    """campaignId in trigger_config must equal the event's campaign id."""
    matcher = _matcher(
        make_definition(
            _EMAIL,
            automation_id="scoped",
            trigger=TriggerKind.CAMPAIGN_GOAL_REACHED,
            trigger_config={"campaignId": "c-1"},
        )
    )
    hit = await matcher.match(
        "tenant-a", TriggerKind.CAMPAIGN_GOAL_REACHED, TriggerContext(campaign_id="c-1")
    )
    miss = await matcher.match(
        "tenant-a", TriggerKind.CAMPAIGN_GOAL_REACHED, TriggerContext(campaign_id="c-2")
    )
    assert [d.id for d in hit] == ["scoped"]
    assert miss == []


async def test_config_without_correlating_id_matches_every_event() -> None:
    """Unknown keys and absent ids fail open."""
    matcher = _matcher(
        make_definition(
            _EMAIL,
            automation_id="open",
            trigger_config={"someFutureKey": 3},
        )
    )
    matched = await matcher.match(
        "tenant-a", TriggerKind.NEW_DONATION, TriggerContext(campaign_id="c-9")
    )
    assert [d.id for d in matched] == ["open"]


async def test_tag_added_config_filters_by_tag_id_or_name() -> None:
    matcher = _matcher(
        make_definition(
            _EMAIL,
            automation_id="by-id",
            trigger=TriggerKind.TAG_ADDED,
            trigger_config={"tagId": "t-1"},
        ),
        make_definition(
            _EMAIL,
            automation_id="by-name",
            trigger=TriggerKind.TAG_ADDED,
            trigger_config={"tag_name": "VIP"},
        ),
    )
    matched = await matcher.match(
        "tenant-a", TriggerKind.TAG_ADDED, TriggerContext(tag_id="t-1", tag_name="Monthly")
    )
    assert [d.id for d in matched] == ["by-id"]
    matched = await matcher.match(
        "tenant-a", TriggerKind.TAG_ADDED, TriggerContext(tag_id="t-2", tag_name="VIP")
    )
    assert [d.id for d in matched] == ["by-name"]


async def test_no_match_returns_empty_list() -> None:
    matcher = _matcher()
    assert await matcher.match("tenant-a", TriggerKind.MANUAL, TriggerContext()) == []
