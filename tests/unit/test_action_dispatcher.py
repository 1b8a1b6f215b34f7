"""Tests for ActionDispatcher: one step's side effect and its uniform result."""

import pytest

from donorcrm.application.dtos.execution import RunContext
from donorcrm.domain.entities import AutomationStep
from donorcrm.domain.enums import ActionKind
from donorcrm.domain.value_objects.action_config import (
    DEFAULT_ADMIN_SUBJECT,
    DEFAULT_EMAIL_HTML,
    DEFAULT_SMS_BODY,
)
from donorcrm.shared.enums import StepOutcome
from tests.fakes import EngineHarness


def _run(donor_id: str | None = "donor-1") -> RunContext:
    return RunContext(
        tenant_id="tenant-a",
        automation_id="auto-1",
        execution_id="exec-1",
        donor_id=donor_id,
    )


def _step(action: ActionKind, config: dict | None = None) -> AutomationStep:
    return AutomationStep(order=0, action=action, config=config or {})


async def test_send_email_uses_tenant_sender_and_unsubscribe_link(
    harness: EngineHarness,
) -> None:
    """Donor-facing email carries tenant branding and the unsubscribe URL."""
    harness.add_donor()
    result = await harness.dispatcher.apply(
        _step(ActionKind.SEND_EMAIL, {"subject": "Thanks", "body": "<p>Hi</p>"}), _run()
    )
    assert result.outcome == StepOutcome.SUCCESS
    assert result.details["message_id"] == "email-1"
    message = harness.email.sent[0]
    assert message.to == "ana@example.org"
    assert message.subject == "Thanks"
    assert message.html == "<p>Hi</p>"
    assert message.from_address == "hello@hope.example"
    assert message.from_name == "Hope Team"
    assert message.unsubscribe_url == "https://crm.example/unsubscribe/hope-ngo?did=donor-1"


async def test_send_email_defaults_subject_and_body(harness: EngineHarness) -> None:
    harness.add_donor()
    await harness.dispatcher.apply(_step(ActionKind.SEND_EMAIL), _run())
    message = harness.email.sent[0]
    assert message.subject == "Update from Hope NGO"
    assert message.html == DEFAULT_EMAIL_HTML


@pytest.mark.parametrize(
    ("email", "consent", "reason"),
    [
        (None, True, "donor has no email address"),
        ("ana@example.org", False, "donor has not consented to email"),
    ],
)
async def test_send_email_skipped_without_address_or_consent(
    harness: EngineHarness, email: str | None, consent: bool, reason: str
) -> None:
    """Missing address or consent is a skip, and nothing is sent."""
    harness.add_donor(email=email, email_consent=consent)
    result = await harness.dispatcher.apply(_step(ActionKind.SEND_EMAIL), _run())
    assert result.outcome == StepOutcome.SKIPPED
    assert result.reason == reason
    assert result.ok
    assert harness.email.sent == []


async def test_send_email_without_donor_is_skipped(harness: EngineHarness) -> None:
    result = await harness.dispatcher.apply(_step(ActionKind.SEND_EMAIL), _run(None))
    assert result.outcome == StepOutcome.SKIPPED
    assert result.reason == "no donor"


async def test_send_email_provider_rejection_is_failed(harness: EngineHarness) -> None:
    """Provider rejection yields failed (not an exception)."""
    harness.add_donor()
    harness.email.reject.add("ana@example.org")
    result = await harness.dispatcher.apply(_step(ActionKind.SEND_EMAIL), _run())
    assert result.outcome == StepOutcome.FAILED
    assert result.reason == "rejected"
    assert not result.ok


async def test_send_sms_normalizes_national_number(harness: EngineHarness) -> None:
    """Phone 0721 000 000 is sent as +40721000000 with the tenant sender id."""
    harness.add_donor(phone="0721 000 000")
    result = await harness.dispatcher.apply(_step(ActionKind.SEND_SMS), _run())
    assert result.outcome == StepOutcome.SUCCESS
    sms = harness.sms.sent[0]
    assert sms.to == "+40721000000"
    assert sms.body == DEFAULT_SMS_BODY
    assert sms.sender_id == "HOPE"


async def test_send_sms_without_consent_is_skipped(harness: EngineHarness) -> None:
    harness.add_donor(sms_consent=False)
    result = await harness.dispatcher.apply(
        _step(ActionKind.SEND_SMS, {"message": "Hello"}), _run()
    )
    assert result.outcome == StepOutcome.SKIPPED
    assert harness.sms.sent == []


async def test_send_sms_provider_failure_is_failed(harness: EngineHarness) -> None:
    harness.add_donor()
    harness.sms.fail_with = "invalid number"
    result = await harness.dispatcher.apply(_step(ActionKind.SEND_SMS), _run())
    assert result.outcome == StepOutcome.FAILED
    assert result.reason == "invalid number"


async def test_add_tag_is_idempotent(harness: EngineHarness) -> None:
    """Adding a tag twice leaves one association; second call reports no change."""
    step = _step(ActionKind.ADD_TAG, {"tagId": "tag-vip"})
    first = await harness.dispatcher.apply(step, _run())
    second = await harness.dispatcher.apply(step, _run())
    assert first.details == {"tag_id": "tag-vip", "changed": True}
    assert second.outcome == StepOutcome.SUCCESS
    assert second.details["changed"] is False
    assert harness.tags.assignments == {("tenant-a", "donor-1", "tag-vip")}


async def test_add_tag_by_name_creates_missing_tag(harness: EngineHarness) -> None:
    result = await harness.dispatcher.apply(
        _step(ActionKind.ADD_TAG, {"tagName": "Monthly"}), _run()
    )
    assert result.details["tag_id"] == "tag-Monthly"
    assert harness.tags.tags[("tenant-a", "Monthly")] == "tag-Monthly"


async def test_remove_tag_absent_association_succeeds_unchanged(
    harness: EngineHarness,
) -> None:
    result = await harness.dispatcher.apply(
        _step(ActionKind.REMOVE_TAG, {"tagId": "tag-vip"}), _run()
    )
    assert result.outcome == StepOutcome.SUCCESS
    assert result.details["changed"] is False


async def test_remove_tag_by_unknown_name_does_not_create_it(harness: EngineHarness) -> None:
    result = await harness.dispatcher.apply(
        _step(ActionKind.REMOVE_TAG, {"tagName": "Ghost"}), _run()
    )
    assert result.outcome == StepOutcome.SUCCESS
    assert ("tenant-a", "Ghost") not in harness.tags.tags


async def test_tag_step_without_tag_is_skipped(harness: EngineHarness) -> None:
    result = await harness.dispatcher.apply(_step(ActionKind.ADD_TAG), _run())
    assert result.outcome == StepOutcome.SKIPPED
    assert result.reason == "no tag configured"


async def test_notify_admin_sends_one_email_per_admin(harness: EngineHarness) -> None:
    harness.admins.emails["tenant-a"] = ["a@hope.example", "b@hope.example"]
    result = await harness.dispatcher.apply(_step(ActionKind.NOTIFY_ADMIN), _run())
    assert result.outcome == StepOutcome.SUCCESS
    assert result.details == {"recipients_count": 2, "sent": 2}
    assert [m.to for m in harness.email.sent] == ["a@hope.example", "b@hope.example"]
    assert harness.email.sent[0].subject == DEFAULT_ADMIN_SUBJECT
    assert harness.email.sent[0].unsubscribe_url is None


async def test_notify_admin_one_raising_send_does_not_stop_the_rest(
    harness: EngineHarness,
) -> None:
    """A raising send to one admin is recorded; the others are still notified."""
    harness.admins.emails["tenant-a"] = ["a@hope.example", "b@hope.example", "c@hope.example"]
    harness.email.explode.add("b@hope.example")
    result = await harness.dispatcher.apply(_step(ActionKind.NOTIFY_ADMIN), _run())
    assert result.outcome == StepOutcome.FAILED
    assert result.details["sent"] == 2
    assert len(result.details["errors"]) == 1
    assert [m.to for m in harness.email.sent] == ["a@hope.example", "c@hope.example"]


async def test_notify_admin_without_admins_is_skipped(harness: EngineHarness) -> None:
    result = await harness.dispatcher.apply(_step(ActionKind.NOTIFY_ADMIN), _run())
    assert result.outcome == StepOutcome.SKIPPED
    assert result.reason == "no admin recipients"


async def test_ai_suggestion_writes_audit_record(harness: EngineHarness) -> None:
    result = await harness.dispatcher.apply(
        _step(ActionKind.AI_SUGGESTION, {"prompt": "Suggest a thank-you note"}), _run()
    )
    assert result.outcome == StepOutcome.SUCCESS
    entry = harness.audit.entries[0]
    assert entry.action == "AI_SUGGESTION"
    assert entry.entity_type == "Automation"
    assert entry.entity_id == "auto-1"
    assert entry.details["suggestion"] == "Suggest a thank-you note"
    assert entry.details["execution_id"] == "exec-1"


@pytest.mark.parametrize("action", [ActionKind.WAIT, ActionKind.CONDITION])
async def test_inert_steps_succeed_without_side_effects(
    harness: EngineHarness, action: ActionKind
) -> None:
    result = await harness.dispatcher.apply(_step(action, {"field": "x"}), _run())
    assert result.outcome == StepOutcome.SUCCESS
    assert harness.email.sent == []
    assert harness.audit.entries == []
