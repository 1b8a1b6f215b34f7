"""Tests for SendGrid / Twilio / log-only providers and the provider factory."""

import json

import httpx
import pytest

from donorcrm.application.dtos.channel import EmailMessage, SmsMessage
from donorcrm.core.config import Settings
from donorcrm.infrastructure.external.channels import ChannelProviderFactory
from donorcrm.infrastructure.external.channels.log_only import (
    LogOnlyEmailProvider,
    LogOnlySmsProvider,
)
from donorcrm.infrastructure.external.channels.sendgrid_provider import (
    SENDGRID_API_URL,
    SendGridEmailProvider,
)
from donorcrm.infrastructure.external.channels.twilio_provider import (
    STOP_FOOTER,
    TwilioSmsProvider,
    with_stop_instructions,
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_sendgrid_posts_payload_and_reads_message_id() -> None:
    """202 from SendGrid is success; the id comes from X-Message-Id."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202, headers={"X-Message-Id": "sg-123"})

    async with _client(handler) as http:
        provider = SendGridEmailProvider("key-1", http_client=http)
        result = await provider.send(
            EmailMessage(
                to="ana@example.org",
                subject="Thanks",
                html="<p>Hi</p>",
                from_address="hello@hope.example",
                from_name="Hope",
                unsubscribe_url="https://crm.example/unsubscribe/hope?did=d1",
            )
        )

    assert result.success
    assert result.message_id == "sg-123"
    request = captured[0]
    assert str(request.url) == SENDGRID_API_URL
    assert request.headers["Authorization"] == "Bearer key-1"
    body = json.loads(request.content)
    assert body["personalizations"] == [{"to": [{"email": "ana@example.org"}]}]
    assert body["from"] == {"email": "hello@hope.example", "name": "Hope"}
    html = body["content"][0]["value"]
    assert html.startswith("<p>Hi</p>")
    assert "https://crm.example/unsubscribe/hope?did=d1" in html


async def test_sendgrid_uses_default_sender_without_footer_for_admin_mail() -> None:
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        return httpx.Response(202)

    async with _client(handler) as http:
        provider = SendGridEmailProvider(
            "k", default_from_email="noreply@crm.example", http_client=http
        )
        await provider.send(EmailMessage(to="admin@hope.example", subject="S", html="<p>x</p>"))

    assert captured[0]["from"]["email"] == "noreply@crm.example"
    assert captured[0]["content"][0]["value"] == "<p>x</p>"


async def test_sendgrid_rejection_returns_failed_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"errors": [{"message": "Invalid email"}]})

    async with _client(handler) as http:
        result = await SendGridEmailProvider("k", http_client=http).send(
            EmailMessage(to="bad", subject="S", html="h")
        )
    assert not result.success
    assert result.error == "Invalid email"


async def test_sendgrid_transport_error_does_not_raise() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as http:
        result = await SendGridEmailProvider("k", http_client=http).send(
            EmailMessage(to="a@b.c", subject="S", html="h")
        )
    assert not result.success
    assert result.error == "connection refused"


async def test_twilio_posts_form_with_sender_id() -> None:
    """Tenant sender id overrides the account number; body gets STOP footer."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, json={"sid": "SM123"})

    async with _client(handler) as http:
        provider = TwilioSmsProvider("AC1", "token", "+15550001111", http_client=http)
        result = await provider.send(SmsMessage(to="+40721000000", body="Thanks", sender_id="HOPE"))

    assert result.success
    assert result.message_id == "SM123"
    request = captured[0]
    assert request.url.path == "/2010-04-01/Accounts/AC1/Messages.json"
    assert request.headers["Authorization"].startswith("Basic ")
    form = dict(httpx.QueryParams(request.content.decode()))
    assert form["To"] == "+40721000000"
    assert form["From"] == "HOPE"
    assert form["Body"] == f"Thanks{STOP_FOOTER}"


async def test_twilio_error_message_is_returned() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})

    async with _client(handler) as http:
        provider = TwilioSmsProvider("AC1", "token", "+15550001111", http_client=http)
        result = await provider.send(SmsMessage(to="+400", body="x"))

    assert not result.success
    assert result.error == "Invalid 'To' Phone Number"


def test_stop_instructions_not_duplicated() -> None:
    assert with_stop_instructions("Reply STOP") == "Reply STOP"
    assert with_stop_instructions("Hi").endswith("Reply STOP to unsubscribe.")


async def test_log_only_providers_report_success() -> None:
    email = await LogOnlyEmailProvider().send(EmailMessage(to="a@b.c", subject="S", html="h"))
    sms = await LogOnlySmsProvider().send(SmsMessage(to="+40721000000", body="x"))
    assert email.success and email.message_id.startswith("log-")
    assert sms.success and sms.message_id.startswith("log-")


def test_factory_defaults_to_log_only() -> None:
    settings = Settings(_env_file=None)
    assert isinstance(ChannelProviderFactory.create_email_provider(settings), LogOnlyEmailProvider)
    assert isinstance(ChannelProviderFactory.create_sms_provider(settings), LogOnlySmsProvider)


def test_factory_builds_configured_providers() -> None:
    settings = Settings(
        _env_file=None,
        email_provider="sendgrid",
        sendgrid_api_key="sg-key",
        sms_provider="twilio",
        twilio_account_sid="AC1",
        twilio_auth_token="tok",
        twilio_phone_number="+15550001111",
    )
    assert isinstance(
        ChannelProviderFactory.create_email_provider(settings), SendGridEmailProvider
    )
    assert isinstance(ChannelProviderFactory.create_sms_provider(settings), TwilioSmsProvider)


@pytest.mark.parametrize(
    "overrides",
    [
        {"email_provider": "sendgrid"},
        {"sms_provider": "twilio", "twilio_account_sid": "AC1"},
        {"email_provider": "mailgun"},
    ],
)
def test_settings_reject_incomplete_provider_config(overrides: dict) -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, **overrides)
