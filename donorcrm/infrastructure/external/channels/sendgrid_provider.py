"""SendGrid email provider over the v3 Mail Send REST API (httpx)."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx

from donorcrm.application.dtos.channel import EmailMessage, SendResult
from donorcrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


def unsubscribe_footer(unsubscribe_url: str) -> str:
    """HTML footer appended to donor-facing emails."""
    return (
        '<br/><hr style="margin-top:30px;border:none;border-top:1px solid #eee"/>'
        '<p style="font-size:12px;color:#999;text-align:center">'
        "You received this because you subscribed to updates. "
        f'<a href="{unsubscribe_url}">Unsubscribe</a></p>'
    )


class SendGridEmailProvider:
    """IEmailProvider implementation for SendGrid.

    Provider rejections and transport errors are returned as
    SendResult(success=False); they never raise.
    """

    def __init__(
        self,
        api_key: str,
        *,
        default_from_email: str = "noreply@ngohub.ro",
        default_from_name: str = "NGO HUB",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        api_url: str = SENDGRID_API_URL,
    ) -> None:
        self._api_key = api_key
        self._default_from_email = default_from_email
        self._default_from_name = default_from_name
        self._shared_http = http_client
        self._timeout = timeout
        self._api_url = api_url

    @asynccontextmanager
    async def _http_cm(self):
        """Yield shared HTTP client or a short-lived one (connection reuse when shared)."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    def _build_payload(self, message: EmailMessage) -> dict[str, Any]:
        html = message.html
        if message.unsubscribe_url:
            html += unsubscribe_footer(message.unsubscribe_url)
        return {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {
                "email": message.from_address or self._default_from_email,
                "name": message.from_name or self._default_from_name,
            },
            "subject": message.subject,
            "content": [{"type": "text/html", "value": html}],
            "tracking_settings": {
                "open_tracking": {"enable": True},
                "click_tracking": {"enable": True},
            },
        }

    async def send(self, message: EmailMessage) -> SendResult:
        """POST one message to SendGrid; 202 carries the id in X-Message-Id."""
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    self._api_url,
                    json=self._build_payload(message),
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    timeout=self._timeout,
                )
        except httpx.HTTPError as e:
            logger.error("SendGrid request failed: %s", e)
            return SendResult(success=False, error=str(e) or type(e).__name__)
        if response.is_success:
            return SendResult(success=True, message_id=response.headers.get("x-message-id"))
        error = _first_error(response)
        logger.error("SendGrid rejected message (status=%s): %s", response.status_code, error)
        return SendResult(success=False, error=error)


def _first_error(response: httpx.Response) -> str:
    try:
        errors = response.json().get("errors") or []
    except ValueError:
        errors = []
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return str(errors[0]["message"])
    return f"SendGrid returned HTTP {response.status_code}"
