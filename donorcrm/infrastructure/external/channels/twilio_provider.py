"""Twilio SMS provider over the Messages REST API (httpx)."""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx

from donorcrm.application.dtos.channel import SendResult, SmsMessage
from donorcrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"
STOP_FOOTER = "\n\nReply STOP to unsubscribe."


def with_stop_instructions(body: str) -> str:
    """Append opt-out instructions unless the body already ends with STOP."""
    return body if body.endswith("STOP") else f"{body}{STOP_FOOTER}"


class TwilioSmsProvider:
    """ISmsProvider implementation for Twilio (form POST with basic auth)."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        api_base: str = TWILIO_API_BASE,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._shared_http = http_client
        self._timeout = timeout
        self._url = f"{api_base}/Accounts/{account_sid}/Messages.json"

    @asynccontextmanager
    async def _http_cm(self):
        """Yield shared HTTP client or a short-lived one (connection reuse when shared)."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def send(self, message: SmsMessage) -> SendResult:
        """Create one message; the tenant sender id overrides the account number."""
        data = {
            "To": message.to,
            "From": message.sender_id or self._from_number,
            "Body": with_stop_instructions(message.body),
        }
        try:
            async with self._http_cm() as client:
                response = await client.post(
                    self._url,
                    data=data,
                    auth=(self._account_sid, self._auth_token),
                    timeout=self._timeout,
                )
        except httpx.HTTPError as e:
            logger.error("Twilio request failed: %s", e)
            return SendResult(success=False, error=str(e) or type(e).__name__)
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.is_success:
            return SendResult(success=True, message_id=payload.get("sid"))
        error = payload.get("message") or f"Twilio returned HTTP {response.status_code}"
        logger.error("Twilio rejected message (status=%s): %s", response.status_code, error)
        return SendResult(success=False, error=str(error))
