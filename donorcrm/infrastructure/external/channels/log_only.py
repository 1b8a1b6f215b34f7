"""Log-only channel providers: log instead of sending.

Default when no SendGrid/Twilio credentials are configured (development,
tests, staging). Every send reports success with a synthetic message id.
"""

from __future__ import annotations

import logging

from donorcrm.application.dtos.channel import EmailMessage, SendResult, SmsMessage
from donorcrm.shared.telemetry.logging import get_logger
from donorcrm.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


class LogOnlyEmailProvider:
    """IEmailProvider implementation that logs instead of sending email."""

    async def send(self, message: EmailMessage) -> SendResult:
        """Log the email; nothing is delivered."""
        logger.info(
            "Email: would send to %s (subject=%r, from=%s)",
            message.to,
            (message.subject or "")[:80],
            message.from_address or "<default>",
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Email html (first 500 chars): %s", (message.html or "")[:500])
        return SendResult(success=True, message_id=f"log-{generate_cuid()}")


class LogOnlySmsProvider:
    """ISmsProvider implementation that logs instead of sending SMS."""

    async def send(self, message: SmsMessage) -> SendResult:
        """Log the SMS; nothing is delivered."""
        logger.info(
            "SMS: would send to %s (sender=%s, %d chars)",
            message.to,
            message.sender_id or "<default>",
            len(message.body),
        )
        logger.debug("SMS body: %s", message.body)
        return SendResult(success=True, message_id=f"log-{generate_cuid()}")
