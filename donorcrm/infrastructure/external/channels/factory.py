"""Channel provider factory: picks email/SMS providers from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from donorcrm.infrastructure.external.channels.log_only import (
    LogOnlyEmailProvider,
    LogOnlySmsProvider,
)
from donorcrm.infrastructure.external.channels.sendgrid_provider import (
    SendGridEmailProvider,
)
from donorcrm.infrastructure.external.channels.twilio_provider import TwilioSmsProvider
from donorcrm.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from donorcrm.application.interfaces.services import IEmailProvider, ISmsProvider
    from donorcrm.core.config import Settings

logger = get_logger(__name__)


class ChannelProviderFactory:
    """Factory for the outbound email and SMS providers."""

    @classmethod
    def create_email_provider(
        cls,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> IEmailProvider:
        """Return SendGrid when EMAIL_PROVIDER=sendgrid, otherwise log-only.

        Raises:
            ValueError: If sendgrid is selected without an API key.
        """
        if settings.email_provider == "sendgrid":
            if settings.sendgrid_api_key is None:
                raise ValueError("SENDGRID_API_KEY is required for the sendgrid provider")
            logger.debug("Creating SendGridEmailProvider")
            return SendGridEmailProvider(
                settings.sendgrid_api_key.get_secret_value(),
                default_from_email=settings.sendgrid_from_email,
                default_from_name=settings.sendgrid_from_name,
                http_client=http_client,
                timeout=settings.provider_timeout_seconds,
            )
        return LogOnlyEmailProvider()

    @classmethod
    def create_sms_provider(
        cls,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> ISmsProvider:
        """Return Twilio when SMS_PROVIDER=twilio, otherwise log-only.

        Raises:
            ValueError: If twilio is selected without full credentials.
        """
        if settings.sms_provider == "twilio":
            if not (
                settings.twilio_account_sid
                and settings.twilio_auth_token
                and settings.twilio_phone_number
            ):
                raise ValueError("Twilio credentials are required for the twilio provider")
            logger.debug("Creating TwilioSmsProvider")
            return TwilioSmsProvider(
                settings.twilio_account_sid,
                settings.twilio_auth_token.get_secret_value(),
                settings.twilio_phone_number,
                http_client=http_client,
                timeout=settings.provider_timeout_seconds,
            )
        return LogOnlySmsProvider()
