"""Outbound channel providers (email, SMS)."""

from donorcrm.infrastructure.external.channels.factory import ChannelProviderFactory
from donorcrm.infrastructure.external.channels.log_only import (
    LogOnlyEmailProvider,
    LogOnlySmsProvider,
)
from donorcrm.infrastructure.external.channels.sendgrid_provider import (
    SendGridEmailProvider,
)
from donorcrm.infrastructure.external.channels.twilio_provider import TwilioSmsProvider

__all__ = [
    "ChannelProviderFactory",
    "LogOnlyEmailProvider",
    "LogOnlySmsProvider",
    "SendGridEmailProvider",
    "TwilioSmsProvider",
]
