"""Shared utilities: enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from donorcrm.shared.enums import StepOutcome, UserRole
from donorcrm.shared.utils import (
    build_unsubscribe_url,
    ensure_utc,
    generate_cuid,
    normalize_phone_number,
    utc_now,
)

__all__ = [
    "StepOutcome",
    "UserRole",
    "build_unsubscribe_url",
    "generate_cuid",
    "normalize_phone_number",
    "utc_now",
    "ensure_utc",
]
