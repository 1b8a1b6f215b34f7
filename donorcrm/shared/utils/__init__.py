"""Shared utilities: datetime, generators, contact helpers."""

from donorcrm.shared.utils.contact import build_unsubscribe_url, normalize_phone_number
from donorcrm.shared.utils.datetime import ensure_utc, utc_now
from donorcrm.shared.utils.generators import generate_cuid

__all__ = [
    "build_unsubscribe_url",
    "generate_cuid",
    "normalize_phone_number",
    "utc_now",
    "ensure_utc",
]
