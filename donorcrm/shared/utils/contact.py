"""Donor contact helpers: phone normalization and unsubscribe links."""

import re
from urllib.parse import quote, urlencode

_NON_DIGITS = re.compile(r"\D")


def normalize_phone_number(phone: str, default_country_code: str = "40") -> str:
    """Return phone in international format (+<digits>) for SMS dispatch.

    Non-digits are stripped. A national number (leading 0) gets the default
    country code in place of the 0; anything else is treated as already
    carrying its country code.

    Args:
        phone: Raw phone as stored on the donor (spaces, dashes, +, etc.).
        default_country_code: Digits only, e.g. "40" for Romania.

    Returns:
        E.164-style string, e.g. "+40721000000". Empty input returns "".
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if not digits:
        return ""
    if digits.startswith("0"):
        return f"+{default_country_code}{digits[1:]}"
    return f"+{digits}"


def build_unsubscribe_url(base_url: str, donor_id: str, tenant_slug: str) -> str:
    """Deterministic unsubscribe link for a donor of a tenant."""
    base = (base_url or "").rstrip("/")
    query = urlencode({"did": donor_id})
    return f"{base}/unsubscribe/{quote(tenant_slug, safe='')}?{query}"
