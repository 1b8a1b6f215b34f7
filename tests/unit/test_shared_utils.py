"""Tests for shared helpers: phone normalization, unsubscribe links, UTC, ids."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from donorcrm.middleware.request_id import resolve_request_id
from donorcrm.shared.utils import (
    build_unsubscribe_url,
    ensure_utc,
    generate_cuid,
    normalize_phone_number,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0721 000 000", "+40721000000"),
        ("0721-000-000", "+40721000000"),
        ("+40 721 000 000", "+40721000000"),
        ("40721000000", "+40721000000"),
        ("+1 (555) 000-1111", "+15550001111"),
        ("", ""),
        ("n/a", ""),
    ],
)
def test_normalize_phone_number(raw: str, expected: str) -> None:
    assert normalize_phone_number(raw) == expected


def test_normalize_phone_number_custom_country_code() -> None:
    assert normalize_phone_number("0612345678", "33") == "+33612345678"


def test_build_unsubscribe_url_is_deterministic() -> None:
    url = build_unsubscribe_url("https://crm.example/", "d 1", "hope ngo")
    assert url == "https://crm.example/unsubscribe/hope%20ngo?did=d+1"
    assert url == build_unsubscribe_url("https://crm.example", "d 1", "hope ngo")


def test_ensure_utc() -> None:
    naive = datetime(2026, 1, 1, 12, 0)
    assert ensure_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    bucharest = datetime(2026, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(bucharest).hour == 12
    assert ensure_utc(None) is None


def test_generate_cuid_is_unique_string() -> None:
    ids = {generate_cuid() for _ in range(50)}
    assert len(ids) == 50
    assert all(isinstance(i, str) and i for i in ids)


def test_resolve_request_id_keeps_safe_client_value() -> None:
    assert resolve_request_id("abc-123_X") == "abc-123_X"


@pytest.mark.parametrize("raw", [None, "", "bad id\nwith newline", "x" * 65])
def test_resolve_request_id_replaces_unsafe_value(raw: str | None) -> None:
    resolved = resolve_request_id(raw)
    assert resolved != raw
    assert resolved
