"""
Tests for numbering, date and record helpers.
"""
from datetime import date, datetime, timezone

import pytest

from clinicdesk.core.dates import day_bounds_utc, days_in_range, parse_date, to_local_date
from clinicdesk.core.envelope import fail, ok
from clinicdesk.core.numbering import format_serial, next_prefixed_number, next_serial, parse_serial
from clinicdesk.core.records import split_payload
from clinicdesk.exceptions import ValidationFailedException
from clinicdesk.patients.models import Patient


def test_next_serial_ignores_non_numeric_values():
    assert next_serial([3, 7, "abc", 10]) == 11


def test_next_serial_starts_at_one():
    assert next_serial([]) == 1
    assert next_serial([None, "x"]) == 1


def test_prefixed_numbers():
    assert parse_serial("R0012", "R") == 12
    assert parse_serial("O-12", "O") is None
    assert format_serial(7, "R") == "R0007"
    assert next_prefixed_number(["O0001", "O0011", None, "legacy"], "O") == "O0012"


def test_parse_date():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date(None, required=False) is None
    with pytest.raises(ValidationFailedException) as exc_info:
        parse_date("05/03/2024")
    assert exc_info.value.detail == "Invalid date format. Use YYYY-MM-DD"


def test_day_bounds_follow_clinic_timezone():
    start, end = day_bounds_utc(date(2024, 3, 5))
    # Asia/Kolkata is UTC+05:30
    assert start == datetime(2024, 3, 4, 18, 30, tzinfo=timezone.utc)
    assert (end - start).total_seconds() == 86400


def test_local_date_of_late_utc_timestamp():
    assert to_local_date(datetime(2024, 3, 4, 20, 0, tzinfo=timezone.utc)) == date(2024, 3, 5)
    assert to_local_date(datetime(2024, 3, 4, 20, 0)) == date(2024, 3, 5)


def test_days_in_range_is_inclusive():
    assert days_in_range(date(2024, 1, 30), date(2024, 2, 1)) == [
        date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1)
    ]


def test_split_payload_routes_unknown_fields_to_extra():
    columns, extra = split_payload(Patient, {
        "id": "ignored",
        "name": "Asha",
        "bloodGroup": "O+",
        "extra": {"note": "vip"},
    })
    assert columns == {"name": "Asha"}
    assert extra == {"note": "vip", "bloodGroup": "O+"}


def test_envelope_helpers():
    assert ok([1], "done") == {"success": True, "data": [1], "message": "done", "error": None}
    assert fail("not_found", "gone") == {"success": False, "data": None, "message": "gone", "error": "not_found"}


def test_session_token_round_trip_and_tampering():
    from clinicdesk.core.security import create_session_token, decode_session_token

    token = create_session_token({"id": "s1", "is_admin": False})
    assert decode_session_token(token)["id"] == "s1"
    assert decode_session_token(token[:-2] + "xx") is None


def test_expired_session_token_is_rejected():
    from datetime import timedelta
    from clinicdesk.core.security import create_session_token, decode_session_token

    token = create_session_token({"id": "s1"}, lifetime=timedelta(seconds=-1))
    assert decode_session_token(token) is None


def test_page_metadata():
    from clinicdesk.core.pagination import PageResponse

    page = PageResponse.of(["a", "b"], total=5, page=2, size=2)
    assert page.pages == 3
    assert page.has_next and page.has_prev
    assert PageResponse.of([], total=0, page=1, size=20).pages == 0
