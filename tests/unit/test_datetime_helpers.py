"""Unit tests for datetime helpers (bodymind/utils/datetime_helpers.py)"""
import pytest
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from bodymind.utils.datetime_helpers import (
    UTC,
    get_user_timezone,
    now_utc,
    to_utc,
    local_date,
    day_bounds_utc,
    hours_until_end_of_day,
    parse_user_date,
    ensure_utc,
)


# ============================================================================
# Timezone Resolution Tests
# ============================================================================

def test_get_user_timezone_valid():
    """Test a valid zone name resolves"""
    assert get_user_timezone("Europe/Stockholm") == ZoneInfo("Europe/Stockholm")


def test_get_user_timezone_falls_back():
    """Test missing or invalid names fall back to the default zone"""
    assert get_user_timezone(None) == ZoneInfo("UTC")
    assert get_user_timezone("Invalid/Zone") == ZoneInfo("UTC")


def test_now_utc_is_aware():
    """Test now_utc returns an aware UTC datetime"""
    assert now_utc().utcoffset().total_seconds() == 0


# ============================================================================
# Conversion Tests
# ============================================================================

def test_to_utc_naive_requires_tz():
    """Test naive datetimes need an explicit zone"""
    with pytest.raises(ValueError):
        to_utc(datetime(2025, 1, 15, 8, 0))


def test_to_utc_naive_with_tz(stockholm):
    """Test naive local time converts using the given zone"""
    result = to_utc(datetime(2025, 1, 15, 8, 0), stockholm)
    assert result == datetime(2025, 1, 15, 7, 0, tzinfo=timezone.utc)


def test_local_date_crosses_midnight(stockholm):
    """Test the local calendar day can differ from the UTC day"""
    late_utc = datetime(2025, 1, 15, 23, 30, tzinfo=timezone.utc)

    assert local_date(late_utc, ZoneInfo("UTC")) == date(2025, 1, 15)
    assert local_date(late_utc, stockholm) == date(2025, 1, 16)
    assert local_date(late_utc, ZoneInfo("America/New_York")) == date(2025, 1, 15)


def test_day_bounds_utc(stockholm):
    """Test a local day maps to a UTC half-open interval"""
    start, end = day_bounds_utc(date(2025, 1, 15), stockholm)

    assert start == datetime(2025, 1, 14, 23, 0, tzinfo=timezone.utc)
    assert end == datetime(2025, 1, 15, 23, 0, tzinfo=timezone.utc)


# ============================================================================
# End of Day Tests
# ============================================================================

def test_hours_until_end_of_day(utc):
    """Test hours to local midnight, one decimal"""
    now = datetime(2025, 1, 15, 21, 45, tzinfo=timezone.utc)
    assert hours_until_end_of_day(now, utc) == 2.2


def test_hours_until_end_of_day_dst_spring_forward(stockholm):
    """Test a 23-hour local day is counted correctly"""
    # Clocks jump from 02:00 to 03:00 on 2025-03-30 in Stockholm
    just_after_midnight = datetime(2025, 3, 29, 23, 0, tzinfo=timezone.utc)
    assert hours_until_end_of_day(just_after_midnight, stockholm) == 23.0


def test_hours_until_end_of_day_never_negative(utc):
    """Test the countdown bottoms out at zero"""
    assert hours_until_end_of_day(datetime(2025, 1, 15, 23, 59, 59, tzinfo=timezone.utc), utc) == 0.0


# ============================================================================
# Parsing and Iteration Tests
# ============================================================================

@pytest.mark.parametrize("text", ["2025-01-15", "01/15/2025"])
def test_parse_user_date_formats(text):
    """Test supported date formats"""
    assert parse_user_date(text) == date(2025, 1, 15)


def test_parse_user_date_invalid():
    """Test unrecognized formats raise"""
    with pytest.raises(ValueError):
        parse_user_date("15th of January")


def test_ensure_utc():
    """Test naive datetimes are assumed UTC and aware ones converted"""
    assert ensure_utc(None) is None
    assert ensure_utc(datetime(2025, 1, 15, 8, 0)).tzinfo == UTC
    aware = datetime(2025, 1, 15, 8, 0, tzinfo=ZoneInfo("Europe/Stockholm"))
    assert ensure_utc(aware).hour == 7
