"""Unit tests for date helpers"""

from datetime import date, datetime
from agency_ledger.utils.date_utils import (
    as_date,
    clamped_date,
    day_key,
    month_key,
    next_month_start,
    year_key,
)


def test_month_key_is_zero_padded():
    """Test keys sort chronologically as strings"""
    assert month_key(date(2025, 3, 9)) == "2025-03"
    assert sorted([month_key(date(2025, 10, 1)), month_key(date(2025, 9, 30))]) == ["2025-09", "2025-10"]


def test_year_and_day_keys():
    assert year_key(date(2025, 3, 9)) == "2025"
    assert day_key(datetime(2025, 3, 9, 23, 59)) == "2025-03-09"


def test_as_date_drops_time_of_day():
    assert as_date(datetime(2025, 6, 20, 14, 30)) == date(2025, 6, 20)
    assert as_date(date(2025, 6, 20)) == date(2025, 6, 20)


def test_clamped_date_degrades_overflowing_day():
    """Test Feb 29 and the 31st fall back to the month's last day"""
    assert clamped_date(2025, 2, 29) == date(2025, 2, 28)
    assert clamped_date(2024, 2, 29) == date(2024, 2, 29)
    assert clamped_date(2025, 4, 31) == date(2025, 4, 30)
    assert clamped_date(2025, 5, 15) == date(2025, 5, 15)


def test_next_month_start_wraps_year():
    assert next_month_start(date(2025, 12, 31)) == date(2026, 1, 1)
    assert next_month_start(date(2025, 6, 20)) == date(2025, 7, 1)
