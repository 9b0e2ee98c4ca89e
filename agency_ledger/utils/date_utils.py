"""Date manipulation utilities"""

import calendar
from datetime import date, datetime


def as_date(value: date) -> date:
    """Reduce a datetime to its calendar date; plain dates pass through"""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_key(value: date) -> str:
    """Zero-padded YYYY-MM key, so string order equals chronological order"""
    return f"{value.year:04d}-{value.month:02d}"


def year_key(value: date) -> str:
    return f"{value.year:04d}"


def day_key(value: date) -> str:
    return as_date(value).isoformat()


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, degrading an overflowing day to the last day of the month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def month_start(value: date) -> date:
    return date(value.year, value.month, 1)


def next_month_start(value: date) -> date:
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def year_start(value: date) -> date:
    return date(value.year, 1, 1)
