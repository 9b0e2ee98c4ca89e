"""Unit tests for budget period resolution"""

import pytest
from datetime import date, datetime
from agency_ledger.domain.budget_period import BudgetPeriod, resolve_budget_period


@pytest.mark.parametrize(
    "contract, now, start, end",
    [
        # Anniversary still ahead this year: previous period
        (date(2024, 3, 15), date(2025, 2, 1), date(2024, 3, 15), date(2025, 3, 15)),
        # Anniversary passed: current period
        (date(2024, 3, 15), date(2025, 4, 1), date(2025, 3, 15), date(2026, 3, 15)),
        # Anniversary day itself starts the new period
        (date(2024, 3, 15), date(2025, 3, 15), date(2025, 3, 15), date(2026, 3, 15)),
        # Day before the anniversary still belongs to the old period
        (date(2024, 3, 15), date(2025, 3, 14), date(2024, 3, 15), date(2025, 3, 15)),
        # Contract signed this year, before now
        (date(2025, 1, 10), date(2025, 6, 20), date(2025, 1, 10), date(2026, 1, 10)),
    ],
)
def test_resolve_budget_period(contract, now, start, end):
    period = resolve_budget_period(contract, now)

    assert period == BudgetPeriod(start=start, end=end)
    assert period.contains(now)


def test_leap_day_contract_clamps_in_common_years():
    """Test Feb 29 falls back to Feb 28 without raising"""
    period = resolve_budget_period(date(2024, 2, 29), date(2025, 6, 1))

    assert period.start == date(2025, 2, 28)
    assert period.end == date(2026, 2, 28)


def test_leap_day_contract_end_reanchors_in_leap_year():
    period = resolve_budget_period(date(2024, 2, 29), date(2027, 6, 1))

    assert period.start == date(2027, 2, 28)
    assert period.end == date(2028, 2, 29)


def test_month_end_contract():
    period = resolve_budget_period(date(2024, 1, 31), date(2025, 6, 20))

    assert period == BudgetPeriod(start=date(2025, 1, 31), end=date(2026, 1, 31))


def test_period_is_half_open():
    period = BudgetPeriod(start=date(2025, 3, 15), end=date(2026, 3, 15))

    assert period.contains(date(2025, 3, 15))
    assert period.contains(date(2026, 3, 14))
    assert not period.contains(date(2026, 3, 15))
    assert not period.contains(date(2025, 3, 14))


def test_datetime_now_is_accepted():
    period = resolve_budget_period(datetime(2024, 3, 15, 9, 0), datetime(2025, 4, 1, 18, 45))

    assert period.start == date(2025, 3, 15)
    assert period.contains(datetime(2025, 12, 31, 23, 59))
