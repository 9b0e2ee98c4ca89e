"""Unit tests for the tiered agency revenue share"""

from datetime import date
from decimal import Decimal
from agency_ledger.domain.models import Income
from agency_ledger.domain.revenue_share import (
    HIGH_INCOME_RATE,
    LOW_INCOME_RATE,
    agency_rate,
    agency_share,
    monthly_agency_shares,
    monthly_income_totals,
    sum_shares,
    total_agency_share,
)


def _income(income_id: str, talent_id: str, month: date, usd: str, platform: str = "Twitch") -> Income:
    return Income(
        id=income_id,
        talent_id=talent_id,
        accounting_month=month,
        platform=platform,
        actual_value_usd=Decimal(usd),
    )


def test_tier_boundary_is_strict():
    """Test exactly $1000 stays in the low tier"""
    assert agency_rate(Decimal("1000")) == LOW_INCOME_RATE
    assert agency_rate(Decimal("1000.01")) == HIGH_INCOME_RATE
    assert agency_share(Decimal("1000")) == Decimal("450")
    assert agency_share(Decimal("1000.01")) == Decimal("200.002")


def test_zero_income_has_zero_share():
    assert agency_share(Decimal("0")) == Decimal("0")


def test_tiering_is_applied_per_month_before_summing():
    """Test $500 in January and $1500 in February give 225 + 300, not 20% of 2000"""
    incomes = [
        _income("1", "t1", date(2025, 1, 1), "500"),
        _income("2", "t1", date(2025, 2, 1), "1500"),
    ]

    totals = monthly_income_totals(incomes)
    shares = monthly_agency_shares(totals)

    assert totals == {"2025-01": Decimal("500"), "2025-02": Decimal("1500")}
    assert shares == {"2025-01": Decimal("225"), "2025-02": Decimal("300")}
    assert sum_shares(shares) == Decimal("525")
    assert total_agency_share(incomes) == Decimal("525")


def test_same_month_incomes_are_combined_before_tiering():
    """Test two platform payouts in one month share a single tier"""
    incomes = [
        _income("1", "t1", date(2025, 3, 1), "600", "Twitch"),
        _income("2", "t1", date(2025, 3, 1), "600", "YouTube"),
    ]

    assert total_agency_share(incomes) == Decimal("240")


def test_per_talent_totals_tier_each_talent_separately():
    """Test talent scope keys by (talent, month)"""
    incomes = [
        _income("1", "t1", date(2025, 6, 1), "1200"),
        _income("2", "t2", date(2025, 6, 1), "300"),
    ]

    totals = monthly_income_totals(incomes, per_talent=True)

    assert totals == {("t1", "2025-06"): Decimal("1200"), ("t2", "2025-06"): Decimal("300")}
    assert total_agency_share(incomes, per_talent=True) == Decimal("375")
    # Global scope tiers the combined 1500 at 20%
    assert total_agency_share(incomes) == Decimal("300")


def test_empty_income_has_zero_share():
    assert total_agency_share([]) == Decimal("0")
