"""Agency revenue share - tiered cut of a talent's monthly platform income"""

from decimal import Decimal
from typing import Dict, Hashable, Iterable, Mapping, Tuple, Union

from agency_ledger.domain.bucketing import bucket_by
from agency_ledger.domain.models import Income
from agency_ledger.utils.date_utils import month_key

TIER_THRESHOLD = Decimal("1000")
HIGH_INCOME_RATE = Decimal("0.20")
LOW_INCOME_RATE = Decimal("0.45")

ZERO = Decimal("0")

MonthKey = Union[str, Tuple[str, str]]


def agency_rate(monthly_income_usd: Decimal) -> Decimal:
    """
    Rate applied to one talent-month of income.

    Tiers:
    - income > $1000:  20% (threshold is strict, exactly $1000 stays in the low tier)
    - otherwise:       45%
    """
    return HIGH_INCOME_RATE if monthly_income_usd > TIER_THRESHOLD else LOW_INCOME_RATE


def agency_share(monthly_income_usd: Decimal) -> Decimal:
    """
    Agency cut for a single calendar month of income.

    Must never be called on a total spanning more than one month: the tier
    depends on the monthly figure. Wider windows go through
    monthly_income_totals -> monthly_agency_shares -> sum_shares.
    """
    return monthly_income_usd * agency_rate(monthly_income_usd)


def monthly_income_totals(incomes: Iterable[Income], per_talent: bool = False) -> Dict[MonthKey, Decimal]:
    """
    Step 1: total USD income per accounting month.

    Keys are "YYYY-MM", or (talent_id, "YYYY-MM") when per_talent is set.
    """
    if per_talent:
        buckets = bucket_by(incomes, lambda i: (i.talent_id, month_key(i.accounting_month)))
    else:
        buckets = bucket_by(incomes, lambda i: month_key(i.accounting_month))
    return {key: sum((i.actual_value_usd for i in items), ZERO) for key, items in buckets.items()}


def monthly_agency_shares(totals: Mapping[Hashable, Decimal]) -> Dict[Hashable, Decimal]:
    """Step 2: apply the tier schedule to each monthly total independently"""
    return {key: agency_share(total) for key, total in totals.items()}


def sum_shares(shares: Mapping[Hashable, Decimal]) -> Decimal:
    """Step 3: sum already-tiered monthly shares"""
    return sum(shares.values(), ZERO)


def total_agency_share(incomes: Iterable[Income], per_talent: bool = False) -> Decimal:
    """Agency share over any window, always tiered month by month"""
    return sum_shares(monthly_agency_shares(monthly_income_totals(incomes, per_talent=per_talent)))
