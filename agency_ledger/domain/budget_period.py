"""Budget period resolution - rolling 12-month window anchored to the contract anniversary"""

from dataclasses import dataclass
from datetime import date

from agency_ledger.utils.date_utils import as_date, clamped_date


@dataclass(frozen=True)
class BudgetPeriod:
    """Half-open window [start, end)"""

    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= as_date(value) < self.end


def resolve_budget_period(contract_date: date, now: date) -> BudgetPeriod:
    """
    Most recent anniversary-to-anniversary window containing now.

    The candidate start takes now's year with the contract's month and day;
    if that lies in the future it moves back one year. Contract days that
    overflow the target month (Feb 29 in a non-leap year, the 31st of a
    30-day month) fall back to the last day of that month.

    Example:
        contract 2024-03-15, now 2025-02-01 -> [2024-03-15, 2025-03-15)
        contract 2024-03-15, now 2025-04-01 -> [2025-03-15, 2026-03-15)
    """
    today = as_date(now)
    contract = as_date(contract_date)

    start = clamped_date(today.year, contract.month, contract.day)
    if start > today:
        start = clamped_date(today.year - 1, contract.month, contract.day)

    # Re-anchor on the contract day so a clamped start does not shrink the end
    end = clamped_date(start.year + 1, contract.month, contract.day)
    return BudgetPeriod(start=start, end=end)
