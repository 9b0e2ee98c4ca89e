"""Budget tracking - per-talent spend against the rolling annual budget"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Callable, Dict, List, Optional

from agency_ledger.domain.aggregation import (
    RECENT_EXPENSES_LIMIT,
    LedgerWindow,
    monthly_breakdown,
    recent_expenses,
    recent_incomes,
    summarize,
    total,
    yearly_trend,
)
from agency_ledger.domain.bucketing import bucket_by_day, sorted_keys
from agency_ledger.domain.budget_period import resolve_budget_period
from agency_ledger.domain.exceptions import ManagerNotFoundError, TalentNotFoundError
from agency_ledger.domain.models import LedgerSnapshot, Talent
from agency_ledger.domain.revenue_share import ZERO
from agency_ledger.utils.date_utils import as_date, month_key, month_start, next_month_start, year_key, year_start

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
Q2 = Decimal("0.01")


def used_percent(spent: Decimal, annual_budget: Decimal) -> Decimal:
    """
    Share of the budget consumed, in percent.

    Unbounded above 100 (over budget); callers clamp for display.
    A zero budget reports 0 instead of dividing by zero.
    """
    if annual_budget == ZERO:
        return ZERO
    ratio = spent / annual_budget * HUNDRED
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, ratio.adjusted() + 3)
        return ratio.quantize(Q2, rounding=ROUND_HALF_UP)


def get_talent(snapshot: LedgerSnapshot, talent_id: str) -> Talent:
    talent = snapshot.talent(talent_id)
    if talent is None:
        raise TalentNotFoundError(f"Talent {talent_id} not found")
    return talent


def talent_window(talent: Talent, snapshot: LedgerSnapshot) -> LedgerWindow:
    """
    Everything that counts against one talent's budget.

    Salary expenses are excluded. Payments are attributed to the talent
    through the expense they settle.
    """
    expenses = tuple(e for e in snapshot.expenses if e.talent_id == talent.id and not e.is_salary)
    expense_ids = {e.id for e in expenses}
    payments = tuple(p for p in snapshot.payments if p.expense_id is not None and p.expense_id in expense_ids)
    incomes = tuple(i for i in snapshot.incomes if i.talent_id == talent.id)
    return LedgerWindow(expenses=expenses, payments=payments, incomes=incomes)


def restrict(window: LedgerWindow, in_window: Callable[[date], bool]) -> LedgerWindow:
    return LedgerWindow(
        expenses=tuple(e for e in window.expenses if in_window(as_date(e.date))),
        payments=tuple(p for p in window.payments if in_window(as_date(p.date))),
        incomes=tuple(i for i in window.incomes if in_window(as_date(i.accounting_month))),
    )


def _rollup_with_breakdown(window: LedgerWindow, snapshot: LedgerSnapshot) -> Dict[str, Any]:
    # The window holds a single talent's income, so GLOBAL tiering is per talent-month
    breakdown = monthly_breakdown(window)
    share = sum((m["agencyShare"] for m in breakdown), ZERO)
    return {**summarize(window, snapshot, agency_share=share), "monthlyBreakdown": breakdown}


def build_talent_budget(
    talent: Talent,
    snapshot: LedgerSnapshot,
    now: date,
    recent_limit: int = RECENT_EXPENSES_LIMIT,
) -> Dict[str, Any]:
    """
    Budget status and period rollups for one talent.

    spent counts non-salary expenses dated inside the current budget period;
    remaining may go negative. netFlow is the period's agency share minus
    that spend.
    """
    today = as_date(now)
    period = resolve_budget_period(talent.contract_date, today)
    window = talent_window(talent, snapshot)

    period_window = restrict(window, period.contains)
    month_window = restrict(window, lambda d: month_start(today) <= d < next_month_start(today))
    year_window = restrict(window, lambda d: year_start(today) <= d < date(today.year + 1, 1, 1))

    spent = total(period_window.expenses, lambda e: e.amount)
    period_rollup = _rollup_with_breakdown(period_window, snapshot)
    share = period_rollup["agencyShare"]

    days = bucket_by_day(month_window.expenses, lambda e: e.date)
    monthly = {
        "month": month_key(today),
        **summarize(month_window, snapshot),
        "dailyTrend": [{"date": day, "amount": total(days[day], lambda e: e.amount)} for day in sorted_keys(days)],
    }
    annual = {"year": year_key(today), **_rollup_with_breakdown(year_window, snapshot)}
    all_time = {
        **summarize(window, snapshot),
        "yearlyExpenseTrend": yearly_trend(window.expenses, lambda e: e.date, lambda e: e.amount),
        "yearlyIncomeTrend": yearly_trend(window.incomes, lambda i: i.accounting_month, lambda i: i.actual_value_usd),
    }

    budget = {
        "annual": talent.annual_budget,
        "spent": spent,
        "remaining": talent.annual_budget - spent,
        "usedPercent": used_percent(spent, talent.annual_budget),
        "overBudget": spent > talent.annual_budget,
        "periodStart": period.start,
        "periodEnd": period.end,
    }

    logger.debug(
        "Built budget talent_id=%s period=%s..%s spent=%s",
        talent.id,
        period.start.isoformat(),
        period.end.isoformat(),
        spent,
    )

    return {
        "talent": {
            "id": talent.id,
            "name": talent.name,
            "contractDate": talent.contract_date,
            "annualBudget": talent.annual_budget,
            "managerId": talent.manager_id,
        },
        "budget": budget,
        "period": period_rollup,
        "monthly": monthly,
        "annual": annual,
        "allTime": all_time,
        "agencyShare": share,
        "netFlow": share - spent,
        "recentExpenses": recent_expenses(snapshot, window.expenses, recent_limit),
        "recentIncomes": recent_incomes(snapshot, window.incomes, recent_limit),
    }


def _sum_field(rows: List[Dict[str, Any]], path: Callable[[Dict[str, Any]], Decimal]) -> Decimal:
    return sum((path(row) for row in rows), ZERO)


def build_manager_budget(
    snapshot: LedgerSnapshot,
    now: date,
    manager_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Budgets for every talent under a manager (all talents when manager_id is None).

    The summary is a straight sum of per-talent figures; tiering has already
    been resolved per talent per month.
    """
    manager = None
    if manager_id is not None:
        manager = snapshot.manager(manager_id)
        if manager is None:
            raise ManagerNotFoundError(f"Manager {manager_id} not found")

    talents = sorted(
        (t for t in snapshot.talents if manager_id is None or t.manager_id == manager_id),
        key=lambda t: t.name,
    )
    rows = [build_talent_budget(t, snapshot, now) for t in talents]

    summary = {
        "totalTalents": len(rows),
        "totalBudget": _sum_field(rows, lambda r: r["budget"]["annual"]),
        "totalSpent": _sum_field(rows, lambda r: r["budget"]["spent"]),
        "totalRemaining": _sum_field(rows, lambda r: r["budget"]["remaining"]),
        "overBudgetCount": sum(1 for r in rows if r["budget"]["overBudget"]),
        "periodAgencyShare": _sum_field(rows, lambda r: r["agencyShare"]),
        "netFlow": _sum_field(rows, lambda r: r["netFlow"]),
        "monthlyExpenses": _sum_field(rows, lambda r: r["monthly"]["expenses"]),
        "annualExpenses": _sum_field(rows, lambda r: r["annual"]["expenses"]),
        "allTimeExpenses": _sum_field(rows, lambda r: r["allTime"]["expenses"]),
        "monthlyIncome": _sum_field(rows, lambda r: r["monthly"]["income"]),
        "annualIncome": _sum_field(rows, lambda r: r["annual"]["income"]),
        "allTimeIncome": _sum_field(rows, lambda r: r["allTime"]["income"]),
        "monthlyAgencyShare": _sum_field(rows, lambda r: r["monthly"]["agencyShare"]),
        "annualAgencyShare": _sum_field(rows, lambda r: r["annual"]["agencyShare"]),
        "allTimeAgencyShare": _sum_field(rows, lambda r: r["allTime"]["agencyShare"]),
    }

    return {
        "manager": {"id": manager.id, "name": manager.name} if manager else None,
        "talents": rows,
        "summary": summary,
    }
