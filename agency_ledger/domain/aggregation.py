"""
Aggregation engine - monthly, annual and all-time financial reports.

All three report shapes are built from one rollup (summarize) applied to a
LedgerWindow: the slice of expenses, payments and incomes that falls into a
month, a year, or the whole snapshot. Agency share always goes through the
revenue_share pipeline so month-level tiering holds at every granularity.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from agency_ledger.domain.bucketing import bucket_by, bucket_by_month, bucket_by_year, sorted_keys
from agency_ledger.domain.models import (
    Expense,
    ExpenseStatus,
    Income,
    LedgerSnapshot,
    Payment,
    PaymentType,
)
from agency_ledger.domain.revenue_share import (
    ZERO,
    agency_rate,
    monthly_agency_shares,
    monthly_income_totals,
    sum_shares,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECENT_EXPENSES_LIMIT = 10
RECENT_PAYMENTS_LIMIT = 15
RECENT_INCOMES_LIMIT = 10


class ShareScope(str, Enum):
    """Whether monthly income is tiered over all talents at once or per talent"""

    GLOBAL = "global"
    TALENT = "talent"


@dataclass(frozen=True)
class LedgerWindow:
    """The records of one reporting window"""

    expenses: Tuple[Expense, ...] = ()
    payments: Tuple[Payment, ...] = ()
    incomes: Tuple[Income, ...] = ()

    @classmethod
    def of(cls, snapshot: LedgerSnapshot) -> "LedgerWindow":
        return cls(expenses=snapshot.expenses, payments=snapshot.payments, incomes=snapshot.incomes)

    def by_month(self) -> Dict[str, "LedgerWindow"]:
        return _split(self, bucket_by_month)

    def by_year(self) -> Dict[str, "LedgerWindow"]:
        return _split(self, bucket_by_year)


def _split(window: LedgerWindow, bucketer: Callable) -> Dict[str, LedgerWindow]:
    expenses = bucketer(window.expenses, lambda e: e.date)
    payments = bucketer(window.payments, lambda p: p.date)
    incomes = bucketer(window.incomes, lambda i: i.accounting_month)
    keys = sorted(set(expenses) | set(payments) | set(incomes))
    return {
        key: LedgerWindow(
            expenses=tuple(expenses.get(key, ())),
            payments=tuple(payments.get(key, ())),
            incomes=tuple(incomes.get(key, ())),
        )
        for key in keys
    }


def total(records: Iterable[T], amount: Callable[[T], Decimal]) -> Decimal:
    return sum((amount(r) for r in records), ZERO)


def ranked(
    records: Iterable[T],
    label: Callable[[T], str],
    amount: Callable[[T], Decimal],
    label_field: str,
    top_n: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Sum amounts per label, sorted descending.

    sorted() is stable even with reverse=True, so ties keep the order in
    which their labels were first encountered.
    """
    buckets = bucket_by(records, label)
    rows = [{label_field: key, "amount": total(items, amount)} for key, items in buckets.items()]
    rows = sorted(rows, key=lambda row: row["amount"], reverse=True)
    return rows if top_n is None else rows[:top_n]


def window_agency_share(incomes: Sequence[Income], scope: ShareScope) -> Decimal:
    """Month-tiered agency share of a window (per talent-month in TALENT scope)"""
    totals = monthly_income_totals(incomes, per_talent=scope == ShareScope.TALENT)
    return sum_shares(monthly_agency_shares(totals))


def agency_share_by_talent(incomes: Sequence[Income], snapshot: LedgerSnapshot) -> List[Dict[str, Any]]:
    """Per-talent agency share, each talent tiered month by month before summing"""
    shares = monthly_agency_shares(monthly_income_totals(incomes, per_talent=True))
    by_talent = bucket_by(shares.items(), lambda item: snapshot.talent_name(item[0][0]))
    rows = [{"name": name, "amount": sum((s for _, s in items), ZERO)} for name, items in by_talent.items()]
    return sorted(rows, key=lambda row: row["amount"], reverse=True)


def summarize(
    window: LedgerWindow,
    snapshot: LedgerSnapshot,
    scope: ShareScope = ShareScope.GLOBAL,
    top_n: Optional[int] = None,
    agency_share: Optional[Decimal] = None,
) -> Dict[str, Any]:
    """
    Common figures shared by every report granularity.

    Pass agency_share when the caller has already summed it from finer
    monthly buckets (annual reports do, from their monthly breakdown).
    """
    expenses, payments, incomes = window.expenses, window.payments, window.incomes

    total_payments = total(payments, lambda p: p.amount)
    income = total(incomes, lambda i: i.actual_value_usd)
    share = window_agency_share(incomes, scope) if agency_share is None else agency_share

    rollup: Dict[str, Any] = {
        "totalSpent": total_payments,
        "expenses": total(expenses, lambda e: e.amount),
        "recurring": total((e for e in expenses if e.is_recurring), lambda e: e.amount),
        "oneOff": total((e for e in expenses if not e.is_recurring), lambda e: e.amount),
        "salaryPayments": total((p for p in payments if p.type == PaymentType.SALARY), lambda p: p.amount),
        "expensePayments": total((p for p in payments if p.type != PaymentType.SALARY), lambda p: p.amount),
        "expenseCount": len(expenses),
        "paymentCount": len(payments),
        "income": income,
        "incomeCount": len(incomes),
        "agencyShare": share,
        "netFlow": share - total_payments,
        "byCategory": ranked(expenses, lambda e: e.category, lambda e: e.amount, "category", top_n),
        "byUser": ranked(expenses, lambda e: snapshot.user_name(e.user_id), lambda e: e.amount, "name", top_n),
        "incomeByPlatform": ranked(incomes, lambda i: i.platform, lambda i: i.actual_value_usd, "platform", top_n),
        "incomeByTalent": ranked(
            incomes, lambda i: snapshot.talent_name(i.talent_id), lambda i: i.actual_value_usd, "name", top_n
        ),
    }
    if scope == ShareScope.TALENT:
        rollup["agencyShareByTalent"] = agency_share_by_talent(incomes, snapshot)
    return rollup


def monthly_breakdown(window: LedgerWindow, scope: ShareScope = ShareScope.GLOBAL) -> List[Dict[str, Any]]:
    """Per-month totals inside a window, ascending by month key"""
    months = window.by_month()
    return [
        {
            "month": month,
            "expenses": total(months[month].expenses, lambda e: e.amount),
            "payments": total(months[month].payments, lambda p: p.amount),
            "income": total(months[month].incomes, lambda i: i.actual_value_usd),
            "agencyShare": window_agency_share(months[month].incomes, scope),
        }
        for month in sorted_keys(months)
    ]


def yearly_trend(records: Iterable[T], date_of: Callable[[T], Any], amount: Callable[[T], Decimal]) -> List[Dict[str, Any]]:
    years = bucket_by_year(records, date_of)
    return [{"year": year, "amount": total(years[year], amount)} for year in sorted_keys(years)]


def monthly_salaries(snapshot: LedgerSnapshot) -> Decimal:
    return total(snapshot.users, lambda u: u.salary or ZERO)


def build_monthly_report(
    snapshot: LedgerSnapshot,
    scope: ShareScope = ShareScope.GLOBAL,
    top_n: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """One entry per month present in any ledger, newest month first"""
    salaries = monthly_salaries(snapshot)
    months = LedgerWindow.of(snapshot).by_month()

    report = []
    for month in sorted_keys(months, newest_first=True):
        rollup = summarize(months[month], snapshot, scope, top_n)
        # A single tier only exists when all talents' income is tiered together
        rate = agency_rate(rollup["income"]) if scope == ShareScope.GLOBAL else None
        report.append(
            {
                "month": month,
                **rollup,
                "agencyRate": rate,
                "estimatedMonthlyCost": salaries + rollup["recurring"],
            }
        )

    logger.debug("Built monthly report months=%d scope=%s", len(report), scope.value)
    return report


def build_annual_report(
    snapshot: LedgerSnapshot,
    scope: ShareScope = ShareScope.GLOBAL,
    top_n: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    One entry per year, newest year first.

    The year's agency share is the sum of its months' own shares, never the
    share of the yearly income total.
    """
    salaries = monthly_salaries(snapshot)
    years = LedgerWindow.of(snapshot).by_year()

    report = []
    for year in sorted_keys(years, newest_first=True):
        breakdown = monthly_breakdown(years[year], scope)
        share = sum((m["agencyShare"] for m in breakdown), ZERO)
        rollup = summarize(years[year], snapshot, scope, top_n, agency_share=share)
        report.append(
            {
                "year": year,
                **rollup,
                "estimatedAnnualCost": salaries * 12 + rollup["recurring"],
                "monthlyBreakdown": breakdown,
            }
        )

    logger.debug("Built annual report years=%d scope=%s", len(report), scope.value)
    return report


def recent_expenses(snapshot: LedgerSnapshot, expenses: Iterable[Expense], limit: int) -> List[Dict[str, Any]]:
    newest = sorted(expenses, key=lambda e: e.date, reverse=True)[:limit]
    return [
        {
            "id": e.id,
            "description": e.description,
            "amount": e.amount,
            "category": e.category,
            "isRecurring": e.is_recurring,
            "isSalary": e.is_salary,
            "status": e.status.value,
            "date": e.date,
            "user": snapshot.user_name(e.user_id),
            "talent": snapshot.talent_name(e.talent_id) if e.talent_id else None,
        }
        for e in newest
    ]


def recent_payments(snapshot: LedgerSnapshot, payments: Iterable[Payment], limit: int) -> List[Dict[str, Any]]:
    newest = sorted(payments, key=lambda p: p.date, reverse=True)[:limit]
    rows = []
    for p in newest:
        user = snapshot.user(p.user_id)
        rows.append(
            {
                "id": p.id,
                "amount": p.amount,
                "type": p.type.value,
                "description": p.description,
                "date": p.date,
                "user": snapshot.user_name(p.user_id),
                "userTypes": [t.value for t in user.types] if user else [],
            }
        )
    return rows


def recent_incomes(snapshot: LedgerSnapshot, incomes: Iterable[Income], limit: int) -> List[Dict[str, Any]]:
    newest = sorted(incomes, key=lambda i: i.accounting_month, reverse=True)[:limit]
    return [
        {
            "id": i.id,
            "amount": i.actual_value_usd,
            "platform": i.platform,
            "description": i.description,
            "date": i.accounting_month,
            "currency": i.currency,
            "referenceValue": i.reference_value,
            "actualValue": i.actual_value,
            "talent": snapshot.talent_name(i.talent_id),
        }
        for i in newest
    ]


def _salary_by_type(snapshot: LedgerSnapshot) -> List[Dict[str, Any]]:
    pairs = [(user_type.value, user.salary or ZERO) for user in snapshot.users for user_type in user.types]
    buckets = bucket_by(pairs, lambda pair: pair[0])
    return [{"type": key, "amount": total(items, lambda pair: pair[1])} for key, items in buckets.items()]


def _talent_salaries(snapshot: LedgerSnapshot) -> List[Dict[str, Any]]:
    rows = []
    for talent in snapshot.talents:
        user = snapshot.user(talent.user_id)
        rows.append({"name": talent.name, "salary": user.salary if user else ZERO})
    return sorted(rows, key=lambda row: row["salary"], reverse=True)


def build_all_time_report(
    snapshot: LedgerSnapshot,
    scope: ShareScope = ShareScope.GLOBAL,
    top_n: Optional[int] = None,
    recent_expenses_limit: int = RECENT_EXPENSES_LIMIT,
    recent_payments_limit: int = RECENT_PAYMENTS_LIMIT,
    recent_incomes_limit: int = RECENT_INCOMES_LIMIT,
) -> Dict[str, Any]:
    """Grand totals, top-N breakdowns, recent activity and year-over-year trends"""
    rollup = summarize(LedgerWindow.of(snapshot), snapshot, scope, top_n)

    pending = [e for e in snapshot.expenses if e.status == ExpenseStatus.PENDING]
    paid = [e for e in snapshot.expenses if e.status == ExpenseStatus.PAID]

    summary = {
        "totalSpent": rollup["totalSpent"],
        "totalExpenses": rollup["expenses"],
        "totalRecurring": rollup["recurring"],
        "totalOneOff": rollup["oneOff"],
        "totalSalaryPayments": rollup["salaryPayments"],
        "totalExpensePayments": rollup["expensePayments"],
        "totalPending": total(pending, lambda e: e.amount),
        "totalPaid": total(paid, lambda e: e.amount),
        "totalIncome": rollup["income"],
        "totalAgencyShare": rollup["agencyShare"],
        "netFlow": rollup["netFlow"],
        "monthlyCost": monthly_salaries(snapshot) + rollup["recurring"],
        "userCount": len(snapshot.users),
        "talentCount": len(snapshot.talents),
        "managerCount": len(snapshot.managers),
        "expenseCount": rollup["expenseCount"],
        "paymentCount": rollup["paymentCount"],
        "incomeCount": rollup["incomeCount"],
        "pendingCount": len(pending),
        "paidCount": len(paid),
    }

    report: Dict[str, Any] = {
        "summary": summary,
        "byCategory": rollup["byCategory"],
        "byUser": rollup["byUser"],
        "salaryByType": _salary_by_type(snapshot),
        "talentSalaries": _talent_salaries(snapshot),
        "incomeByPlatform": rollup["incomeByPlatform"],
        "incomeByTalent": rollup["incomeByTalent"],
        "recentExpenses": recent_expenses(snapshot, snapshot.expenses, recent_expenses_limit),
        "recentPayments": recent_payments(snapshot, snapshot.payments, recent_payments_limit),
        "recentIncomes": recent_incomes(snapshot, snapshot.incomes, recent_incomes_limit),
        "yearlyTrend": yearly_trend(snapshot.payments, lambda p: p.date, lambda p: p.amount),
        "yearlyIncomeTrend": yearly_trend(snapshot.incomes, lambda i: i.accounting_month, lambda i: i.actual_value_usd),
    }
    if scope == ShareScope.TALENT:
        report["agencyShareByTalent"] = rollup["agencyShareByTalent"]

    logger.debug(
        "Built all-time report expenses=%d payments=%d incomes=%d",
        len(snapshot.expenses),
        len(snapshot.payments),
        len(snapshot.incomes),
    )
    return report


def build_finance_overview(
    snapshot: LedgerSnapshot,
    scope: ShareScope = ShareScope.GLOBAL,
    top_n: Optional[int] = None,
    recent_expenses_limit: int = RECENT_EXPENSES_LIMIT,
    recent_payments_limit: int = RECENT_PAYMENTS_LIMIT,
    recent_incomes_limit: int = RECENT_INCOMES_LIMIT,
) -> Dict[str, Any]:
    """Monthly, annual and all-time reports computed over the same snapshot"""
    return {
        "monthlyData": build_monthly_report(snapshot, scope, top_n),
        "annualData": build_annual_report(snapshot, scope, top_n),
        "allTimeData": build_all_time_report(
            snapshot,
            scope,
            top_n,
            recent_expenses_limit=recent_expenses_limit,
            recent_payments_limit=recent_payments_limit,
            recent_incomes_limit=recent_incomes_limit,
        ),
    }
