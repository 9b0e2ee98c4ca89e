"""Payroll statement - a user's expected pay for the month against what was paid"""

from datetime import date
from typing import Any, Dict

from agency_ledger.domain.aggregation import total
from agency_ledger.domain.bucketing import bucket_by_month, sorted_keys
from agency_ledger.domain.exceptions import UserNotFoundError
from agency_ledger.domain.models import LedgerSnapshot, Payment, PaymentType, User
from agency_ledger.domain.revenue_share import ZERO
from agency_ledger.utils.date_utils import as_date, month_key

PAYROLL_HISTORY_MONTHS = 12
RECENT_PAYMENTS_LIMIT = 50


def get_user(snapshot: LedgerSnapshot, user_id: str) -> User:
    user = snapshot.user(user_id)
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found")
    return user


def build_payroll_statement(
    user: User,
    snapshot: LedgerSnapshot,
    now: date,
    history_months: int = PAYROLL_HISTORY_MONTHS,
    recent_limit: int = RECENT_PAYMENTS_LIMIT,
) -> Dict[str, Any]:
    """
    Current-month payroll position plus payment history for one user.

    Extraordinary expenses are one-off salary expenses (is_salary and not
    is_recurring) booked in the current month; they raise the amount the
    user expects on top of the flat monthly salary.
    """
    current_month = month_key(as_date(now))
    salary = user.salary or ZERO

    payments = sorted((p for p in snapshot.payments if p.user_id == user.id), key=lambda p: p.date, reverse=True)
    this_month_payments = [p for p in payments if month_key(p.date) == current_month]
    salary_paid = total((p for p in this_month_payments if p.type == PaymentType.SALARY), lambda p: p.amount)
    expenses_paid = total((p for p in this_month_payments if p.type == PaymentType.EXPENSE), lambda p: p.amount)

    extraordinary = sorted(
        (
            e
            for e in snapshot.expenses
            if e.user_id == user.id and e.is_salary and not e.is_recurring and month_key(e.date) == current_month
        ),
        key=lambda e: e.date,
        reverse=True,
    )
    extraordinary_total = total(extraordinary, lambda e: e.amount)
    expected_total = salary + extraordinary_total

    by_month = bucket_by_month(payments, lambda p: p.date)
    history = [
        {
            "month": month,
            "salary": total((p for p in by_month[month] if p.type == PaymentType.SALARY), lambda p: p.amount),
            "expenses": total((p for p in by_month[month] if p.type != PaymentType.SALARY), lambda p: p.amount),
            "payments": [_payment_row(p) for p in by_month[month]],
        }
        for month in sorted_keys(by_month, newest_first=True)[:history_months]
    ]

    return {
        "user": {
            "id": user.id,
            "username": user.username,
            "salary": salary,
            "types": [t.value for t in user.types],
        },
        "currentMonth": {
            "month": current_month,
            "baseSalary": salary,
            "extraordinaryExpenses": extraordinary_total,
            "expectedTotal": expected_total,
            "salaryPaid": salary_paid,
            "expensesPaid": expenses_paid,
            "totalPaid": salary_paid + expenses_paid,
            "remaining": expected_total - salary_paid,
            "expenses": [
                {"id": e.id, "description": e.description, "amount": e.amount, "status": e.status.value, "date": e.date}
                for e in extraordinary
            ],
        },
        "paymentHistory": history,
        "allPayments": [_payment_row(p) for p in payments[:recent_limit]],
    }


def _payment_row(payment: Payment) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "type": payment.type.value,
        "amount": payment.amount,
        "description": payment.description,
        "date": payment.date,
    }
