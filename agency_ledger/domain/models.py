"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

from agency_ledger.domain.exceptions import InvalidLedgerError

UNKNOWN_LABEL = "Unknown"


class ExpenseStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class PaymentType(str, Enum):
    SALARY = "SALARY"
    EXPENSE = "EXPENSE"


class UserType(str, Enum):
    TALENT = "TALENT"
    MANAGER = "MANAGER"
    SERVICE = "SERVICE"


@dataclass(frozen=True)
class Expense:
    """Cost incurred on behalf of the agency or a talent"""

    id: str
    description: str
    amount: Decimal
    category: str
    is_recurring: bool
    is_salary: bool
    status: ExpenseStatus
    date: date
    user_id: Optional[str] = None
    talent_id: Optional[str] = None


@dataclass(frozen=True)
class Payment:
    """Money actually disbursed"""

    id: str
    amount: Decimal
    type: PaymentType
    description: str
    date: date
    user_id: Optional[str] = None
    expense_id: Optional[str] = None


@dataclass(frozen=True)
class Income:
    """Platform income booked against a talent; only actual_value_usd is aggregated"""

    id: str
    talent_id: str
    accounting_month: date
    platform: str
    actual_value_usd: Decimal
    currency: str = "USD"
    reference_value: Decimal = Decimal("0")
    actual_value: Decimal = Decimal("0")
    description: str = ""


@dataclass(frozen=True)
class Talent:
    id: str
    name: str
    contract_date: date
    annual_budget: Decimal
    manager_id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class User:
    """Back-office user; salary is a flat monthly figure, not a transaction"""

    id: str
    username: str
    salary: Decimal = Decimal("0")
    types: Tuple[UserType, ...] = ()


@dataclass(frozen=True)
class Manager:
    id: str
    name: str
    user_id: Optional[str] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Immutable bundle of every collection one reporting run needs.

    Lookups degrade to UNKNOWN_LABEL (or None) for references whose target
    has been removed, so historical reports stay producible.
    """

    expenses: Tuple[Expense, ...] = ()
    payments: Tuple[Payment, ...] = ()
    incomes: Tuple[Income, ...] = ()
    talents: Tuple[Talent, ...] = ()
    users: Tuple[User, ...] = ()
    managers: Tuple[Manager, ...] = ()
    _users_by_id: Dict[str, User] = field(init=False, repr=False, compare=False)
    _talents_by_id: Dict[str, Talent] = field(init=False, repr=False, compare=False)
    _managers_by_id: Dict[str, Manager] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Accept any iterable but always store tuples
        for name in ("expenses", "payments", "incomes", "talents", "users", "managers"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(self, "_users_by_id", {u.id: u for u in self.users})
        object.__setattr__(self, "_talents_by_id", {t.id: t for t in self.talents})
        object.__setattr__(self, "_managers_by_id", {m.id: m for m in self.managers})

    def user(self, user_id: Optional[str]) -> Optional[User]:
        if user_id is None:
            return None
        return self._users_by_id.get(user_id)

    def talent(self, talent_id: Optional[str]) -> Optional[Talent]:
        if talent_id is None:
            return None
        return self._talents_by_id.get(talent_id)

    def manager(self, manager_id: Optional[str]) -> Optional[Manager]:
        if manager_id is None:
            return None
        return self._managers_by_id.get(manager_id)

    def user_name(self, user_id: Optional[str]) -> str:
        user = self.user(user_id)
        return user.username if user else UNKNOWN_LABEL

    def talent_name(self, talent_id: Optional[str]) -> str:
        talent = self.talent(talent_id)
        return talent.name if talent else UNKNOWN_LABEL

    def validate(self) -> "LedgerSnapshot":
        """Check the amount constraints of the data model; returns self"""
        for expense in self.expenses:
            if expense.amount <= 0:
                raise InvalidLedgerError(f"Expense {expense.id} has non-positive amount {expense.amount}")
        for payment in self.payments:
            if payment.amount < 0:
                raise InvalidLedgerError(f"Payment {payment.id} has negative amount {payment.amount}")
        for talent in self.talents:
            if talent.annual_budget < 0:
                raise InvalidLedgerError(f"Talent {talent.id} has negative annual budget")
        return self
