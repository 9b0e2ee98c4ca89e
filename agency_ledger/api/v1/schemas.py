"""Pydantic schemas for ledger snapshot request validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from agency_ledger.domain.models import (
    Expense,
    ExpenseStatus,
    Income,
    LedgerSnapshot,
    Manager,
    Payment,
    PaymentType,
    Talent,
    User,
    UserType,
)


class CamelModel(BaseModel):
    """Accepts camelCase keys (as the web layer sends them) or snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExpenseSchema(CamelModel):
    id: str
    description: str = ""
    amount: Decimal = Field(..., gt=0, description="Expense amount, strictly positive")
    category: str = "Uncategorized"
    is_recurring: bool = False
    is_salary: bool = False
    status: ExpenseStatus = ExpenseStatus.PENDING
    date: date
    user_id: Optional[str] = None
    talent_id: Optional[str] = None

    def to_domain(self) -> Expense:
        return Expense(
            id=self.id,
            description=self.description,
            amount=self.amount,
            category=self.category,
            is_recurring=self.is_recurring,
            is_salary=self.is_salary,
            status=self.status,
            date=self.date,
            user_id=self.user_id,
            talent_id=self.talent_id,
        )


class PaymentSchema(CamelModel):
    id: str
    amount: Decimal = Field(..., ge=0)
    type: PaymentType
    description: str = ""
    date: date
    user_id: Optional[str] = None
    expense_id: Optional[str] = None

    def to_domain(self) -> Payment:
        return Payment(
            id=self.id,
            amount=self.amount,
            type=self.type,
            description=self.description,
            date=self.date,
            user_id=self.user_id,
            expense_id=self.expense_id,
        )


class IncomeSchema(CamelModel):
    id: str
    talent_id: str
    accounting_month: date = Field(..., description="First day of the accounting month")
    platform: str
    currency: str = "USD"
    reference_value: Decimal = Decimal("0")
    actual_value: Decimal = Decimal("0")
    actual_value_usd: Decimal = Field(..., alias="actualValueUSD")
    description: str = ""

    def to_domain(self) -> Income:
        return Income(
            id=self.id,
            talent_id=self.talent_id,
            accounting_month=self.accounting_month,
            platform=self.platform,
            currency=self.currency,
            reference_value=self.reference_value,
            actual_value=self.actual_value,
            actual_value_usd=self.actual_value_usd,
            description=self.description,
        )


class TalentSchema(CamelModel):
    id: str
    name: str
    contract_date: date
    annual_budget: Decimal = Field(..., ge=0)
    manager_id: Optional[str] = None
    user_id: Optional[str] = None

    def to_domain(self) -> Talent:
        return Talent(
            id=self.id,
            name=self.name,
            contract_date=self.contract_date,
            annual_budget=self.annual_budget,
            manager_id=self.manager_id,
            user_id=self.user_id,
        )


class UserSchema(CamelModel):
    id: str
    username: str
    salary: Optional[Decimal] = None
    types: List[UserType] = Field(default_factory=list)

    def to_domain(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            salary=self.salary if self.salary is not None else Decimal("0"),
            types=tuple(self.types),
        )


class ManagerSchema(CamelModel):
    id: str
    name: str
    user_id: Optional[str] = None

    def to_domain(self) -> Manager:
        return Manager(id=self.id, name=self.name, user_id=self.user_id)


class LedgerSnapshotSchema(CamelModel):
    """Request body: every ledger collection, already fetched by the caller"""

    expenses: List[ExpenseSchema] = Field(default_factory=list)
    payments: List[PaymentSchema] = Field(default_factory=list)
    incomes: List[IncomeSchema] = Field(default_factory=list)
    talents: List[TalentSchema] = Field(default_factory=list)
    users: List[UserSchema] = Field(default_factory=list)
    managers: List[ManagerSchema] = Field(default_factory=list)

    def to_domain(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            expenses=tuple(e.to_domain() for e in self.expenses),
            payments=tuple(p.to_domain() for p in self.payments),
            incomes=tuple(i.to_domain() for i in self.incomes),
            talents=tuple(t.to_domain() for t in self.talents),
            users=tuple(u.to_domain() for u in self.users),
            managers=tuple(m.to_domain() for m in self.managers),
        ).validate()


class HealthResponse(BaseModel):
    """Response for GET /health"""

    status: str
    service: str
