"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Any, Dict
from fastapi.testclient import TestClient
from agency_ledger.api.main import create_app
from agency_ledger.api.dependencies import get_today
from agency_ledger.api.v1.schemas import LedgerSnapshotSchema
from agency_ledger.domain.models import LedgerSnapshot


# Fixed clock for every request that omits as_of
TODAY = date(2025, 6, 20)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a frozen clock"""
    app = create_app()
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def snapshot_payload() -> Dict[str, Any]:
    """
    Small agency ledger, as the web layer posts it.

    alice manages Kasahi and Kimeru; Lmoetama has no manager and a zero
    budget. e4 references a user that has since been deleted.
    """
    return {
        "users": [
            {"id": "u1", "username": "alice", "salary": 2000, "types": ["MANAGER"]},
            {"id": "u2", "username": "bob", "salary": 1500, "types": ["TALENT"]},
            {"id": "u3", "username": "carol", "salary": 500, "types": ["SERVICE", "TALENT"]},
        ],
        "managers": [
            {"id": "m1", "name": "Alice", "userId": "u1"},
        ],
        "talents": [
            {
                "id": "t1",
                "name": "Kasahi",
                "contractDate": "2024-03-15",
                "annualBudget": 5000,
                "managerId": "m1",
                "userId": "u2",
            },
            {
                "id": "t2",
                "name": "Kimeru",
                "contractDate": "2023-09-01",
                "annualBudget": 3000,
                "managerId": "m1",
                "userId": "u3",
            },
            {
                "id": "t3",
                "name": "Lmoetama",
                "contractDate": "2024-01-31",
                "annualBudget": 0,
            },
        ],
        "expenses": [
            {
                "id": "e1",
                "description": "Flight to TwitchCon",
                "amount": 100,
                "category": "Travel",
                "status": "PAID",
                "date": "2025-06-10",
                "userId": "u1",
                "talentId": "t1",
            },
            {
                "id": "e2",
                "description": "Editing suite",
                "amount": 50,
                "category": "Software",
                "isRecurring": True,
                "status": "PENDING",
                "date": "2025-06-02",
                "userId": "u1",
            },
            {
                "id": "e3",
                "description": "Camera",
                "amount": 300,
                "category": "Equipment",
                "status": "PAID",
                "date": "2025-01-15",
                "userId": "u2",
                "talentId": "t1",
            },
            {
                "id": "e4",
                "description": "Hotel",
                "amount": 200,
                "category": "Travel",
                "status": "PENDING",
                "date": "2024-12-05",
                "userId": "ghost",
                "talentId": "t2",
            },
            {
                "id": "e5",
                "description": "Event bonus",
                "amount": 400,
                "category": "Extraordinary",
                "isSalary": True,
                "status": "PENDING",
                "date": "2025-06-05",
                "userId": "u2",
                "talentId": "t1",
            },
        ],
        "payments": [
            {"id": "p1", "amount": 100, "type": "EXPENSE", "date": "2025-06-12", "userId": "u1", "expenseId": "e1"},
            {"id": "p2", "amount": 2000, "type": "SALARY", "date": "2025-06-01", "userId": "u1"},
            {"id": "p3", "amount": 300, "type": "EXPENSE", "date": "2025-01-20", "userId": "u2", "expenseId": "e3"},
            {"id": "p4", "amount": 1500, "type": "SALARY", "date": "2024-12-01", "userId": "u2"},
        ],
        "incomes": [
            {"id": "i1", "talentId": "t1", "accountingMonth": "2025-01-01", "platform": "Twitch", "actualValueUSD": 500},
            {"id": "i2", "talentId": "t1", "accountingMonth": "2025-02-01", "platform": "YouTube", "actualValueUSD": 1500},
            {"id": "i3", "talentId": "t1", "accountingMonth": "2025-06-01", "platform": "Twitch", "actualValueUSD": 1200},
            {"id": "i4", "talentId": "t2", "accountingMonth": "2025-06-01", "platform": "YouTube", "actualValueUSD": 300},
            {"id": "i5", "talentId": "t2", "accountingMonth": "2024-12-01", "platform": "Twitch", "actualValueUSD": 800},
        ],
    }


@pytest.fixture
def sample_snapshot(snapshot_payload: Dict[str, Any]) -> LedgerSnapshot:
    """The same ledger, converted to domain objects"""
    return LedgerSnapshotSchema.model_validate(snapshot_payload).to_domain()
