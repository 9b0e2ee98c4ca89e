"""
E2E tests for talent personas, run through the full HTTP stack.

Talent personas:
- travel_only: a single travel expense settled by one payment
- high_earner: one month of income above the tier threshold
- split_months: low and high income months inside one budget period
- overspender: spend above the annual budget
- leap_day: contract signed on Feb 29
"""

import pytest
from typing import Any, Dict, List
from fastapi.testclient import TestClient


def _ledger(**collections: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "expenses": collections.get("expenses", []),
        "payments": collections.get("payments", []),
        "incomes": collections.get("incomes", []),
        "talents": collections.get("talents", []),
        "users": collections.get("users", []),
        "managers": collections.get("managers", []),
    }


@pytest.mark.integration
def test_travel_only(client: TestClient):
    """
    travel_only: one $100 travel expense paid two days later
    Expected: June shows 100 one-off, 100 spent, 100 of expense payments
    """
    ledger = _ledger(
        expenses=[{"id": "e1", "amount": 100, "date": "2025-06-10", "category": "Travel", "status": "PAID"}],
        payments=[{"id": "p1", "amount": 100, "date": "2025-06-12", "type": "EXPENSE", "expenseId": "e1"}],
    )

    response = client.post("/v1/reports/monthly", json=ledger)

    assert response.status_code == 200
    june = response.json()["monthlyData"][0]
    assert june["month"] == "2025-06"
    assert june["oneOff"] == 100
    assert june["totalSpent"] == 100
    assert june["expensePayments"] == 100
    assert june["byCategory"] == [{"category": "Travel", "amount": 100}]
    assert june["byUser"] == [{"name": "Unknown", "amount": 100}]


@pytest.mark.integration
def test_high_earner(client: TestClient):
    """
    high_earner: $1200 of June income, no expenses
    Expected: 20% tier, agency share 240 and net flow 240
    """
    ledger = _ledger(
        talents=[{"id": "t1", "name": "Kasahi", "contractDate": "2024-03-15", "annualBudget": 5000}],
        incomes=[{"id": "i1", "talentId": "t1", "accountingMonth": "2025-06-01", "platform": "Twitch", "actualValueUSD": 1200}],
    )

    response = client.post("/v1/reports/monthly", json=ledger)

    june = response.json()["monthlyData"][0]
    assert june["agencyShare"] == 240
    assert june["netFlow"] == 240


@pytest.mark.integration
def test_split_months(client: TestClient):
    """
    split_months: $500 in January, $1500 in February
    Expected: 225 + 300 = 525, never 20% of the combined 2000
    """
    ledger = _ledger(
        talents=[{"id": "t1", "name": "Kasahi", "contractDate": "2024-03-15", "annualBudget": 5000}],
        incomes=[
            {"id": "i1", "talentId": "t1", "accountingMonth": "2025-01-01", "platform": "Twitch", "actualValueUSD": 500},
            {"id": "i2", "talentId": "t1", "accountingMonth": "2025-02-01", "platform": "Twitch", "actualValueUSD": 1500},
        ],
    )

    budget = client.post("/v1/budgets/talents/t1", params={"as_of": "2025-02-01"}, json=ledger).json()
    annual = client.post("/v1/reports/annual", json=ledger).json()["annualData"][0]

    assert budget["agencyShare"] == 525
    assert annual["agencyShare"] == 525


@pytest.mark.integration
def test_overspender(client: TestClient):
    """
    overspender: $1200 spent against a $1000 budget
    Expected: remaining goes negative, usedPercent above 100
    """
    ledger = _ledger(
        talents=[{"id": "t1", "name": "Kimeru", "contractDate": "2023-09-01", "annualBudget": 1000, "managerId": "m1"}],
        managers=[{"id": "m1", "name": "Alice"}],
        expenses=[
            {"id": "e1", "amount": 700, "date": "2025-01-10", "category": "Events", "talentId": "t1"},
            {"id": "e2", "amount": 500, "date": "2025-05-02", "category": "Travel", "talentId": "t1"},
        ],
    )

    response = client.post("/v1/budgets/managers", params={"manager_id": "m1"}, json=ledger)

    assert response.status_code == 200
    data = response.json()
    budget = data["talents"][0]["budget"]
    assert budget["remaining"] == -200
    assert budget["usedPercent"] == 120
    assert budget["overBudget"] is True
    assert data["summary"]["overBudgetCount"] == 1


@pytest.mark.integration
def test_leap_day(client: TestClient):
    """
    leap_day: contract signed 2024-02-29, evaluated in 2025
    Expected: period clamps to Feb 28 instead of failing
    """
    ledger = _ledger(
        talents=[{"id": "t1", "name": "Lmoetama", "contractDate": "2024-02-29", "annualBudget": 2000}],
    )

    response = client.post("/v1/budgets/talents/t1", json=ledger)

    assert response.status_code == 200
    budget = response.json()["budget"]
    assert budget["periodStart"] == "2025-02-28"
    assert budget["periodEnd"] == "2026-02-28"
    assert budget["usedPercent"] == 0
