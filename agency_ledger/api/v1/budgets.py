"""POST /v1/budgets/* - talent and manager budget tracking"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from agency_ledger.api.dependencies import get_request_id, get_today, resolve_now
from agency_ledger.api.v1.reports import load_snapshot, run_report
from agency_ledger.api.v1.schemas import LedgerSnapshotSchema
from agency_ledger.domain.budget_tracker import build_manager_budget, build_talent_budget, get_talent
from agency_ledger.domain.exceptions import ManagerNotFoundError, TalentNotFoundError
from agency_ledger.infrastructure.observability.metrics import record_budget

router = APIRouter()


@router.post("/budgets/talents/{talent_id}", response_model=None)
def talent_budget(
    talent_id: str,
    body: LedgerSnapshotSchema,
    request: Request,
    as_of: Optional[date] = Query(None, description="Evaluate budget windows as of this date (defaults to today)"),
    today: date = Depends(get_today),
) -> Dict[str, Any]:
    """
    Budget status of one talent for its current contract-anniversary period.

    Returns 404 when the talent is not part of the posted snapshot.
    """
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)
    now = resolve_now(as_of, today)

    try:
        talent = get_talent(snapshot, talent_id)
    except TalentNotFoundError as e:
        logging.warning(f"Talent not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Talent not found")

    result = run_report(
        "talent_budget",
        request_id,
        lambda: build_talent_budget(talent, snapshot, now),
        talent_id=talent_id,
    )
    record_budget(result["budget"]["usedPercent"], result["budget"]["overBudget"])
    return result


@router.post("/budgets/managers", response_model=None)
def manager_budget(
    body: LedgerSnapshotSchema,
    request: Request,
    manager_id: Optional[str] = Query(None, description="Restrict to this manager's talents; all talents when omitted"),
    as_of: Optional[date] = Query(None, description="Evaluate budget windows as of this date (defaults to today)"),
    today: date = Depends(get_today),
) -> Dict[str, Any]:
    """Per-talent budgets plus a manager-level summary summed across talents"""
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)
    now = resolve_now(as_of, today)

    try:
        result = run_report(
            "manager_budget",
            request_id,
            lambda: build_manager_budget(snapshot, now, manager_id),
            manager_id=manager_id,
        )
    except ManagerNotFoundError as e:
        logging.warning(f"Manager not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Manager not found")

    for row in result["talents"]:
        record_budget(row["budget"]["usedPercent"], row["budget"]["overBudget"])
    return result
