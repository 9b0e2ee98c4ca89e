"""POST /v1/payroll/{user_id} - salary statement for one user"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from agency_ledger.api.dependencies import get_request_id, get_settings, get_today, resolve_now
from agency_ledger.api.v1.reports import load_snapshot, run_report
from agency_ledger.api.v1.schemas import LedgerSnapshotSchema
from agency_ledger.config import Settings
from agency_ledger.domain.exceptions import UserNotFoundError
from agency_ledger.domain.payroll import build_payroll_statement, get_user

router = APIRouter()


@router.post("/payroll/{user_id}", response_model=None)
def payroll_statement(
    user_id: str,
    body: LedgerSnapshotSchema,
    request: Request,
    as_of: Optional[date] = Query(None, description="Evaluate the current month as of this date (defaults to today)"),
    today: date = Depends(get_today),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)

    try:
        user = get_user(snapshot, user_id)
    except UserNotFoundError as e:
        logging.warning(f"User not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="User not found")

    return run_report(
        "payroll",
        request_id,
        lambda: build_payroll_statement(
            user,
            snapshot,
            resolve_now(as_of, today),
            history_months=config.payroll_history_months,
        ),
        user_id=user_id,
    )
