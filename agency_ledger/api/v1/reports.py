"""POST /v1/reports/* - finance reports over a posted ledger snapshot"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from agency_ledger.api.dependencies import get_request_id, get_settings
from agency_ledger.api.v1.schemas import LedgerSnapshotSchema
from agency_ledger.config import Settings
from agency_ledger.domain.aggregation import (
    ShareScope,
    build_all_time_report,
    build_annual_report,
    build_finance_overview,
    build_monthly_report,
)
from agency_ledger.domain.exceptions import InvalidLedgerError
from agency_ledger.domain.models import LedgerSnapshot
from agency_ledger.infrastructure.observability.logging import log_report
from agency_ledger.infrastructure.observability.metrics import record_report

router = APIRouter()


def load_snapshot(body: LedgerSnapshotSchema, request_id: str) -> LedgerSnapshot:
    """Convert the request body, mapping data-model violations to 422"""
    try:
        return body.to_domain()
    except InvalidLedgerError as e:
        logging.warning(f"Invalid ledger snapshot: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))


def run_report(report: str, request_id: str, build: Callable[[], Any], **log_fields: Any) -> Any:
    """Build a report, recording its latency metric and a structured log line"""
    start_time = time.time()
    result = build()
    duration = time.time() - start_time
    record_report(report, duration)
    log_report(request_id, report, duration * 1000, **log_fields)
    return result


def _scope(share_scope: Optional[ShareScope], config: Settings) -> ShareScope:
    return share_scope or ShareScope(config.share_scope)


@router.post("/reports/finance", response_model=None)
def finance_overview(
    body: LedgerSnapshotSchema,
    request: Request,
    share_scope: Optional[ShareScope] = Query(None, description="global: tier all talents' income together; talent: tier per talent"),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Monthly, annual and all-time reports in one payload.

    Shape: {monthlyData: [...], annualData: [...], allTimeData: {...}}
    """
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)
    scope = _scope(share_scope, config)
    return run_report(
        "finance",
        request_id,
        lambda: build_finance_overview(
            snapshot,
            scope,
            config.breakdown_top_n,
            recent_expenses_limit=config.recent_expenses_limit,
            recent_payments_limit=config.recent_payments_limit,
            recent_incomes_limit=config.recent_incomes_limit,
        ),
        share_scope=scope.value,
        expense_count=len(snapshot.expenses),
        income_count=len(snapshot.incomes),
    )


@router.post("/reports/monthly", response_model=None)
def monthly_report(
    body: LedgerSnapshotSchema,
    request: Request,
    share_scope: Optional[ShareScope] = Query(None, description="global: tier all talents' income together; talent: tier per talent"),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)
    scope = _scope(share_scope, config)
    months = run_report(
        "monthly",
        request_id,
        lambda: build_monthly_report(snapshot, scope, config.breakdown_top_n),
        share_scope=scope.value,
    )
    return {"monthlyData": months}


@router.post("/reports/annual", response_model=None)
def annual_report(
    body: LedgerSnapshotSchema,
    request: Request,
    share_scope: Optional[ShareScope] = Query(None, description="global: tier all talents' income together; talent: tier per talent"),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)
    scope = _scope(share_scope, config)
    years = run_report(
        "annual",
        request_id,
        lambda: build_annual_report(snapshot, scope, config.breakdown_top_n),
        share_scope=scope.value,
    )
    return {"annualData": years}


@router.post("/reports/all-time", response_model=None)
def all_time_report(
    body: LedgerSnapshotSchema,
    request: Request,
    share_scope: Optional[ShareScope] = Query(None, description="global: tier all talents' income together; talent: tier per talent"),
    top_n: Optional[int] = Query(None, ge=1, description="Keep only the N largest entries per breakdown"),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    request_id = get_request_id(request)
    snapshot = load_snapshot(body, request_id)
    scope = _scope(share_scope, config)
    all_time = run_report(
        "all_time",
        request_id,
        lambda: build_all_time_report(
            snapshot,
            scope,
            top_n or config.breakdown_top_n,
            recent_expenses_limit=config.recent_expenses_limit,
            recent_payments_limit=config.recent_payments_limit,
            recent_incomes_limit=config.recent_incomes_limit,
        ),
        share_scope=scope.value,
    )
    return {"allTimeData": all_time}
