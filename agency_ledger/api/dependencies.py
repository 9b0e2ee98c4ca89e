"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Request

from agency_ledger.config import Settings, settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings() -> Settings:
    return settings


def get_today() -> date:
    """Clock used when no as_of date is supplied; overridden in tests"""
    return date.today()


def resolve_now(as_of: Optional[date], today: date) -> date:
    return as_of if as_of is not None else today
