"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from agency_ledger.api.middleware import MetricsMiddleware, RequestIDMiddleware
from agency_ledger.api.v1 import budgets, payroll, reports
from agency_ledger.api.v1.schemas import HealthResponse
from agency_ledger.config import settings
from agency_ledger.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Agency Ledger",
        description="Financial aggregation and budget-period engine for talent management",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return HealthResponse(status="ok", service=settings.service_name)

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(payroll.router, prefix="/v1", tags=["payroll"])

    return app


app = create_app()
