"""FastAPI middleware for request tracing and metrics"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from agency_ledger.infrastructure.observability.metrics import request_duration_histogram

UNMATCHED_ROUTE = "<unmatched>"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request, honouring one supplied by the caller"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Time each request by route template and log one access line"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        endpoint = route_template(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(duration)

        logging.info(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "method": request.method,
                "endpoint": endpoint,
                "status": response.status_code,
                "duration_ms": duration * 1000,
            },
        )
        return response


def route_template(request: Request) -> str:
    """Matched route path such as /v1/budgets/talents/{talent_id}, so ids do not become label values"""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)
