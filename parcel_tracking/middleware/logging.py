"""
Hotel Parcel Tracking — Request Logging Middleware
====================================================

What:  One access-log line per HTTP request on logger `parcel_tracking.access`.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Each line carries the route template (`/api/guests/{guest_id}`) next to the
concrete path, so requests for different guests and parcels group under one
endpoint. Unmatched requests (404 from the router) fall back to the raw path.

Log level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies are never logged (guest names are personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from parcel_tracking.middleware.request_id import request_id_var

logger = logging.getLogger("parcel_tracking.access")


def status_log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    """The matched route's path template; the router stores the route in the scope."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, route, status and duration of every request except health checks."""

    # Health checks from the load balancer
    SKIPPED_PATHS = frozenset({"/health"})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        entry = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "route": route_template(request),
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": elapsed_ms,
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            status_log_level(response.status_code),
            "%(method)s %(route)s -> %(status)d in %(duration_ms).1fms [%(request_id)s]",
            entry,
            extra=entry,
        )
        return response
