"""
World API Backend — Request Logging Middleware
==============================================

What:  One access log line per HTTP request.
How:   Logs method, route, status, duration, request ID, whether the caller
       presented a session cookie, and the client IP.

Log line:
    GET /world/{country_name}/{city_name} 404 3.1ms [a1b2c3d4] session=no from 10.0.0.7

    The route template is logged rather than the raw path, so city and
    country names typed by clients stay out of the access log and lines
    group per endpoint. Unmatched paths fall back to the raw path.

Levels:
    5xx       → ERROR
    401 / 404 → INFO   (an anonymous /me or an unknown city is ordinary traffic)
    other 4xx → WARNING
    otherwise → INFO

Request bodies and cookie values are never logged; they carry passwords and
session ids.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from worldapi.middleware.request_id import request_id_var

logger = logging.getLogger("worldapi.access")

SKIPPED_PATHS = {"/health"}


def route_template(request: Request) -> str:
    """`/cities/{city_name}` for a matched route, the raw path otherwise."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def status_log_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status in (401, 404):
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Health checks are skipped; probes would drown everything else."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        cookie_name = request.app.state.settings.session_cookie_name
        has_session = cookie_name in request.cookies
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        route = route_template(request)
        status = response.status_code

        logger.log(
            status_log_level(status),
            "%s %s %d %.1fms [%s] session=%s from %s",
            request.method,
            route,
            status,
            duration_ms,
            rid,
            "yes" if has_session else "no",
            client_ip,
            extra={
                "request_id": rid,
                "route": route,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "has_session": has_session,
            },
        )

        return response
