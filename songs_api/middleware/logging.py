"""
Songs API — Access Log Middleware
===================================

What:  One access line per /songs request: method, path, status, duration
       and client address. The request ID is added by RequestIDLogFilter.

Not logged: request bodies or query strings (song data, titles).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("songs_api.access")

SKIPPED_PATHS = {"/health"}


def access_log_level(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, else INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Health probes are not logged."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.log(
            access_log_level(response.status_code),
            "%s %s %d %.1fms from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request.client.host if request.client else "unknown",
        )
        return response
