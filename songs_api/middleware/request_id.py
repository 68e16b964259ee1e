"""
Songs API — Request ID Middleware and Log Filter
==================================================

What:  Gives each request an ID and stamps it on every log record emitted
       while that request is handled.
Why:   A miss, a failed write and the access line of one request can be
       found together in the logs.
How:   RequestIDMiddleware keeps the client's X-Request-ID (or a short
       generated one) in a ContextVar and echoes it in the response.
       RequestIDLogFilter, installed on the root handler by setup_logging(),
       copies the ContextVar onto each record as `request_id`, so the log
       format can print it for song service, handler and access lines alike.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Printed for records logged outside a request (startup, shutdown)
NO_REQUEST_ID = "-"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to every record; never drops a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or NO_REQUEST_ID
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds the request ID for the duration of the request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        # Not reset afterwards: the catch-all 500 handler runs outside this
        # middleware and still logs under the request's ID.
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
