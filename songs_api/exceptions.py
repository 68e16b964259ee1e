"""
Songs API — Custom Exception Hierarchy
========================================

What:  Defines application-specific exceptions for the request pipeline.
Why:   Each failure class maps to one fixed HTTP response; raising instead of
       returning error dicts keeps routes and services linear.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn them into
       JSON responses with the right status codes.
Who:   Raised by the validator, the song service and the store layer.

Exception Hierarchy:
    SongsApiError (base)
    ├── InvalidRequestError      → 400 Bad Request  {"error": message}
    │   └── MethodNotAllowedError → 405            {"error": message}
    ├── SongNotFoundError        → 404 Not Found    {"message": "couldn't find the title"}
    ├── StoreWriteError          → 500              {"error": "couldn't insert data"}
    └── StoreUnavailableError    (raised by the store stub, never reaches a handler)

Response bodies for 404 and 500 are fixed strings. Store details live in
`context` and the logs only.
"""

from typing import Any, Dict, Optional


class SongsApiError(Exception):
    """
    Base exception for all Songs API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidRequestError(SongsApiError):
    """
    Raised when a request does not carry a required param, header or field.

    HTTP:    400 Bad Request (status taken from `status_code`)

    Example response:
        {"error": "field 'album' is required to process the request"}
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class MethodNotAllowedError(InvalidRequestError):
    """Raised when the validator has no rules for the request method."""

    status_code = 405

    def __init__(self, method: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["method"] = method
        super().__init__(
            message=f"method {method} is not allowed for the URL",
            context=ctx,
        )
        self.method = method


class SongNotFoundError(SongsApiError):
    """
    Raised when a GET lookup produced no song.

    Covers both a genuine miss and a failed read; `context["reason"]`
    records which one for the logs.
    """

    status_code = 404
    public_message = "couldn't find the title"

    def __init__(
        self,
        title: Optional[str] = None,
        reason: str = "missing",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        if title is not None:
            ctx["title"] = title
        super().__init__(message=self.public_message, context=ctx)
        self.title = title
        self.reason = reason


class StoreWriteError(SongsApiError):
    """
    Raised when a POST write was not acknowledged with status 200.

    Security Note:
        The response body is always the fixed message; the acknowledgement
        code or exception type travels in `context` for logging.
    """

    status_code = 500
    public_message = "couldn't insert data"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=self.public_message, context=context)


class StoreUnavailableError(SongsApiError):
    """Raised by every operation of a store whose client could not be built."""

    def __init__(
        self,
        message: str = "The record store client is not available",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
