"""
Songs API — Request Presence Validator
========================================

What:  Checks that a request carries everything its method requires.
Why:   Keeps route handlers free of field-by-field checks and guarantees
       that an invalid request never reaches the store.
How:   A per-method table of `RequestRules` lists required query params,
       headers and body fields. The first missing item raises an
       InvalidRequestError; an unlisted method raises MethodNotAllowedError.

Presence, not type:
    A field counts as missing when it is absent, null or an empty string.
    `0`, `false` and empty lists are present. No value is coerced or
    type-checked here.
"""

import json
import logging
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field
from starlette.requests import Request

from songs_api.exceptions import InvalidRequestError, MethodNotAllowedError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}


class RequestRules(BaseModel):
    """Required inputs for one HTTP method."""

    params: List[str] = Field(default_factory=list)
    headers: List[str] = Field(default_factory=list)
    body: List[str] = Field(default_factory=list)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _media_type(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


async def read_body(request: Request) -> Dict[str, Any]:
    """
    Parse the request body into a dict according to its Content-Type.

    JSON bodies must decode to an object. Form bodies become a plain dict
    of their text fields (last value wins for repeated keys); uploaded files
    are left out, so a field sent as a file counts as missing. Anything else
    parses to an empty dict, which then fails the presence checks.
    """
    media_type = _media_type(request)

    if media_type == "application/json" or media_type.endswith("+json"):
        raw = await request.body()
        try:
            parsed = json.loads(raw) if raw else {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidRequestError(
                message="request body must be a JSON object",
                context={"decode_error": str(e)},
            )
        if not isinstance(parsed, dict):
            raise InvalidRequestError(
                message="request body must be a JSON object",
                context={"body_type": type(parsed).__name__},
            )
        return parsed

    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    return {}


async def validate_request(
    request: Request, rules: Mapping[str, RequestRules]
) -> Dict[str, Any]:
    """
    Validate `request` against the rules for its method.

    Args:
        request: Incoming Starlette/FastAPI request.
        rules:   Upper-case method name → RequestRules.

    Returns:
        The parsed body when the method declares body fields, else {}.

    Raises:
        MethodNotAllowedError:  The method has no entry in `rules` (405).
        InvalidRequestError:   A required param, header or field is missing (400).
    """
    method = request.method.upper()
    method_rules = rules.get(method)
    if method_rules is None:
        raise MethodNotAllowedError(method=method)

    for param in method_rules.params:
        if _is_missing(request.query_params.get(param)):
            raise InvalidRequestError(
                message=f"param '{param}' is required to process the request",
                field=param,
            )

    for header in method_rules.headers:
        if _is_missing(request.headers.get(header)):
            raise InvalidRequestError(
                message=f"header '{header}' is required to process the request",
                field=header,
            )

    body: Dict[str, Any] = {}
    if method_rules.body:
        body = await read_body(request)
        for name in method_rules.body:
            if _is_missing(body.get(name)):
                raise InvalidRequestError(
                    message=f"field '{name}' is required to process the request",
                    field=name,
                )

    logger.debug("Request %s %s passed validation", method, request.url.path)
    return body
