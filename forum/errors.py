"""
Exception handlers for the forum API.

Every error leaves as JSON with a ``message`` field:

- HTTP exceptions raised by guards (401/403/404/409 ...)
- request validation errors, reported as 400 with per-field detail
- anything unexpected, reported as a bare 500
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings

logger = logging.getLogger(__name__)

INVALID_INPUT = "Invalid input - check each field for errors"
INVALID_FORM_DATA = "Invalid form data - see 'errors' for detail"

_LOCATIONS = ("body", "query", "path", "header", "cookie")
_SCALARS = (str, int, float, bool)


class MembershipInvariantError(RuntimeError):
    """a group's member/mod/admin/banned sets disagree with each other"""


def field_error(msg: str, value=None, location: str = "body") -> dict:
    error = {"msg": msg, "location": location}
    if isinstance(value, _SCALARS):
        error["value"] = value
    return error


def invalid_input(errors: dict, message: str = INVALID_INPUT) -> dict:
    """HTTPException detail for field errors found outside the request parser"""
    return {"message": message, "errors": errors}


def format_validation_errors(errors) -> dict:
    """turn pydantic's error list into {field: {msg, location, value}}"""
    formatted = {}
    for error in errors:
        loc = error.get("loc", ())
        location = loc[0] if loc and loc[0] in _LOCATIONS else "body"
        # list indexes (and the position of a JSON syntax error) are not fields
        fields = [part for part in loc if isinstance(part, str) and part not in _LOCATIONS]
        field = fields[-1] if fields else location

        msg = error.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]

        # first error per field wins, same as the form the client filled in
        if field not in formatted:
            formatted[field] = field_error(msg, error.get("input"), location)
    return formatted


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    path = request.url.path
    detail = exc.detail

    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = f"No resource found for {request.method} request at {path}"

    if exc.status_code >= 500:
        logger.error("HTTP %s on %s: %s", exc.status_code, path, detail)
    else:
        logger.debug("HTTP %s on %s %s: %s", exc.status_code, request.method, path, detail)

    content = dict(detail) if isinstance(detail, dict) else {"message": detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc.errors())
    logger.debug("Validation failed on %s: %s", request.url.path, ", ".join(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": INVALID_INPUT, "errors": errors},
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled %s on %s %s: %s",
        type(exc).__name__, request.method, request.url.path, exc,
        exc_info=exc,
    )
    content = {"message": "Internal server error"}
    if settings.DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
