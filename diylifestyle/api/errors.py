"""Exception handlers: every failure leaves the app through one of these.

JSON failures share one envelope::

    {"error": {"code": "STORE_UNAVAILABLE", "message": "...", "details": {}}}

Missing pages keep a plain-text body, and the auth gate keeps its fixed
plain-text rejection.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from diylifestyle.auth.gate import LOGIN_REQUIRED_BODY
from diylifestyle.exceptions import LoginRequired, StoreError
from diylifestyle.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = "Page is not found"
INTERNAL_ERROR_MESSAGE = "There was an error, please try again later"

_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    503: "STORE_UNAVAILABLE",
}


def error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return PlainTextResponse(NOT_FOUND_BODY, status_code=404)

    # Already structured by the raiser
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)

    code = _STATUS_CODES.get(exc.status_code, "INTERNAL_ERROR" if exc.status_code >= 500 else "BAD_REQUEST")
    message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"
    response = error_response(exc.status_code, code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if len(errors) == 1:
        loc = [str(part) for part in errors[0].get("loc", []) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = errors[0].get("msg", "Validation error")
        message = f"{field}: {msg}" if field else msg
    else:
        message = f"{len(errors)} validation errors"
    details = {
        "validation_errors": [
            {"loc": [str(p) for p in e.get("loc", [])], "msg": e.get("msg", ""), "type": e.get("type", "")}
            for e in errors
        ]
    }
    return error_response(422, "VALIDATION_ERROR", message, details)


async def login_required_handler(request: Request, exc: LoginRequired):
    # No explicit 401 and no redirect: the gate answers 200 with a fixed body
    return PlainTextResponse(LOGIN_REQUIRED_BODY)


async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return error_response(503, "STORE_UNAVAILABLE", "The database is unavailable, please try again later")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE, {"type": type(exc).__name__})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
