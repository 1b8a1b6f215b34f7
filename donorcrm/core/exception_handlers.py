"""Error responses for the automation API.

Every error body has the shape {"error", "message", ["details"], "request_id"},
so a failed trigger or cron call can be matched to the server log lines that
carry the same X-Request-ID.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from donorcrm.core.config import get_settings
from donorcrm.domain.exceptions import CrmException

logger = logging.getLogger(__name__)

# Domain error_code -> HTTP status; unlisted codes are client errors (400).
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "TENANT_NOT_FOUND": 404,
    # Bad or missing CRON_SECRET
    "AUTHENTICATION_ERROR": 401,
    "VALIDATION_ERROR": 400,
    # Turning on an automation that has no steps
    "AUTOMATION_ACTIVATION_ERROR": 409,
    # No DATABASE_URL or no engine; the caller may retry later
    "SERVICE_UNAVAILABLE": 503,
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _error_response(request: Request, status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={**body, "request_id": _request_id(request)},
    )


def _crm_exception_handler(request: Request, exc: CrmException) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.warning(
            "%s %s -> %d %s (request_id=%s)",
            request.method,
            request.url.path,
            status,
            exc.error_code,
            _request_id(request),
        )
    return _error_response(request, status, exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        request,
        422,
        {
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Drop non-serializable ctx values (e.g. the ValueError raised by a validator)."""
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(
        request, exc.status_code, {"error": "HTTP_ERROR", "message": exc.detail}
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 with the exception text only in debug."""
    logger.exception(
        "Unhandled error on %s %s (request_id=%s)",
        request.method,
        request.url.path,
        _request_id(request),
    )
    message: Any = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(request, 500, {"error": "INTERNAL_ERROR", "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CrmException, _crm_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
