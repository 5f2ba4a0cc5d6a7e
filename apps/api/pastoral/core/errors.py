"""Error handling and exception management.

Provides the API error taxonomy, global exception handlers and structured
error responses. The two fixed messages below are matched by the web client
(login redirect and permission toast) and must not vary between code paths.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import DatabaseError, IntegrityError

from pastoral.core.metrics import emit_error

logger = logging.getLogger(__name__)

UNAUTHED_ERR_MSG = "Por favor, faça login (10001)"
NOT_ADMIN_ERR_MSG = "Você não tem permissão para esta ação (10002)"


class APIError(Exception):
    """Base for errors rendered as the ``{"error": {...}}`` envelope.

    Subclasses pin ``status_code`` and ``error_code`` as class attributes;
    the base constructor still accepts them for one-off errors.

    Attributes:
        status_code: HTTP status code
        error_code: Machine-readable code returned to the client
        message: Human-readable message
        details: Extra context, omitted from the body when empty
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"

    def __init__(
        self,
        status_code: int | None = None,
        error_code: str | None = None,
        message: str = "An internal error occurred",
        details: dict[str, Any] | None = None,
    ):
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationAPIError(APIError):
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation error",
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message=message, details={"errors": errors or []})


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None):
        suffix = "" if identifier is None else f": {identifier}"
        super().__init__(
            message=f"{resource} not found{suffix}",
            details={
                "resource": resource,
                "identifier": None if identifier is None else str(identifier),
            },
        )


class ConflictError(APIError):
    """Duplicate entry, blocked delete or disallowed state transition."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "conflict"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details)


class UnauthorizedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "unauthorized"

    def __init__(self, message: str = UNAUTHED_ERR_MSG):
        super().__init__(message=message)


class ForbiddenError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"

    def __init__(self, message: str = NOT_ADMIN_ERR_MSG):
        super().__init__(message=message)


class UnsupportedMediaTypeError(APIError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    error_code = "unsupported_media_type"

    def __init__(self, content_type: str | None):
        super().__init__(
            message="Tipo de arquivo não permitido",
            details={"content_type": content_type},
        )


class PayloadTooLargeError(APIError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    error_code = "payload_too_large"

    def __init__(self, max_bytes: int):
        super().__init__(
            message="Arquivo excede o tamanho máximo permitido",
            details={"max_bytes": max_bytes},
        )


class InternalServiceError(APIError):
    """Upstream or unexpected failure; the client only sees a generic message."""

    def __init__(self, message: str = "An internal error occurred"):
        super().__init__(message=message)


def _envelope(
    code: str,
    message: str,
    request_id: str | None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "code": code,
        "message": message,
        "request_id": request_id,
    }
    if details is not None:
        body["details"] = details
    return {"error": body}


def _field_errors(raw_errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into ``field/message/type`` entries."""
    return [
        {
            "field": ".".join(str(loc) for loc in err.get("loc", [])),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "validation_error"),
        }
        for err in raw_errors
    ]


def _exception_details(exc: Exception) -> dict[str, Any]:
    return {"type": type(exc).__name__, "message": str(exc)}


def format_error_response(
    error: Exception,
    request: Request,
    include_details: bool = False,
) -> dict[str, Any]:
    """Build the ``{"error": {...}}`` body for any exception.

    ``details`` appears for API errors that carry some (or when asked for),
    always for validation failures, and for anything else only when
    ``include_details`` is set.
    """
    request_id = getattr(request.state, "request_id", None)

    if isinstance(error, APIError):
        details = error.details if (error.details or include_details) else None
        return _envelope(error.error_code, error.message, request_id, details)

    if isinstance(error, (RequestValidationError, ValidationError)):
        return _envelope(
            "validation_error",
            "Validation failed",
            request_id,
            {"errors": _field_errors(error.errors())},
        )

    return _envelope(
        "internal_error",
        "An internal error occurred",
        request_id,
        _exception_details(error) if include_details else None,
    )


def _debug_enabled(request: Request) -> bool:
    return bool(getattr(request.app.state, "debug", False))


def _report(
    request: Request,
    error_code: str,
    status_code: int,
    level: int,
    message: str,
    exc_info: bool = False,
    **extra: Any,
) -> str | None:
    """Log one failed request and emit its error metric; returns the request id."""
    request_id = getattr(request.state, "request_id", None)
    logger.log(
        level,
        message,
        extra={
            "request_id": request_id,
            "error_code": error_code,
            "status_code": status_code,
            "path": request.url.path,
            "method": request.method,
            **extra,
        },
        exc_info=exc_info,
    )
    emit_error(
        error_code=error_code,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )
    return request_id


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    _report(
        request,
        exc.error_code,
        exc.status_code,
        logging.ERROR if exc.status_code >= 500 else logging.WARNING,
        f"API error: {exc.error_code} - {exc.message}",
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc, request),
        headers=headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Client errors, not bugs
    _report(
        request,
        "validation_error",
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        logging.INFO,
        f"Validation error: {exc}",
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=format_error_response(exc, request, include_details=True),
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handle database errors the services did not remap to an APIError."""
    request_id = _report(
        request,
        "database_error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        logging.ERROR,
        f"Database error: {exc}",
        exc_info=True,
        exception_type=type(exc).__name__,
    )

    message = (
        "Database integrity constraint violated"
        if isinstance(exc, IntegrityError)
        else "A database error occurred"
    )
    details = _exception_details(exc) if _debug_enabled(request) else None

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("database_error", message, request_id, details),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _report(
        request,
        "internal_error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        logging.ERROR,
        f"Unhandled exception: {type(exc).__name__}: {exc}",
        exc_info=True,
        exception_type=type(exc).__name__,
    )

    details = None
    if _debug_enabled(request):
        details = {
            **_exception_details(exc),
            "traceback": traceback.format_exc().split("\n"),
        }

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("internal_error", "An internal error occurred", request_id, details),
    )


def setup_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register the global exception handlers on ``app``.

    ``debug`` controls whether 500 responses carry exception details.
    """
    app.state.debug = debug

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
