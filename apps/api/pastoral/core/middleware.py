"""HTTP middleware: request ids, security headers, access logging, CORS."""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from pastoral.core.config import settings
from pastoral.core.metrics import emit_http_request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}
HSTS_VALUE = "max-age=31536000; includeSubDomains"

# Health checks and docs are not worth an access log line
DEFAULT_LOG_EXCLUDES = (
    "/health",
    "/api/v1/system/health",
    "/docs",
    "/openapi.json",
    "/redoc",
)

# Vite dev server and local API
DEV_CORS_ORIGINS = [
    "http://localhost:5000",
    "http://localhost:5173",
    "http://localhost:8000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8000",
]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if settings.app_env == "production":
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def _log_json(level: int, record: dict[str, Any], request_id: str) -> None:
    logger.log(level, json.dumps(record, default=str), extra={"request_id": request_id})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Write one JSON line per request and per response, and emit the
    request metric.

    Must sit inside RequestIDMiddleware so the id is already on
    ``request.state``.
    """

    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or DEFAULT_LOG_EXCLUDES)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", "unknown")
        started = time.perf_counter()

        incoming: dict[str, Any] = {
            "timestamp": time.time(),
            "level": "INFO",
            "type": "http_request",
            "request_id": request_id,
            "method": request.method,
            "path": path,
            "query_params": dict(request.query_params),
            "client_host": request.client.host if request.client else None,
        }
        body_size = request.headers.get("content-length", "")
        if request.method in ("POST", "PUT", "PATCH") and body_size.isdigit():
            incoming["request_body_size"] = int(body_size)
        _log_json(logging.INFO, incoming, request_id)

        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            logger.error(
                f"Request processing error: {error}",
                extra={"request_id": request_id, "method": request.method, "path": path},
                exc_info=True,
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - started) * 1000
            # Set by the auth dependency once the caller is resolved
            user_id = getattr(request.state, "user_id", None)

            emit_http_request(
                method=request.method,
                path=path,
                status_code=status_code,
                duration_ms=duration_ms,
                request_id=request_id,
                user_id=user_id,
            )

            outgoing: dict[str, Any] = {
                "timestamp": time.time(),
                "level": logging.getLevelName(_level_for(status_code)),
                "type": "http_response",
                "request_id": request_id,
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "user_id": user_id,
            }
            if error:
                outgoing["error"] = error
            _log_json(_level_for(status_code), outgoing, request_id)

        response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"
        return response


def cors_origins() -> list[str]:
    if settings.cors_origins:
        return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if settings.app_env == "production":
        return []
    return list(DEV_CORS_ORIGINS)


def setup_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "X-Process-Time"],
    )


def setup_gzip(app: FastAPI) -> None:
    app.add_middleware(GZipMiddleware, minimum_size=1000)
