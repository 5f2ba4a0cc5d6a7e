"""ASGI entry point: ``uvicorn pastoral.main:app``."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pastoral.core.config import settings
from pastoral.core.errors import setup_error_handlers
from pastoral.core.logging_setup import setup_logging
from pastoral.core.otel_setup import setup_opentelemetry
from pastoral.core.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    setup_cors,
    setup_gzip,
)
from pastoral.common.db import engine
from pastoral.activities.routes import routers as activity_routers
from pastoral.auth.routes import router as auth_router
from pastoral.baptisms.routes import agenda_router, router as baptisms_router
from pastoral.dashboard.routes import router as dashboard_router
from pastoral.finance.routes import router as finance_router
from pastoral.members.routes import router as members_router
from pastoral.system.routes import router as system_router
from pastoral.uploads.routes import router as uploads_router

API_PREFIX = "/api/v1"
VERSION = "0.1.0"

logger = logging.getLogger(__name__)

# Both must run before the app (and its instrumented engine) is in use
setup_logging()
setup_opentelemetry()

app = FastAPI(title=f"{settings.app_name} API", version=VERSION)
setup_error_handlers(app, debug=settings.app_env != "production")

# Starlette runs the last-added middleware first, so the request id goes on
# last and wraps everything else.
if settings.enable_gzip:
    setup_gzip(app)
setup_cors(app)
if settings.enable_request_logging:
    app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# Routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(members_router, prefix=API_PREFIX)
app.include_router(baptisms_router, prefix=API_PREFIX)
app.include_router(agenda_router, prefix=API_PREFIX)
app.include_router(dashboard_router, prefix=API_PREFIX)
app.include_router(finance_router, prefix=API_PREFIX)
for activity_router in activity_routers:
    app.include_router(activity_router, prefix=API_PREFIX)
app.include_router(uploads_router, prefix=API_PREFIX)
app.include_router(system_router, prefix=API_PREFIX)

# Locally stored uploads are served by the API itself
if settings.upload_backend == "local" and settings.upload_public_base_url.startswith("/"):
    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount(
        settings.upload_public_base_url,
        StaticFiles(directory=settings.upload_dir),
        name="uploads",
    )


@app.get("/health")
async def health() -> dict:
    """Liveness check for the load balancer; never touches the database."""
    return {"status": "ok", "env": settings.app_env, "version": VERSION}


@app.get(f"{API_PREFIX}/diag")
def diag() -> dict:
    """Database connectivity and configuration flags (no secrets)."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error("Diagnostic database check failed: %s", e)
        database = "error"

    return {
        "database": database,
        "database_backend": engine.url.get_backend_name(),
        "env": settings.app_env,
        "upload_backend": settings.upload_backend,
        "identity_api_configured": bool(settings.identity_secret_key),
        "admin_emails_configured": bool(settings.admin_email_set),
        "metrics_enabled": settings.enable_metrics,
    }
