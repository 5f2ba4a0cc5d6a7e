"""Tests for FastAPI middleware functionality."""

from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from pastoral.core.config import settings
from pastoral.core.metrics import _normalize_path
from pastoral.core.middleware import RequestIDMiddleware, RequestLoggingMiddleware


class TestRequestIDMiddleware:
    def test_adds_request_id_when_missing(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 36  # UUID format

    def test_preserves_existing_request_id(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "custom-id-1"})
        assert response.headers["X-Request-ID"] == "custom-id-1"

    def test_request_id_in_state(self):
        test_app = FastAPI()

        @test_app.get("/test")
        async def test_endpoint(request: Request):
            return {"request_id": getattr(request.state, "request_id", None)}

        test_app.add_middleware(RequestIDMiddleware)

        response = TestClient(test_app).get("/test")
        assert response.json()["request_id"] == response.headers["X-Request-ID"]


class TestSecurityHeadersMiddleware:
    def test_security_headers_present(self, client: TestClient):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_hsts_only_in_production(self, client: TestClient, monkeypatch):
        assert "Strict-Transport-Security" not in client.get("/health").headers

        monkeypatch.setattr(settings, "app_env", "production")

        assert "max-age=31536000" in client.get("/health").headers["Strict-Transport-Security"]


class TestRequestLoggingMiddleware:
    def _app(self) -> FastAPI:
        app = FastAPI()

        @app.get("/api/v1/baptisms/{baptism_id}")
        async def endpoint(baptism_id: int):
            return {"id": baptism_id}

        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(RequestIDMiddleware)
        return app

    def test_logs_request_and_response(self, caplog):
        caplog.set_level(logging.INFO)

        response = TestClient(self._app()).get("/api/v1/baptisms/12")

        assert response.status_code == 200
        assert response.headers["X-Process-Time"].endswith("ms")

        messages = [record.message for record in caplog.records]
        request_logs = [json.loads(m) for m in messages if '"type": "http_request"' in m]
        response_logs = [json.loads(m) for m in messages if '"type": "http_response"' in m]
        assert request_logs[0]["path"] == "/api/v1/baptisms/12"
        assert response_logs[0]["status_code"] == 200
        assert request_logs[0]["request_id"] == response.headers["X-Request-ID"]

    def test_excludes_health_checks(self, client: TestClient, caplog):
        caplog.set_level(logging.INFO)
        caplog.clear()

        client.get("/api/v1/system/health", params={"timestamp": 1})

        assert not [r for r in caplog.records if '"type": "http_request"' in r.message]


class TestNormalizePath:
    def test_numeric_and_member_ids(self):
        assert _normalize_path("/api/v1/dashboard/scale/15/presence") == (
            "/api/v1/dashboard/scale/{id}/presence"
        )
        assert _normalize_path("/api/v1/pastoral-members/manual_3fa2b1") == (
            "/api/v1/pastoral-members/{id}"
        )
        assert _normalize_path("/api/v1/auth/profile/user_2abcXYZ") == "/api/v1/auth/profile/{id}"

    def test_static_paths_untouched(self):
        assert _normalize_path("/api/v1/dashboard/annual-goal") == "/api/v1/dashboard/annual-goal"
