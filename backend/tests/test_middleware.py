"""
Type Editor Backend — Middleware Tests
=======================================

What:  Request id propagation, rate limiting, access logging and CORS.
How:   Rate limiting runs on a minimal app with patched limits; the rest
       goes through the real application.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from type_editor.middleware.rate_limit import RateLimitMiddleware


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/documents")

        rid = response.headers["X-Request-ID"]
        assert len(rid) == 8

    @pytest.mark.asyncio
    async def test_client_id_echoed(self, test_client):
        response = await test_client.get("/api/documents", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_id_in_error_body(self, test_client):
        response = await test_client.get("/api/nodes/999", headers={"X-Request-ID": "trace-43"})

        assert response.json()["request_id"] == "trace-43"


def _limited_app() -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/uploads/{name}")
    async def uploads(name: str):
        return {"name": name}

    app.add_middleware(RateLimitMiddleware)
    return app


class TestRateLimit:

    def setup_method(self):
        self.limits = MagicMock(rate_limit_requests=2, rate_limit_window=60)

    @pytest.mark.asyncio
    async def test_rejects_over_limit(self):
        transport = ASGITransport(app=_limited_app())
        with patch("type_editor.middleware.rate_limit.settings", self.limits):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                assert (await client.get("/ping")).status_code == 200
                assert (await client.get("/ping")).status_code == 200
                response = await client.get("/ping")

        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert 1 <= int(response.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_excluded_paths_not_counted(self):
        transport = ASGITransport(app=_limited_app())
        with patch("type_editor.middleware.rate_limit.settings", self.limits):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                for _ in range(5):
                    assert (await client.get("/health")).status_code == 200
                    assert (await client.get("/uploads/a.png")).status_code == 200
                assert (await client.get("/ping")).status_code == 200

    @pytest.mark.asyncio
    async def test_window_expiry(self):
        transport = ASGITransport(app=_limited_app())
        with patch("type_editor.middleware.rate_limit.settings", self.limits), \
             patch("type_editor.middleware.rate_limit.time.time") as mock_time:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                mock_time.return_value = 1000.0
                await client.get("/ping")
                await client.get("/ping")
                assert (await client.get("/ping")).status_code == 429

                mock_time.return_value = 1061.0
                assert (await client.get("/ping")).status_code == 200


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_request_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="type_editor.access")

        await test_client.get("/api/documents", headers={"X-Request-ID": "log-1"})

        records = [r for r in caplog.records if r.name == "type_editor.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert "GET /api/documents 200" in records[0].getMessage()
        assert records[0].request_id == "log-1"

    @pytest.mark.asyncio
    async def test_client_error_logged_as_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="type_editor.access")

        await test_client.get("/api/documents/999")

        records = [r for r in caplog.records if r.name == "type_editor.access"]
        assert records[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="type_editor.access")

        await test_client.get("/health")
        await test_client.get("/health/detailed")

        assert not [r for r in caplog.records if r.name == "type_editor.access"]


class TestCors:

    @pytest.mark.asyncio
    async def test_preflight_from_allowed_origin(self, test_client):
        response = await test_client.options(
            "/api/documents",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    @pytest.mark.asyncio
    async def test_preflight_from_unknown_origin(self, test_client):
        response = await test_client.options(
            "/api/documents",
            headers={
                "Origin": "http://evil.example",
                "Access-Control-Request-Method": "DELETE",
            },
        )

        assert "access-control-allow-origin" not in response.headers
