"""Tests for error handling and request logging middleware."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from orderdesk.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from orderdesk.api.middleware.error_handler import setup_exception_handlers
from orderdesk.core.exceptions import (
    CorruptRecordError,
    InvalidTransitionError,
    LocationLookupError,
)


@pytest.fixture
async def client():
    app = FastAPI()
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    setup_exception_handlers(app)

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    @app.get("/transition")
    async def transition():
        raise InvalidTransitionError("INVOICED", "PACKED", "ord-1", reason="order is closed")

    @app.get("/lookup")
    async def lookup():
        raise LocationLookupError("411001", "HTTP 503")

    @app.get("/corrupt")
    async def corrupt():
        raise CorruptRecordError("ord-1", "unknown status 'MISPLACED'")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestLoggingMiddleware:
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/ok", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"
        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/ok")

        assert len(response.headers["X-Request-ID"]) == 8


class TestErrorHandlerMiddleware:
    async def test_invalid_transition(self, client: AsyncClient):
        response = await client.get("/transition")

        assert response.status_code == 409
        data = response.json()
        assert data["error_code"] == "INVALID_TRANSITION"
        assert "current=INVOICED" in data["detail"]
        assert data["path"] == "/transition"

    async def test_lookup_failure_is_bad_gateway(self, client: AsyncClient):
        response = await client.get("/lookup")

        assert response.status_code == 502
        assert response.json()["error_code"] == "LOCATION_LOOKUP_FAILED"

    async def test_corrupt_record_is_server_error(self, client: AsyncClient):
        response = await client.get("/corrupt")

        assert response.status_code == 500
        assert response.json()["error_code"] == "CORRUPT_RECORD"

    async def test_unexpected_exception(self, client: AsyncClient):
        response = await client.get("/boom")

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "RuntimeError"
        assert data["hint"] == "An internal error occurred. Check server logs."

    async def test_unknown_route_uses_standard_shape(self, client: AsyncClient):
        response = await client.get("/missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"
