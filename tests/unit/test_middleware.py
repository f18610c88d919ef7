"""
Unit tests for middleware components.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from hotel_reservations.middleware import RequestIDMiddleware


@pytest.fixture
def app_with_middleware() -> FastAPI:
    """Create FastAPI app with RequestIDMiddleware for testing."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def test_endpoint(request: Request) -> dict[str, str]:
        """Return the request ID seen by the handler and by the log context."""
        bound = structlog.contextvars.get_contextvars()
        return {
            "request_id": request.state.request_id,
            "logged_request_id": bound.get("request_id", ""),
        }

    return app


@pytest.fixture
def client(app_with_middleware: FastAPI) -> TestClient:
    """FastAPI test client with middleware."""
    return TestClient(app_with_middleware)


@pytest.mark.unit
def test_request_id_middleware_adds_header(client: TestClient) -> None:
    response = client.get("/test")

    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 36  # UUID length


@pytest.mark.unit
def test_request_id_matches_header_state_and_log_context(client: TestClient) -> None:
    response = client.get("/test")

    data = response.json()
    assert data["request_id"] == response.headers["X-Request-ID"]
    assert data["logged_request_id"] == data["request_id"]


@pytest.mark.unit
def test_request_id_middleware_unique_per_request(client: TestClient) -> None:
    first = client.get("/test").headers["X-Request-ID"]
    second = client.get("/test").headers["X-Request-ID"]

    assert first != second


@pytest.mark.unit
def test_incoming_request_id_is_kept(client: TestClient) -> None:
    """A caller-supplied id is propagated so logs correlate across services."""
    response = client.get("/test", headers={"X-Request-ID": "booking-ui-42"})

    assert response.headers["X-Request-ID"] == "booking-ui-42"
    assert response.json()["request_id"] == "booking-ui-42"
