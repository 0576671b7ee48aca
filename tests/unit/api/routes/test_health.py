"""Unit tests for health API routes.

Tests the /health (liveness) and /health/ready (readiness) endpoints.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from src.orchestration.orchestrator import Orchestrator
from tests.fakes import FakeModelInvoker


# =============================================================================
# Constants
# =============================================================================

HEALTH_ENDPOINT = "/health"
READY_ENDPOINT = "/health/ready"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def health_app() -> FastAPI:
    """Create FastAPI app with only the health router."""
    from src.api.routes.health import router

    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def client(health_app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(health_app)


# =============================================================================
# /health
# =============================================================================


class TestHealthEndpoint:
    """Test /health liveness endpoint."""

    def test_health_returns_200(self, client: TestClient) -> None:
        response = client.get(HEALTH_ENDPOINT)
        assert response.status_code == status.HTTP_200_OK

    def test_health_body(self, client: TestClient) -> None:
        data = client.get(HEALTH_ENDPOINT).json()

        assert data["status"] == "ok"
        assert data["service"] == "orchestration-service"
        assert data["version"] == "0.1.0"

    def test_health_uses_configured_service_name(
        self, health_app: FastAPI, client: TestClient
    ) -> None:
        health_app.state.service_name = "orchestrator-eu"
        assert client.get(HEALTH_ENDPOINT).json()["service"] == "orchestrator-eu"


# =============================================================================
# /health/ready
# =============================================================================


class TestReadinessEndpoint:
    """Test /health/ready readiness endpoint."""

    def test_not_ready_without_orchestrator(self, client: TestClient) -> None:
        response = client.get(READY_ENDPOINT)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        data = response.json()
        assert data["status"] == "not_ready"
        assert data["reason"] == "Model invoker not configured"

    def test_ready_with_orchestrator(self, health_app: FastAPI, client: TestClient) -> None:
        health_app.state.orchestrator = Orchestrator(
            invoker=FakeModelInvoker(),
            max_concurrency=3,
        )

        response = client.get(READY_ENDPOINT)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "ready",
            "invoker": "fake",
            "max_concurrency": 3,
        }
