"""Tests for main FastAPI application.

Tests verify:
- App factory configuration (title, version, docs in production)
- Lifespan wires the Orchestrator from settings
- Missing endpoints leave the service up but not ready
- Shutdown closes the invoker
"""

from __future__ import annotations

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.config import Settings
from src.orchestration.orchestrator import Orchestrator
from src.providers.http import HttpModelInvoker
from tests.fakes import FakeModelInvoker


@pytest.fixture
def env_endpoints() -> Generator[None, None, None]:
    """Configure one model endpoint and a bounded pool through the environment."""
    env = {
        "ORCHESTRATION_MODEL_ENDPOINTS": "http://runner.test/run",
        "ORCHESTRATION_MAX_CONCURRENCY": "2",
    }
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def env_empty() -> Generator[None, None, None]:
    """Run with no ORCHESTRATION_* configuration."""
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestAppInstance:
    """Test FastAPI app instance creation."""

    def test_module_app_is_fastapi_instance(self) -> None:
        from src.main import app

        assert isinstance(app, FastAPI)

    def test_app_metadata(self) -> None:
        from src.main import create_app

        app = create_app(Settings())

        assert app.title == "orchestration-service"
        assert app.version == "0.1.0"

    def test_docs_enabled_in_development(self) -> None:
        from src.main import create_app

        app = create_app(Settings(environment="development"))
        assert app.docs_url == "/docs"

    def test_docs_disabled_in_production(self) -> None:
        from src.main import create_app

        app = create_app(Settings(environment="production"))

        assert app.docs_url is None
        assert app.redoc_url is None

    def test_routes_registered(self) -> None:
        from src.main import create_app

        paths = set(create_app(Settings(environment="development")).openapi()["paths"])
        assert {"/run", "/health", "/health/ready"} <= paths


class TestAppLifespan:
    """Test the lifespan startup and shutdown."""

    @pytest.mark.usefixtures("env_endpoints")
    def test_startup_wires_orchestrator(self) -> None:
        from src.main import create_app

        app = create_app()
        with TestClient(app) as client:
            orchestrator = app.state.orchestrator
            assert isinstance(orchestrator, Orchestrator)
            assert isinstance(orchestrator.invoker, HttpModelInvoker)
            assert orchestrator.max_concurrency == 2
            assert app.state.initialized is True
            assert client.get("/health/ready").status_code == 200

        assert app.state.orchestrator is None
        assert app.state.initialized is False

    @pytest.mark.usefixtures("env_empty")
    def test_startup_without_endpoints_is_not_ready(self) -> None:
        from src.main import create_app

        app = create_app()
        with TestClient(app) as client:
            assert app.state.orchestrator is None
            assert client.get("/health").status_code == 200
            assert client.get("/health/ready").status_code == 503

    @pytest.mark.usefixtures("env_empty")
    def test_preset_orchestrator_kept_and_closed(self) -> None:
        from src.main import create_app

        invoker = FakeModelInvoker()
        app = create_app()
        app.state.orchestrator = Orchestrator(invoker=invoker)

        with TestClient(app) as client:
            assert app.state.orchestrator.invoker is invoker
            assert client.post("/run", json={"prompt": "Q", "models": ["m1"]}).status_code == 200

        assert invoker.closed is True

    @pytest.mark.usefixtures("env_empty")
    def test_tracing_enabled_installs_middleware(self) -> None:
        from src.main import create_app
        from src.observability.tracing import TracingMiddleware

        with patch("src.main.setup_tracing") as setup, patch(
            "src.main.shutdown_tracing"
        ) as shutdown, patch.dict(os.environ, {"ORCHESTRATION_TRACING_ENABLED": "true"}):
            app = create_app(Settings())
            assert any(m.cls is TracingMiddleware for m in app.user_middleware)

            with TestClient(app):
                setup.assert_called_once()

            shutdown.assert_called_once()
