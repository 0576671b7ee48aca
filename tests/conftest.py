"""pytest configuration and fixtures for orchestration-service tests.

This module provides shared fixtures for unit and integration tests.
Model calls are served by in-process fake invokers; nothing leaves the
process.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings, get_settings
from src.core.logging import reset_logging
from src.orchestration.orchestrator import Orchestrator
from tests.fakes import TEST_PROMPT, FakeModelInvoker


if TYPE_CHECKING:
    from fastapi import FastAPI


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_state() -> Generator[None, None, None]:
    """Reset cached settings and logging configuration around each test."""
    get_settings.cache_clear()
    reset_logging()
    yield
    get_settings.cache_clear()
    reset_logging()


@pytest.fixture
def settings() -> Settings:
    """Provide Settings that do not depend on the environment."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        default_strategy="consensus",
        max_concurrency=0,
        model_endpoints=[],
        tracing_enabled=False,
    )


# =============================================================================
# Orchestration Fixtures
# =============================================================================


@pytest.fixture
def fake_invoker() -> FakeModelInvoker:
    """Provide a fake invoker answering every model with ANSWER_TEXT."""
    return FakeModelInvoker()


@pytest.fixture
def orchestrator(fake_invoker: FakeModelInvoker) -> Orchestrator:
    """Provide an Orchestrator wired to the fake invoker."""
    return Orchestrator(invoker=fake_invoker)


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app(settings: Settings, orchestrator: Orchestrator) -> Generator[FastAPI, None, None]:
    """Create a FastAPI application with the fake orchestrator wired in.

    Yields:
        FastAPI application instance for testing.
    """
    from src.main import create_app

    test_app = create_app(settings)
    test_app.state.orchestrator = orchestrator
    yield test_app


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing.

    Args:
        app: FastAPI application.

    Yields:
        AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://testserver") as client:
        yield client


# =============================================================================
# Request Fixtures
# =============================================================================


@pytest.fixture
def sample_job_request() -> dict[str, object]:
    """Provide a sample POST /run body."""
    return {
        "prompt": TEST_PROMPT,
        "models": ["m1", "m2"],
        "strategy": "consensus",
    }
