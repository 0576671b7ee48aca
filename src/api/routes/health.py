"""Health check API routes for orchestration-service.

Provides liveness (/health) and readiness (/health/ready) endpoints
for Kubernetes probes and service monitoring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src import __version__
from src.core.constants import DEFAULT_SERVICE_NAME


if TYPE_CHECKING:
    from src.orchestration.orchestrator import Orchestrator


# =============================================================================
# Constants
# =============================================================================

STATUS_OK = "ok"
STATUS_READY = "ready"
STATUS_NOT_READY = "not_ready"
REASON_NOT_INITIALIZED = "Model invoker not configured"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /health liveness endpoint."""

    status: str = Field(
        default=STATUS_OK,
        description="Service health status",
        examples=["ok"],
    )
    service: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Service name",
        examples=["orchestration-service"],
    )
    version: str = Field(
        default=__version__,
        description="Service version",
        examples=["0.1.0"],
    )


class ReadinessResponse(BaseModel):
    """Response model for /health/ready readiness endpoint."""

    status: str = Field(
        description="Readiness status",
        examples=["ready", "not_ready"],
    )
    invoker: str | None = Field(
        default=None,
        description="Name of the wired model invoker",
        examples=["http:http://models:8080/invoke"],
    )
    max_concurrency: int | None = Field(
        default=None,
        description="Per-job consensus pool size (0 = unbounded)",
        examples=[0, 4],
    )
    reason: str | None = Field(
        default=None,
        description="Reason for not ready status",
        examples=["Model invoker not configured"],
    )


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["health"])


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
    description="Returns 200 if the service is running. Used for K8s liveness probe.",
)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe endpoint.

    Returns:
        HealthResponse with status 'ok'.
    """
    service_name: str = getattr(request.app.state, "service_name", DEFAULT_SERVICE_NAME)
    return HealthResponse(status=STATUS_OK, service=service_name, version=__version__)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready", "model": ReadinessResponse},
        503: {"description": "Service is not ready", "model": ReadinessResponse},
    },
    summary="Readiness check",
    description="Returns 200 if a model invoker is wired. Used for K8s readiness probe.",
)
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Args:
        request: FastAPI request to access app state.

    Returns:
        JSONResponse with readiness status.
    """
    orchestrator: Orchestrator | None = getattr(
        request.app.state, "orchestrator", None
    )

    if orchestrator is None:
        response = ReadinessResponse(
            status=STATUS_NOT_READY,
            reason=REASON_NOT_INITIALIZED,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(exclude_none=True),
        )

    response = ReadinessResponse(
        status=STATUS_READY,
        invoker=orchestrator.invoker.name,
        max_concurrency=orchestrator.max_concurrency,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(exclude_none=True),
    )
