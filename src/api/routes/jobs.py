"""Job API route.

Provides POST /run, which runs one orchestration job and returns the
merged result.

The body is parsed by hand rather than through a FastAPI body model so
that malformed input yields the service's own BadRequest messages
instead of FastAPI's 422 format.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import ValidationError

from src.core.config import Settings, get_settings
from src.core.exceptions import BadRequestError, InternalError
from src.core.logging import get_logger
from src.models.requests import JobRequest
from src.models.responses import JobResponse
from src.orchestration.orchestrator import Orchestrator


# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(tags=["jobs"])
logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

INVALID_JSON_MESSAGE = "Invalid JSON body"
INVALID_PROMPT_MESSAGE = "prompt is required and must be a string"
INVALID_MODELS_MESSAGE = "models must be a non-empty array"


# =============================================================================
# Helper Functions
# =============================================================================


def _get_orchestrator(request: Request) -> Orchestrator:
    """Get the orchestrator from app state.

    Raises:
        InternalError: If the service started without a model invoker.
    """
    orchestrator: Orchestrator | None = getattr(
        request.app.state, "orchestrator", None
    )
    if orchestrator is None:
        raise InternalError("Orchestrator not initialized")
    return orchestrator


async def _read_body(request: Request) -> dict[str, Any]:
    """Decode the JSON body.

    Raises:
        BadRequestError: If the body is not valid JSON.
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequestError(INVALID_JSON_MESSAGE) from e
    return body if isinstance(body, dict) else {}


def parse_job_request(body: dict[str, Any], default_strategy: str) -> JobRequest:
    """Validate a decoded body into a JobRequest.

    Args:
        body: Decoded JSON object.
        default_strategy: Strategy used when the body names none.

    Returns:
        Validated JobRequest.

    Raises:
        BadRequestError: If a field is missing or has the wrong type.
    """
    prompt = body.get("prompt")
    if not prompt or not isinstance(prompt, str):
        raise BadRequestError(INVALID_PROMPT_MESSAGE, field="prompt")

    models = body.get("models")
    if not isinstance(models, list) or not models:
        raise BadRequestError(INVALID_MODELS_MESSAGE, field="models")

    payload = dict(body)
    if payload.get("strategy") is None:
        payload["strategy"] = default_strategy

    try:
        return JobRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        raise BadRequestError(message, field=field or None) from e


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/run",
    response_model=JobResponse,
    response_model_exclude_none=True,
    summary="Run a multi-model job",
    description="Invokes every requested model and merges their responses.",
    responses={
        400: {"description": "Invalid request body"},
        500: {"description": "Job or internal error"},
    },
)
async def run_job(request: Request) -> JobResponse:
    """Run one orchestration job.

    Args:
        request: FastAPI request object.

    Returns:
        JobResponse with result, responses, structured and timings.

    Raises:
        BadRequestError: Invalid JSON or fields (400).
        JobError: A model failed (500).
        InternalError: Service not initialized (500).
    """
    settings: Settings = getattr(request.app.state, "settings", None) or get_settings()
    body = await _read_body(request)
    job_request = parse_job_request(body, settings.default_strategy)
    orchestrator = _get_orchestrator(request)

    logger.debug(
        "Run request accepted",
        strategy=job_request.strategy.value,
        model_count=len(job_request.models),
    )

    job = await orchestrator.run_job(job_request)
    return JobResponse.from_job_result(job)
