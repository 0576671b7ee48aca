"""Error handlers for FastAPI exception handling.

Every failure leaves the service in one envelope:

{
    "error": {
        "type": "BadRequest|JobError|InternalError|NotFound|...",
        "message": "Human-readable message",
        "details": {...}
    }
}

``details`` is omitted when the error carries no extra attributes.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.exceptions import (
    BadRequestError,
    ErrorType,
    OrchestrationServiceError,
)
from src.core.logging import get_logger


logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

NOT_FOUND_MESSAGE = "Not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


# =============================================================================
# Error Response Models (Pydantic)
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail schema.

    Attributes:
        type: Stable error type string.
        message: Human-readable error message.
        details: Additional error-specific information.
    """

    type: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Error response wrapper.

    Attributes:
        error: The error detail object.
    """

    error: ErrorDetail


# =============================================================================
# Status Code Mapping
# =============================================================================


def get_status_code_for_error(error: Exception) -> int:
    """Determine HTTP status code based on exception type.

    Args:
        error: The exception to get status code for.

    Returns:
        400 for request errors, 500 for everything else.
    """
    if isinstance(error, BadRequestError):
        return 400
    return 500


# =============================================================================
# Error Details Extraction
# =============================================================================


def extract_error_details(error: Exception) -> dict[str, Any]:
    """Extract additional details from exception attributes.

    Args:
        error: The exception to extract details from.

    Returns:
        Dictionary of the known attributes that are set.
    """
    known_attrs = [
        "model_id",
        "strategy",
        "completed_models",
        "total_models",
        "upstream_type",
        "field",
        "setting",
    ]

    details: dict[str, Any] = {}
    for attr in known_attrs:
        value = getattr(error, attr, None)
        if value is not None:
            details[attr] = value
    return details


# =============================================================================
# Error Response Builder
# =============================================================================


def build_error_response(
    error_type: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> ErrorResponse:
    """Build a standardized error response.

    Args:
        error_type: Stable error type string.
        message: Human-readable message.
        details: Optional extra information. Empty dicts are dropped.

    Returns:
        ErrorResponse with structured error information.
    """
    return ErrorResponse(
        error=ErrorDetail(
            type=error_type,
            message=message,
            details=details or None,
        )
    )


def error_json(
    status_code: int,
    error_type: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Render an error envelope as a JSONResponse."""
    response = build_error_response(error_type, message, details)
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(exclude_none=True),
    )


# =============================================================================
# Exception Handlers
# =============================================================================


async def orchestration_service_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle OrchestrationServiceError and its subclasses.

    Args:
        _request: The FastAPI request (unused).
        exc: The exception that was raised.

    Returns:
        JSONResponse with the error envelope.
    """
    if not isinstance(exc, OrchestrationServiceError):
        return await generic_error_handler(_request, exc)

    status_code = get_status_code_for_error(exc)
    if status_code >= 500:
        logger.error(
            "Request failed",
            error_type=exc.error_type,
            error=exc.message,
        )

    return error_json(
        status_code,
        exc.error_type,
        exc.message,
        extract_error_details(exc),
    )


async def http_exception_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle routing errors raised by Starlette.

    Unknown routes and unsupported methods both render as NotFound, since
    the service only exposes its documented routes.

    Args:
        _request: The FastAPI request (unused).
        exc: The HTTP exception that was raised.

    Returns:
        JSONResponse with the error envelope.
    """
    if not isinstance(exc, StarletteHTTPException):
        return await generic_error_handler(_request, exc)

    if exc.status_code in (404, 405):
        return error_json(404, ErrorType.NOT_FOUND.value, NOT_FOUND_MESSAGE)

    error_type = (
        ErrorType.BAD_REQUEST.value
        if exc.status_code < 500
        else ErrorType.INTERNAL_ERROR.value
    )
    return error_json(exc.status_code, error_type, str(exc.detail))


async def request_validation_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle FastAPI request validation errors as BadRequest.

    Args:
        _request: The FastAPI request (unused).
        exc: The validation exception that was raised.

    Returns:
        JSONResponse with 400 status code.
    """
    if not isinstance(exc, RequestValidationError):
        return await generic_error_handler(_request, exc)

    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_json(400, ErrorType.BAD_REQUEST.value, message)


async def generic_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle generic/unexpected exceptions.

    Args:
        _request: The FastAPI request (unused).
        exc: The exception that was raised.

    Returns:
        JSONResponse with 500 status code.
    """
    logger.exception("Unhandled error", error=str(exc))
    return error_json(500, ErrorType.INTERNAL_ERROR.value, INTERNAL_ERROR_MESSAGE)


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(OrchestrationServiceError, orchestration_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Catch-all for unexpected exceptions
    app.add_exception_handler(Exception, generic_error_handler)
