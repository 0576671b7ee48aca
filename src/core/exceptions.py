"""Custom exceptions for orchestration-service.

Every exception carries a stable ``error_type`` string that the service
boundary copies into the ``error.type`` field of the JSON error envelope.

Exception Hierarchy:
    OrchestrationServiceError (base)
    ├── BadRequestError       malformed or missing request fields
    ├── ModelError            one model invocation failed or returned nothing
    ├── JobError              orchestration-level failure (wraps ModelError)
    ├── InternalError         unexpected failure not otherwise classified
    └── ConfigurationError    service configuration is invalid
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Error Types Enum
# =============================================================================


class ErrorType(str, Enum):
    """Stable error type strings exposed in API error responses."""

    BAD_REQUEST = "BadRequest"
    MODEL_ERROR = "ModelError"
    JOB_ERROR = "JobError"
    INTERNAL_ERROR = "InternalError"
    CONFIGURATION_ERROR = "ConfigurationError"
    NOT_FOUND = "NotFound"


# =============================================================================
# Base Exception
# =============================================================================


class OrchestrationServiceError(Exception):
    """Base exception for all orchestration-service errors.

    Attributes:
        message: Human-readable error message.
        error_type: Machine-readable error type from ErrorType enum.
    """

    def __init__(
        self,
        message: str,
        error_type: str | ErrorType = ErrorType.INTERNAL_ERROR,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            error_type: Machine-readable error type.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_type = (
            error_type.value if isinstance(error_type, ErrorType) else error_type
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Concrete Exceptions
# =============================================================================


class BadRequestError(OrchestrationServiceError):
    """Inbound job request failed validation.

    Attributes:
        field: Name of the invalid field, when known.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize BadRequestError.

        Args:
            message: Error message.
            field: Name of the invalid field.
            **kwargs: Additional attributes.
        """
        super().__init__(message, error_type=ErrorType.BAD_REQUEST, **kwargs)
        self.field = field


class ModelError(OrchestrationServiceError):
    """A single model invocation failed or returned an unusable payload.

    Attributes:
        model_id: Model that failed.
        upstream_type: Error type reported by the model backend, if any.
    """

    def __init__(
        self,
        message: str,
        model_id: str | None = None,
        upstream_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize ModelError.

        Args:
            message: Error message.
            model_id: ID of the failing model.
            upstream_type: Error type string returned by the backend.
            **kwargs: Additional attributes.
        """
        super().__init__(message, error_type=ErrorType.MODEL_ERROR, **kwargs)
        self.model_id = model_id
        self.upstream_type = upstream_type


class JobError(OrchestrationServiceError):
    """A job could not complete.

    Attributes:
        model_id: Model whose failure aborted the job, if any.
        strategy: Strategy the job was running.
        completed_models: Number of models that completed before the failure.
        total_models: Number of models requested.
    """

    def __init__(
        self,
        message: str,
        model_id: str | None = None,
        strategy: str | None = None,
        completed_models: int | None = None,
        total_models: int | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize JobError.

        Args:
            message: Error message.
            model_id: ID of the model that caused the failure.
            strategy: Strategy (consensus or cooperative).
            completed_models: Models completed before the failure.
            total_models: Models requested.
            **kwargs: Additional attributes.
        """
        super().__init__(message, error_type=ErrorType.JOB_ERROR, **kwargs)
        self.model_id = model_id
        self.strategy = strategy
        self.completed_models = completed_models
        self.total_models = total_models


class InternalError(OrchestrationServiceError):
    """Unexpected failure not otherwise classified."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        """Initialize InternalError.

        Args:
            message: Error message.
            **kwargs: Additional attributes.
        """
        super().__init__(message, error_type=ErrorType.INTERNAL_ERROR, **kwargs)


class ConfigurationError(OrchestrationServiceError):
    """Service configuration is invalid.

    Attributes:
        setting: Name of the problematic setting.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Error message.
            setting: Name of the problematic setting.
            **kwargs: Additional attributes.
        """
        super().__init__(
            message,
            error_type=ErrorType.CONFIGURATION_ERROR,
            **kwargs,
        )
        self.setting = setting
