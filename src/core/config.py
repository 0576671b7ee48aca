"""Core configuration module for orchestration-service.

Loads settings from ORCHESTRATION_* prefixed environment variables using
Pydantic Settings.

Patterns applied:
- pydantic-settings BaseSettings (Pydantic v2 split)
- env_prefix = "ORCHESTRATION_" for namespace isolation
- @field_validator + @classmethod (Pydantic v2 pattern)
- @lru_cache for singleton pattern
- PEP 604 union syntax (X | None)
"""

import json
from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from src.core.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MODEL_TIMEOUT_SECONDS,
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    DEFAULT_STRATEGY,
)


class Settings(BaseSettings):
    """Application settings loaded from ORCHESTRATION_* environment variables.

    All environment variables must be prefixed with ORCHESTRATION_.
    Example: ORCHESTRATION_PORT=8086, ORCHESTRATION_LOG_LEVEL=DEBUG

    Attributes:
        service_name: Service identifier for logging and tracing.
        port: HTTP port (1-65535). Default: 8086.
        host: Bind address. Default: 0.0.0.0.
        environment: Deployment environment. Default: development.
        log_level: Logging verbosity. Default: INFO.
        default_strategy: Strategy used when a job omits one.
        max_concurrency: Cap on in-flight model calls within one job (0 =
            unbounded). Concurrent jobs do not share the cap.
        model_endpoints: Model runner URLs, tried in order.
        model_timeout_seconds: Per-call timeout applied by the HTTP invoker.
        tracing_enabled: Enable OpenTelemetry tracing.
        otlp_endpoint: Optional OTLP gRPC exporter endpoint.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Service name for identification",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="HTTP server port",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        description="HTTP server bind address",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default=DEFAULT_ENVIRONMENT,
        description="Deployment environment",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # Orchestration Settings
    # =========================================================================
    default_strategy: Literal["consensus", "cooperative"] = Field(
        default=DEFAULT_STRATEGY,
        description="Merge strategy used when the request omits one",
    )
    max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=0,
        description="Maximum concurrent model calls per job (0 = unbounded)",
    )

    # =========================================================================
    # Model Invoker Settings
    # =========================================================================
    model_endpoints: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Model runner endpoints, comma-separated or JSON list",
    )
    model_timeout_seconds: float = Field(
        default=DEFAULT_MODEL_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout for a single model call",
    )

    # =========================================================================
    # Observability Settings
    # =========================================================================
    tracing_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP gRPC endpoint (console exporter when unset)",
    )

    # =========================================================================
    # Pydantic v2 Model Configuration
    # =========================================================================
    model_config = {
        "env_prefix": "ORCHESTRATION_",
        "case_sensitive": False,
        "extra": "ignore",
        "protected_namespaces": (),
    }

    # =========================================================================
    # Validators (Pydantic v2 pattern: @field_validator + @classmethod)
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Args:
            v: Input log level string.

        Returns:
            Normalized uppercase log level.

        Raises:
            ValueError: If log level is not valid.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            msg = f"log_level must be one of {valid_levels}, got '{v}'"
            raise ValueError(msg)
        return normalized

    @field_validator("model_endpoints", mode="before")
    @classmethod
    def split_model_endpoints(cls, v: Any) -> Any:
        """Accept a JSON list or a comma-separated string of endpoints.

        Args:
            v: Raw value from the environment or constructor.

        Returns:
            List of non-empty endpoint strings.
        """
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                v = json.loads(stripped)
            else:
                v = stripped.split(",")
        if isinstance(v, list):
            return [str(item).strip() for item in v if str(item).strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Get singleton Settings instance.

    Uses @lru_cache to ensure only one instance is created.

    Returns:
        Cached Settings instance.
    """
    return Settings()
