"""Service-wide constants for orchestration-service.

Centralizes defaults shared by configuration, the service boundary and
the orchestration core so that they are declared in one place.

Usage:
    from src.core.constants import DEFAULT_STRATEGY, MERGE_ROUND_DIGITS
"""

# =============================================================================
# Service Defaults
# =============================================================================

DEFAULT_SERVICE_NAME = "orchestration-service"
DEFAULT_PORT = 8086
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_STRATEGY = "consensus"
DEFAULT_MAX_CONCURRENCY = 0  # 0 = unbounded fanout
DEFAULT_MODEL_TIMEOUT_SECONDS = 60.0


# =============================================================================
# Rounding
# =============================================================================

# MergedResult.confidence
CONFIDENCE_ROUND_DIGITS = 3

# JobTimings fields (milliseconds)
TIMING_ROUND_DIGITS = 2
