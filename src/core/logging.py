"""Structured logging module for orchestration-service.

Provides JSON-formatted structured logging using structlog.

Patterns applied:
- Singleton _configured flag prevents reconfiguration
- configure_logging() called ONCE at startup
- Underscore-prefix for unused structlog params
- JSON output via JSONRenderer
- Job ID support via contextvars
"""

import contextvars
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict


# =============================================================================
# Singleton Configuration State
# =============================================================================
_configured: bool = False


# =============================================================================
# Job ID Context (one job per request)
# =============================================================================
_job_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)


def set_job_id(job_id: str | None) -> contextvars.Token[str | None]:
    """Set job ID for current async context.

    Args:
        job_id: Unique job identifier, or None to clear.

    Returns:
        Token that restores the previous value via reset_job_id().
    """
    return _job_id_var.set(job_id)


def reset_job_id(token: contextvars.Token[str | None]) -> None:
    """Restore the job ID that was active before set_job_id()."""
    _job_id_var.reset(token)


def get_job_id() -> str | None:
    """Get current job ID.

    Returns:
        Job ID if set, None otherwise.
    """
    return _job_id_var.get()


# =============================================================================
# Custom Processors
# =============================================================================
def add_job_id(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add job ID to log event if set.

    Args:
        _logger: Logger instance (unused - required by structlog interface).
        _method_name: Method name (unused).
        event_dict: Event dictionary to process.

    Returns:
        Event dictionary with job_id added if set.
    """
    job_id = get_job_id()
    if job_id is not None:
        event_dict["job_id"] = job_id
    return event_dict


def _level_to_int(level: str) -> int:
    """Convert log level string to integer."""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# =============================================================================
# Singleton Configuration
# =============================================================================
def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Configure structlog ONCE at application startup.

    Subsequent calls are no-ops unless force=True (for testing).

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream. Defaults to sys.stdout.
        force: Force reconfiguration (for testing only).
    """
    global _configured

    if _configured and not force:
        return

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_job_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )

    _configured = True


def reset_logging() -> None:
    """Reset configuration state for test isolation."""
    global _configured
    _configured = False


def get_logger(name: str) -> Any:
    """Get a logger by name.

    The logger is a lazy proxy: it picks up the configuration in force
    when it is used, so module-level loggers follow configure_logging()
    calls made later at startup.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        structlog lazy logger proxy bound to ``logger_name=name``.
    """
    return structlog.get_logger(logger_name=name)
