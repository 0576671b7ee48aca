"""
Observability package: OpenTelemetry tracing for orchestration-service.
"""

from src.observability.tracing import (
    TracingMiddleware,
    get_current_trace_id,
    get_tracer,
    inject_trace_context,
    job_span,
    setup_tracing,
    shutdown_tracing,
)

__all__ = [
    "TracingMiddleware",
    "get_current_trace_id",
    "get_tracer",
    "inject_trace_context",
    "job_span",
    "setup_tracing",
    "shutdown_tracing",
]
