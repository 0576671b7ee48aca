"""
OpenTelemetry tracing for orchestration-service.

Span layout for one POST /run:

    POST /run                (SERVER, TracingMiddleware)
      job.run                (INTERNAL, job_span)
        model.invoke         (one per model, see orchestration.invocation)

The HTTP invoker injects the active context into outbound headers so a
model runner that speaks W3C tracecontext joins the same trace.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Callable, Optional

from opentelemetry import trace
from opentelemetry.propagate import extract, inject
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from src.core.constants import DEFAULT_SERVICE_NAME

_tracer_provider: Optional[TracerProvider] = None

HTTP_TRACER_NAME = "orchestration_service.http"
JOB_TRACER_NAME = "orchestration_service.job"


def setup_tracing(
    service_name: str = DEFAULT_SERVICE_NAME,
    otlp_endpoint: Optional[str] = None,
) -> TracerProvider:
    """
    Install a TracerProvider for this process.

    Spans go to the OTLP collector when an endpoint is given (requires
    the ``otlp`` extra), else to stdout.

    Args:
        service_name: Resource service.name attribute
        otlp_endpoint: gRPC collector address, e.g. http://localhost:4317

    Returns:
        The installed TracerProvider
    """
    global _tracer_provider

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))

    if otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint))
        )
    else:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and drop the provider installed by setup_tracing."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None


def get_tracer(name: str = __name__) -> Tracer:
    return trace.get_tracer(name)


def get_current_trace_id() -> Optional[str]:
    """Hex trace id of the active span, or None outside any trace."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def inject_trace_context(headers: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Add traceparent (and tracestate) to outbound model-call headers."""
    carrier = headers if headers is not None else {}
    inject(carrier)
    return carrier


@contextmanager
def job_span(job_id: str, strategy: str, model_count: int) -> Iterator[Span]:
    """Span covering one orchestration job.

    A failing job marks the span as an error and re-raises.
    """
    tracer = get_tracer(JOB_TRACER_NAME)
    with tracer.start_as_current_span("job.run", record_exception=False) as span:
        span.set_attribute("job.id", job_id)
        span.set_attribute("job.strategy", strategy)
        span.set_attribute("job.model_count", model_count)
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise


class TracingMiddleware:
    """
    ASGI middleware opening a SERVER span per HTTP request.

    Continues any trace the caller started via incoming traceparent.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        exclude_paths: Optional[list[str]] = None,
    ) -> None:
        self.app = app
        self.exclude_paths = set(exclude_paths or [])
        self.tracer = get_tracer(HTTP_TRACER_NAME)

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        path = scope.get("path", "/")
        if scope["type"] != "http" or path in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        carrier = {
            key.decode("latin-1").lower(): value.decode("latin-1")
            for key, value in scope.get("headers", [])
        }
        status_code = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        with self.tracer.start_as_current_span(
            f"{method} {path}",
            context=extract(carrier),
            kind=SpanKind.SERVER,
        ) as span:
            span.set_attribute("http.request.method", method)
            span.set_attribute("url.path", path)
            try:
                await self.app(scope, receive, send_wrapper)
            finally:
                span.set_attribute("http.response.status_code", status_code)
            if status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))
