"""Single model call shared by the orchestration modes.

Wraps one ModelInvoker call with a pool slot, an OpenTelemetry span and
duration measurement, and normalizes any failure into a ModelError that
names the model.
"""

from __future__ import annotations

import time

from src.core.exceptions import ModelError
from src.core.logging import get_logger
from src.models.responses import ModelInvocationResult
from src.observability.tracing import get_tracer
from src.providers.base import ModelInvoker, require_payload
from src.services.queue_manager import QueueManager


logger = get_logger(__name__)
tracer = get_tracer("orchestration_service.invoke")


async def invoke_model(
    invoker: ModelInvoker,
    model_id: str,
    prompt: str,
    queue: QueueManager | None = None,
) -> ModelInvocationResult:
    """Invoke one model and time the call.

    The duration covers the call only, not the wait for a pool slot.

    Args:
        invoker: Transport used to reach the model.
        model_id: Model identifier.
        prompt: Prompt text.
        queue: Optional pool bounding concurrent calls.

    Returns:
        ModelInvocationResult with the raw response and duration.

    Raises:
        ModelError: If the call fails for any reason.
    """
    queue = queue or QueueManager()

    async with queue.slot():
        with tracer.start_as_current_span("model.invoke") as span:
            span.set_attribute("model.id", model_id)
            start = time.perf_counter()
            try:
                response = require_payload(
                    model_id, await invoker.invoke(model_id, prompt)
                )
            except ModelError as e:
                span.record_exception(e)
                raise
            except Exception as e:
                span.record_exception(e)
                raise ModelError(
                    f"Model {model_id} failed: {e}",
                    model_id=model_id,
                ) from e
            duration_ms = (time.perf_counter() - start) * 1000
            span.set_attribute("model.duration_ms", duration_ms)

    logger.debug(
        "Model call completed",
        model=model_id,
        duration_ms=round(duration_ms, 2),
        response_chars=len(response),
    )
    return ModelInvocationResult(
        model=model_id,
        response=response,
        duration_ms=duration_ms,
    )
