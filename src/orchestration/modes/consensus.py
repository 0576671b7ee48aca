"""Consensus mode - all models answer the same prompt in parallel.

Flow:
    Prompt → [All models](parallel) → results in request order

Every call starts at once unless the QueueManager bounds concurrency.
All results are required: the first failure aborts the job, and the
calls still in flight are cancelled before the error propagates.
"""

from __future__ import annotations

import asyncio
import time

from src.core.exceptions import JobError, ModelError
from src.core.logging import get_logger
from src.models.requests import Strategy
from src.models.responses import FanoutResult, ModelInvocationResult
from src.orchestration.invocation import invoke_model
from src.providers.base import ModelInvoker
from src.services.queue_manager import QueueManager


logger = get_logger(__name__)


class ConsensusMode:
    """Parallel fanout of one prompt to every model.

    Attributes:
        invoker: Transport used to reach the models.
        queue: Pool bounding concurrent calls (unbounded by default).

    Example:
        mode = ConsensusMode(invoker=HttpModelInvoker(url))
        fanout = await mode.execute("What is 6 x 7?", ["m1", "m2"])
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        queue: QueueManager | None = None,
    ) -> None:
        """Initialize ConsensusMode.

        Args:
            invoker: Model invoker.
            queue: Optional bounded pool. Default: unbounded.
        """
        self._invoker = invoker
        self._queue = queue or QueueManager()

    @property
    def invoker(self) -> ModelInvoker:
        """Get the model invoker."""
        return self._invoker

    @property
    def queue(self) -> QueueManager:
        """Get the invocation pool."""
        return self._queue

    async def execute(self, prompt: str, models: list[str]) -> FanoutResult:
        """Invoke every model concurrently and join in request order.

        Args:
            prompt: Prompt sent unchanged to every model.
            models: Model identifiers.

        Returns:
            FanoutResult; fanout_ms is the wall-clock span of the batch.

        Raises:
            JobError: If any model fails. No partial result is returned.
        """
        start = time.perf_counter()

        tasks = [
            asyncio.create_task(
                invoke_model(self._invoker, model_id, prompt, self._queue),
                name=f"invoke:{model_id}",
            )
            for model_id in models
        ]

        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            failed = next(
                (
                    (model_id, task)
                    for model_id, task in zip(models, tasks)
                    if task.done() and not task.cancelled() and task.exception()
                ),
                None,
            )
            if failed is not None:
                model_id, task = failed
                error = task.exception()
                raise self._job_error(model_id, error, tasks) from error
        finally:
            await self._cancel_pending(tasks)

        results: list[ModelInvocationResult] = [task.result() for task in tasks]
        fanout_ms = (time.perf_counter() - start) * 1000

        return FanoutResult(results=results, fanout_ms=fanout_ms)

    def _job_error(
        self,
        model_id: str,
        error: BaseException | None,
        tasks: list[asyncio.Task[ModelInvocationResult]],
    ) -> JobError:
        """Wrap the failure of one model as the job's error."""
        message = (
            error.message
            if isinstance(error, ModelError)
            else f"Model {model_id} failed: {error}"
        )
        completed = sum(
            1 for t in tasks if t.done() and not t.cancelled() and not t.exception()
        )
        logger.warning(
            "Consensus fanout aborted",
            model=model_id,
            error=message,
            completed_models=completed,
            total_models=len(tasks),
        )
        return JobError(
            message,
            model_id=model_id,
            strategy=Strategy.CONSENSUS.value,
            completed_models=completed,
            total_models=len(tasks),
        )

    async def _cancel_pending(
        self, tasks: list[asyncio.Task[ModelInvocationResult]]
    ) -> None:
        """Cancel unfinished calls and wait for them to settle."""
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug("Cancelling in-flight model calls", count=len(pending))
        # Retrieves every outcome so no task exception goes unobserved
        await asyncio.gather(*tasks, return_exceptions=True)
