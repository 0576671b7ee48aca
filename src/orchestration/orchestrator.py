"""Orchestrator - runs one job from fanout to merged result.

The Orchestrator is the main entry point for orchestrated inference.
It dispatches the job to the mode matching its strategy, classifies
every response, merges them and records timings.

Strategies:
- consensus: All models in parallel, majority-intent merge
- cooperative: Models in sequence, each building on prior outputs

Orchestration is stateless per request: nothing outlives run_job().
"""

from __future__ import annotations

import time
import uuid
from typing import Any

from src.core.constants import TIMING_ROUND_DIGITS
from src.core.exceptions import JobError
from src.core.logging import get_logger, reset_job_id, set_job_id
from src.models.requests import JobRequest, Strategy
from src.models.responses import FanoutResult, JobResult, JobTimings
from src.observability.tracing import get_current_trace_id, job_span
from src.orchestration.classifier import classify
from src.orchestration.merge import first_non_empty, merge
from src.orchestration.modes.consensus import ConsensusMode
from src.orchestration.modes.cooperative import CooperativeMode
from src.orchestration.schema import Schema
from src.providers.base import ModelInvoker
from src.services.queue_manager import QueueManager


logger = get_logger(__name__)


def _ms_since(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class Orchestrator:
    """Main orchestration dispatcher.

    Attributes:
        invoker: Transport used to reach the models.
        max_concurrency: Per-job cap on concurrent consensus calls
            (0 = unbounded). Each job gets its own pool, so jobs never
            wait on one another.

    Example:
        orchestrator = Orchestrator(invoker=HttpModelInvoker(url))
        job = await orchestrator.run_job(
            JobRequest(prompt="What is 6 x 7?", models=["m1", "m2"])
        )
        print(job.result, job.structured.intent)
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        max_concurrency: int = 0,
    ) -> None:
        """Initialize Orchestrator.

        Args:
            invoker: Model invoker shared by every job.
            max_concurrency: Per-job cap on concurrent calls. Default: unbounded.

        Raises:
            ValueError: If max_concurrency is negative.
        """
        if max_concurrency < 0:
            raise ValueError("max_concurrency must be >= 0")
        self._invoker = invoker
        self._max_concurrency = max_concurrency

    @property
    def invoker(self) -> ModelInvoker:
        """Get the model invoker."""
        return self._invoker

    @property
    def max_concurrency(self) -> int:
        """Get the per-job concurrency cap (0 = unbounded)."""
        return self._max_concurrency

    async def run_job(
        self,
        request: JobRequest,
        schema: Schema[Any] | None = None,
    ) -> JobResult:
        """Execute one job.

        Args:
            request: Validated job request.
            schema: Optional typed parser applied to the merged text.

        Returns:
            JobResult with merged text, raw responses, structured result
            and timings.

        Raises:
            JobError: If any model call fails or the schema rejects the
                merged text. No partial result is returned.
        """
        job_id = uuid.uuid4().hex
        token = set_job_id(job_id)
        try:
            with job_span(job_id, Strategy(request.strategy).value, len(request.models)):
                return await self._run(request, schema)
        finally:
            reset_job_id(token)

    async def _run(
        self,
        request: JobRequest,
        schema: Schema[Any] | None,
    ) -> JobResult:
        start = time.perf_counter()
        strategy = Strategy(request.strategy)

        logger.info(
            "Job started",
            strategy=strategy.value,
            models=list(request.models),
            trace_id=get_current_trace_id(),
        )

        fanout = await self._fanout(strategy, request.prompt, list(request.models))

        structured_results = [
            classify(r.model, r.response) for r in fanout.results
        ]

        merge_start = time.perf_counter()
        structured = merge(strategy, structured_results)
        merge_ms = _ms_since(merge_start)

        raw_outputs = [r.response for r in fanout.results]
        result_text = (
            structured.summary
            if structured.summary.strip()
            else first_non_empty(raw_outputs)
        )

        parsed = self._parse(schema, result_text) if schema is not None else None

        timings = JobTimings(
            total=round(_ms_since(start), TIMING_ROUND_DIGITS),
            fanout=round(fanout.fanout_ms, TIMING_ROUND_DIGITS),
            slowest=round(fanout.slowest_ms, TIMING_ROUND_DIGITS),
            merge=round(merge_ms, TIMING_ROUND_DIGITS),
        )

        logger.info(
            "Job completed",
            strategy=strategy.value,
            intent=structured.intent.value,
            confidence=structured.confidence,
            supporting_models=structured.supporting_models,
            total_ms=timings.total,
        )

        return JobResult(
            result=result_text,
            responses={r.model: r.response for r in fanout.results},
            structured=structured,
            timings=timings,
            parsed=parsed,
        )

    async def _fanout(
        self,
        strategy: Strategy,
        prompt: str,
        models: list[str],
    ) -> FanoutResult:
        # Cooperative makes one call at a time; the cap only bounds consensus
        if strategy == Strategy.COOPERATIVE:
            return await CooperativeMode(invoker=self._invoker).execute(prompt, models)
        return await ConsensusMode(
            invoker=self._invoker,
            queue=QueueManager(self._max_concurrency),
        ).execute(prompt, models)

    @staticmethod
    def _parse(schema: Schema[Any], text: str) -> Any:
        """Apply the typed parser to the merged text.

        Raises:
            JobError: If the parser rejects the text.
        """
        try:
            return schema.parse(text)
        except Exception as e:
            logger.warning("Typed parse failed", error=str(e))
            raise JobError(f"Failed to parse merged result: {e}") from e
