"""Cooperative mode - models answer in sequence, each building on the last.

Flow:
    Prompt → Model 1 → (Prompt + output 1) → Model 2 → ... → Model N

Each step's prompt literally contains the previous outputs, so a step
cannot start before the one before it finishes. The first failure aborts
the chain; there is no compensation and no skip-and-continue.
"""

from __future__ import annotations

from src.core.exceptions import JobError, ModelError
from src.core.logging import get_logger
from src.models.requests import Strategy
from src.models.responses import FanoutResult, ModelInvocationResult
from src.orchestration.invocation import invoke_model
from src.providers.base import ModelInvoker


logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

COOPERATIVE_PROMPT_TEMPLATE = """{prompt}

Previous responses:
{previous}

Build on these responses:"""


def build_cooperative_prompt(prompt: str, previous_outputs: list[str]) -> str:
    """Render the prompt for the next model in the chain.

    The first model gets the original prompt unchanged; later models get
    the prompt followed by the numbered outputs of every earlier model.

    Example:
        >>> print(build_cooperative_prompt("Q", ["a", "b"]))
        Q
        <BLANKLINE>
        Previous responses:
        1. a
        2. b
        <BLANKLINE>
        Build on these responses:
    """
    if not previous_outputs:
        return prompt

    previous = "\n".join(
        f"{i}. {output}" for i, output in enumerate(previous_outputs, 1)
    )
    return COOPERATIVE_PROMPT_TEMPLATE.format(prompt=prompt, previous=previous)


# =============================================================================
# CooperativeMode Implementation
# =============================================================================


class CooperativeMode:
    """Sequential chain where every model sees the prior outputs.

    Example:
        mode = CooperativeMode(invoker=HttpModelInvoker(url))
        fanout = await mode.execute("Draft a haiku", ["m1", "m2", "m3"])
    """

    def __init__(self, invoker: ModelInvoker) -> None:
        self._invoker = invoker

    @property
    def invoker(self) -> ModelInvoker:
        """Get the model invoker."""
        return self._invoker

    async def execute(self, prompt: str, models: list[str]) -> FanoutResult:
        """Invoke models strictly in request order.

        Args:
            prompt: Original prompt.
            models: Model identifiers, in chain order.

        Returns:
            FanoutResult; fanout_ms is the sum of the step durations.

        Raises:
            JobError: On the first failing step.
        """
        results: list[ModelInvocationResult] = []
        previous_outputs: list[str] = []

        for model_id in models:
            step_prompt = build_cooperative_prompt(prompt, previous_outputs)
            try:
                result = await invoke_model(self._invoker, model_id, step_prompt)
            except ModelError as e:
                logger.warning(
                    "Cooperative chain aborted",
                    model=model_id,
                    error=e.message,
                    completed_models=len(results),
                    total_models=len(models),
                )
                raise JobError(
                    e.message,
                    model_id=model_id,
                    strategy=Strategy.COOPERATIVE.value,
                    completed_models=len(results),
                    total_models=len(models),
                ) from e

            results.append(result)
            previous_outputs.append(result.response)

        return FanoutResult(
            results=results,
            fanout_ms=sum(r.duration_ms for r in results),
        )
