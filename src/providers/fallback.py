"""Fallback routing invoker.

Routes each call through an ordered list of backend invokers and returns
the first success. The orchestrator sees one invoker; it does not know
how many backends sit behind it.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.core.exceptions import ModelError
from src.core.logging import get_logger
from src.providers.base import ModelInvoker


logger = get_logger(__name__)


class FallbackModelInvoker(ModelInvoker):
    """Try backends in order until one answers.

    Args:
        backends: Invokers to try, highest preference first (min 1).

    Raises:
        ValueError: If no backend is given.
    """

    def __init__(self, backends: Sequence[ModelInvoker]) -> None:
        if not backends:
            raise ValueError("FallbackModelInvoker requires at least one backend")
        self._backends = list(backends)

    @property
    def backends(self) -> list[ModelInvoker]:
        """Get the ordered backends."""
        return self._backends

    async def invoke(self, model_id: str, prompt: str) -> str:
        failures: list[str] = []
        last_error: Exception | None = None

        for backend in self._backends:
            try:
                return await backend.invoke(model_id, prompt)
            except Exception as e:
                reason = e.message if isinstance(e, ModelError) else str(e) or type(e).__name__
                logger.warning(
                    "Backend failed, falling back",
                    backend=backend.name,
                    model=model_id,
                    error=reason,
                )
                failures.append(f"{backend.name}: {reason}")
                last_error = e

        raise ModelError(
            f"Model {model_id} failed on all backends: " + "; ".join(failures),
            model_id=model_id,
        ) from last_error

    async def aclose(self) -> None:
        for backend in self._backends:
            await backend.aclose()
