"""Base class for model invokers.

Defines the ModelInvoker ABC that every transport binding implements.
The orchestrator only depends on this port; HTTP calls, in-process
bindings or routing layers are adapters behind it.

Patterns applied:
- ABC with @abstractmethod decorator
- PEP 604 union syntax (X | None)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.core.exceptions import ModelError


def require_payload(model_id: str, payload: object) -> str:
    """Return payload as the model's text or raise ModelError.

    A response that parsed but carries no text is a failure, not an
    empty success.

    Args:
        model_id: Model that produced the payload.
        payload: Extracted response value.

    Returns:
        The non-empty response text.

    Raises:
        ModelError: If payload is missing, not a string or empty.
    """
    if not isinstance(payload, str) or not payload:
        raise ModelError(
            f"Invalid response from model {model_id}",
            model_id=model_id,
        )
    return payload


class ModelInvoker(ABC):
    """Abstract base class for model invokers.

    Example:
        class MyInvoker(ModelInvoker):
            async def invoke(self, model_id, prompt):
                text = await my_backend(model_id, prompt)
                return require_payload(model_id, text)
    """

    @property
    def name(self) -> str:
        """Human-readable invoker name used in logs."""
        return type(self).__name__

    @abstractmethod
    async def invoke(self, model_id: str, prompt: str) -> str:
        """Send one prompt to one model.

        Args:
            model_id: Model identifier.
            prompt: Full prompt text.

        Returns:
            Non-empty raw response text.

        Raises:
            ModelError: If the call fails or the payload is empty.
        """
        ...

    async def aclose(self) -> None:  # noqa: B027
        """Release transport resources.

        Default implementation does nothing.
        """
