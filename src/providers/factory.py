"""Model invoker factory.

Builds the invoker the orchestrator uses from configured endpoint URLs.
One endpoint yields a single invoker; several yield a FallbackModelInvoker
that tries them in the configured order.

Invoker classes are looked up by URL scheme, so new transports can be
added with register_invoker() without touching this module.
"""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import urlsplit

from src.core.config import Settings
from src.core.exceptions import ConfigurationError
from src.providers.base import ModelInvoker
from src.providers.fallback import FallbackModelInvoker
from src.providers.http import HttpModelInvoker


InvokerBuilder = Callable[[str, Settings], ModelInvoker]


def _build_http(endpoint: str, settings: Settings) -> ModelInvoker:
    return HttpModelInvoker(endpoint, timeout=settings.model_timeout_seconds)


class InvokerFactory:
    """Factory for creating model invokers by endpoint scheme.

    Example:
        >>> invoker = InvokerFactory.create_invoker(settings)
        >>> InvokerFactory.register_invoker("grpc", build_grpc_invoker)
    """

    _registry: dict[str, InvokerBuilder] = {
        "http": _build_http,
        "https": _build_http,
    }

    @classmethod
    def create_for_endpoint(cls, endpoint: str, settings: Settings) -> ModelInvoker:
        """Create an invoker for a single endpoint URL.

        Raises:
            ConfigurationError: If the URL scheme has no registered builder.
        """
        scheme = urlsplit(endpoint).scheme.lower()
        builder = cls._registry.get(scheme)
        if builder is None:
            raise ConfigurationError(
                f"Unsupported model endpoint scheme: '{scheme}'. "
                f"Supported schemes: {sorted(cls._registry)}",
                setting="model_endpoints",
            )
        return builder(endpoint, settings)

    @classmethod
    def create_invoker(cls, settings: Settings) -> ModelInvoker:
        """Create the invoker described by settings.

        Args:
            settings: Application settings.

        Returns:
            A single invoker, or a fallback router over several.

        Raises:
            ConfigurationError: If no endpoint is configured.
        """
        endpoints = settings.model_endpoints
        if not endpoints:
            raise ConfigurationError(
                "No model endpoints configured (ORCHESTRATION_MODEL_ENDPOINTS)",
                setting="model_endpoints",
            )

        invokers = [cls.create_for_endpoint(e, settings) for e in endpoints]
        if len(invokers) == 1:
            return invokers[0]
        return FallbackModelInvoker(invokers)

    @classmethod
    def register_invoker(cls, scheme: str, builder: InvokerBuilder) -> None:
        """Register a builder for a URL scheme."""
        cls._registry[scheme.lower()] = builder

    @classmethod
    def get_registered_schemes(cls) -> list[str]:
        """Return registered URL schemes."""
        return list(cls._registry.keys())


def create_invoker(settings: Settings) -> ModelInvoker:
    """Create the invoker described by settings (see InvokerFactory)."""
    return InvokerFactory.create_invoker(settings)
