"""Model invokers for orchestration-service.

Invokers:
- base: ModelInvoker ABC
- http: HttpModelInvoker (httpx)
- fallback: FallbackModelInvoker (ordered backends)
- factory: InvokerFactory (endpoint scheme registry)
"""

from src.providers.base import ModelInvoker, require_payload
from src.providers.factory import InvokerFactory, create_invoker
from src.providers.fallback import FallbackModelInvoker
from src.providers.http import HttpModelInvoker


__all__: list[str] = [
    "FallbackModelInvoker",
    "HttpModelInvoker",
    "InvokerFactory",
    "ModelInvoker",
    "create_invoker",
    "require_payload",
]
