"""HTTP model invoker.

Calls a model runner over HTTP: ``POST {endpoint}`` with JSON
``{"model": ..., "prompt": ...}``. The runner answers ``{"result": "..."}``
on success (``{"response": "..."}`` is accepted too) and
``{"error": {"type": ..., "message": ...}}`` on failure.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.core.constants import DEFAULT_MODEL_TIMEOUT_SECONDS
from src.core.exceptions import ModelError
from src.core.logging import get_logger
from src.observability.tracing import inject_trace_context
from src.providers.base import ModelInvoker, require_payload


logger = get_logger(__name__)

PAYLOAD_KEYS = ("result", "response")


class HttpModelInvoker(ModelInvoker):
    """Invoke models through a model-runner HTTP endpoint.

    Args:
        endpoint: Full URL of the runner's run endpoint.
        timeout: Per-call timeout in seconds.
        headers: Extra headers sent with every call.
        client: Optional pre-built httpx.AsyncClient (owned by the caller).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_MODEL_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._headers = dict(headers or {})
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        """Get the runner endpoint."""
        return self._endpoint

    @property
    def name(self) -> str:
        return f"http:{self._endpoint}"

    async def invoke(self, model_id: str, prompt: str) -> str:
        headers = inject_trace_context(
            {"Content-Type": "application/json", **self._headers}
        )
        try:
            response = await self._client.post(
                self._endpoint,
                json={"model": model_id, "prompt": prompt},
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise ModelError(
                f"Model {model_id} failed: request timed out",
                model_id=model_id,
            ) from e
        except httpx.HTTPError as e:
            raise ModelError(
                f"Model {model_id} failed: {e}",
                model_id=model_id,
            ) from e

        body = self._decode(model_id, response)

        if response.is_error:
            error = body.get("error") if isinstance(body, dict) else None
            error = error if isinstance(error, dict) else {}
            message = error.get("message") or f"status {response.status_code}"
            logger.warning(
                "Model runner returned error",
                model=model_id,
                status=response.status_code,
                upstream_type=error.get("type"),
            )
            raise ModelError(
                f"Model {model_id} failed: {message}",
                model_id=model_id,
                upstream_type=error.get("type"),
            )

        payload = None
        if isinstance(body, dict):
            payload = next(
                (body[key] for key in PAYLOAD_KEYS if body.get(key)), None
            )
        return require_payload(model_id, payload)

    def _decode(self, model_id: str, response: httpx.Response) -> Any:
        """Parse a JSON body; non-JSON error bodies decode to None."""
        try:
            return response.json()
        except ValueError as e:
            if response.is_error:
                return None
            raise ModelError(
                f"Model {model_id} failed: response is not JSON",
                model_id=model_id,
            ) from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
