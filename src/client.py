"""Async client for the orchestration-service HTTP API.

Example:
    async with OrchestrationClient("http://localhost:8086/run") as client:
        response = await client.run("What is 6 x 7?", ["m1", "m2"])
        print(response.result, response.structured.intent)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from src.core.constants import DEFAULT_MODEL_TIMEOUT_SECONDS
from src.models.requests import Strategy
from src.models.responses import JobTimings, MergedResult


UNKNOWN_ERROR_TYPE = "UnknownError"


class OrchestrationClientError(Exception):
    """Non-2xx answer from the service.

    Attributes:
        type: Error type from the envelope, or "UnknownError".
        message: Error message.
        status: HTTP status code.
        details: Extra information from the envelope, if any.
    """

    def __init__(
        self,
        type: str,
        message: str,
        status: int,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.type = type
        self.message = message
        self.status = status
        self.details = details


@dataclass
class ClientResponse:
    """Successful job as seen by the client."""

    result: str
    responses: dict[str, str] | None = None
    structured: MergedResult | None = None
    timings: JobTimings | None = None


class OrchestrationClient:
    """Thin async wrapper around ``POST /run``.

    Args:
        endpoint: Full URL of the run endpoint.
        headers: Extra headers sent with every request.
        client: Optional httpx.AsyncClient to reuse. When omitted the
            client owns one and closes it in aclose().
    """

    def __init__(
        self,
        endpoint: str,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=DEFAULT_MODEL_TIMEOUT_SECONDS)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def run(
        self,
        prompt: str,
        models: list[str],
        strategy: Strategy | str | None = None,
        temperature: float | None = None,
        max_retries: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ClientResponse:
        """Run a job.

        Args:
            prompt: Prompt for every model.
            models: Model identifiers.
            strategy: consensus or cooperative; server default when None.
            temperature: Passed through, not consumed by the service.
            max_retries: Passed through, not consumed by the service.
            metadata: Passed through, not consumed by the service.

        Returns:
            ClientResponse.

        Raises:
            OrchestrationClientError: If the service answers non-2xx.
            httpx.HTTPError: On transport failure.
        """
        body: dict[str, Any] = {"prompt": prompt, "models": list(models)}
        if strategy is not None:
            body["strategy"] = Strategy(strategy).value
        if temperature is not None:
            body["temperature"] = temperature
        if max_retries is not None:
            body["maxRetries"] = max_retries
        if metadata is not None:
            body["metadata"] = metadata

        response = await self._client.post(
            self._endpoint,
            json=body,
            headers=self._headers,
        )

        if not response.is_success:
            raise self._error_from(response)

        data = response.json()
        structured = data.get("structured")
        timings = data.get("timings")
        return ClientResponse(
            result=data.get("result"),
            responses=data.get("responses"),
            structured=MergedResult.model_validate(structured) if structured else None,
            timings=JobTimings.model_validate(timings) if timings else None,
        )

    @staticmethod
    def _error_from(response: httpx.Response) -> OrchestrationClientError:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        error = payload.get("error") if isinstance(payload, dict) else None
        if not isinstance(error, dict):
            error = {}

        return OrchestrationClientError(
            type=error.get("type") or UNKNOWN_ERROR_TYPE,
            message=error.get("message")
            or f"Orchestration request failed with status {response.status_code}",
            status=response.status_code,
            details=error.get("details"),
        )

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> OrchestrationClient:
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.aclose()
