"""Result models produced by the orchestration core.

StructuredModelResult, MergedResult and JobTimings are serialized to the
client as camelCase JSON (``needsClarification``, ``supportingModels``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class Intent(str, Enum):
    """Coarse classification of a model response."""

    ANSWER = "answer"
    CLARIFICATION = "clarification"
    REFUSAL = "refusal"
    UNKNOWN = "unknown"


@dataclass
class ModelInvocationResult:
    """Raw output of one model for one job.

    Attributes:
        model: Model identifier.
        response: Raw text returned by the model.
        duration_ms: Wall-clock duration of the call in milliseconds.
    """

    model: str
    response: str
    duration_ms: float


@dataclass
class FanoutResult:
    """Outcome of invoking every model of a job.

    Attributes:
        results: One result per model, in request order.
        fanout_ms: Wall-clock span (consensus) or summed durations
            (cooperative) in milliseconds.
    """

    results: list[ModelInvocationResult]
    fanout_ms: float

    @property
    def slowest_ms(self) -> float:
        """Longest single model call in milliseconds."""
        return max((r.duration_ms for r in self.results), default=0.0)


class StructuredModelResult(BaseModel):
    """Judgement derived deterministically from one raw response."""

    model_config = _WIRE_CONFIG

    model: str
    raw: str
    summary: str
    intent: Intent
    confidence: float = Field(ge=0.2, le=0.95)


class MergedResult(BaseModel):
    """The merged answer of a job."""

    model_config = _WIRE_CONFIG

    summary: str = ""
    intent: Intent = Intent.UNKNOWN
    confidence: float = Field(default=0.0, ge=0.0, le=0.95)
    needs_clarification: bool = False
    supporting_models: list[str] = Field(default_factory=list)
    responses: list[StructuredModelResult] = Field(default_factory=list)


class JobTimings(BaseModel):
    """Job timing breakdown in milliseconds (2 decimals)."""

    model_config = _WIRE_CONFIG

    total: float
    fanout: float
    slowest: float
    merge: float


@dataclass
class JobResult:
    """Everything a completed job produced.

    Attributes:
        result: Merged answer text.
        responses: Raw response per model.
        structured: Merged structured result.
        timings: Timing breakdown.
        parsed: Typed value when a schema was supplied, else None.
    """

    result: str
    responses: dict[str, str]
    structured: MergedResult
    timings: JobTimings
    parsed: Any = None


class JobResponse(BaseModel):
    """Success body of ``POST /run``."""

    model_config = _WIRE_CONFIG

    result: str
    responses: dict[str, str]
    structured: MergedResult
    timings: JobTimings | None = None

    @classmethod
    def from_job_result(cls, job_result: JobResult) -> JobResponse:
        """Build the wire response from a JobResult."""
        return cls(
            result=job_result.result,
            responses=job_result.responses,
            structured=job_result.structured,
            timings=job_result.timings,
        )
