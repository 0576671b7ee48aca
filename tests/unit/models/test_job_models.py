"""Tests for request/response models.

Tests verify:
- JobRequest validation and camelCase aliases
- Inert optional fields are preserved
- Result models serialize to camelCase
- FanoutResult.slowest_ms
"""

import pytest
from pydantic import ValidationError

from src.models.requests import JobRequest, Strategy
from src.models.responses import (
    FanoutResult,
    Intent,
    JobResponse,
    JobResult,
    JobTimings,
    MergedResult,
    ModelInvocationResult,
    StructuredModelResult,
)


class TestJobRequest:
    """Test JobRequest validation."""

    def test_minimal_request_defaults_to_consensus(self) -> None:
        request = JobRequest(prompt="hi", models=["m1"])

        assert request.strategy == Strategy.CONSENSUS
        assert request.temperature is None
        assert request.max_retries is None
        assert request.metadata is None

    def test_camel_case_alias_accepted(self) -> None:
        request = JobRequest.model_validate(
            {"prompt": "hi", "models": ["m1"], "maxRetries": 2, "strategy": "cooperative"}
        )

        assert request.max_retries == 2
        assert request.strategy == Strategy.COOPERATIVE

    def test_snake_case_name_accepted(self) -> None:
        request = JobRequest.model_validate(
            {"prompt": "hi", "models": ["m1"], "max_retries": 1}
        )
        assert request.max_retries == 1

    def test_inert_fields_preserved(self) -> None:
        request = JobRequest(
            prompt="hi",
            models=["m1"],
            temperature=0.3,
            metadata={"trace": "abc"},
        )

        assert request.temperature == 0.3
        assert request.metadata == {"trace": "abc"}

    def test_inert_fields_not_validated(self) -> None:
        request = JobRequest.model_validate(
            {
                "prompt": "hi",
                "models": ["m1"],
                "temperature": "hot",
                "maxRetries": -1,
                "metadata": ["not", "a", "mapping"],
            }
        )

        assert request.temperature == "hot"
        assert request.max_retries == -1
        assert request.metadata == ["not", "a", "mapping"]

    def test_empty_prompt_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JobRequest(prompt="", models=["m1"])

    def test_empty_models_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JobRequest(prompt="hi", models=[])

    def test_unknown_strategy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JobRequest.model_validate({"prompt": "hi", "models": ["m1"], "strategy": "vote"})

    def test_request_is_frozen(self) -> None:
        request = JobRequest(prompt="hi", models=["m1"])
        with pytest.raises(ValidationError):
            request.prompt = "changed"  # type: ignore[misc]

    def test_model_order_preserved(self) -> None:
        request = JobRequest(prompt="hi", models=["c", "a", "b"])
        assert request.models == ["c", "a", "b"]


class TestResultModels:
    """Test result model serialization."""

    def test_merged_result_defaults(self) -> None:
        merged = MergedResult()

        assert merged.summary == ""
        assert merged.intent == Intent.UNKNOWN
        assert merged.confidence == 0.0
        assert merged.needs_clarification is False
        assert merged.supporting_models == []
        assert merged.responses == []

    def test_merged_result_serializes_camel_case(self) -> None:
        merged = MergedResult(
            summary="42",
            intent=Intent.ANSWER,
            confidence=0.6,
            supporting_models=["m1"],
        )

        data = merged.model_dump(by_alias=True, mode="json")

        assert data["needsClarification"] is False
        assert data["supportingModels"] == ["m1"]
        assert data["intent"] == "answer"

    def test_structured_confidence_bounds(self) -> None:
        with pytest.raises(ValidationError):
            StructuredModelResult(
                model="m1", raw="x", summary="x", intent=Intent.ANSWER, confidence=0.99
            )

    def test_merged_confidence_upper_bound(self) -> None:
        with pytest.raises(ValidationError):
            MergedResult(confidence=0.96)

    def test_job_response_from_job_result(self) -> None:
        timings = JobTimings(total=10.5, fanout=8.25, slowest=8.0, merge=0.12)
        job = JobResult(
            result="42",
            responses={"m1": "42"},
            structured=MergedResult(summary="42"),
            timings=timings,
            parsed=42,
        )

        data = JobResponse.from_job_result(job).model_dump(by_alias=True, mode="json")

        assert set(data) == {"result", "responses", "structured", "timings"}
        assert data["timings"] == {"total": 10.5, "fanout": 8.25, "slowest": 8.0, "merge": 0.12}


class TestFanoutResult:
    """Test FanoutResult helpers."""

    def test_slowest_is_max_duration(self) -> None:
        fanout = FanoutResult(
            results=[
                ModelInvocationResult(model="m1", response="a", duration_ms=12.0),
                ModelInvocationResult(model="m2", response="b", duration_ms=30.5),
            ],
            fanout_ms=31.0,
        )
        assert fanout.slowest_ms == 30.5

    def test_slowest_of_empty_is_zero(self) -> None:
        assert FanoutResult(results=[], fanout_ms=0.0).slowest_ms == 0.0
