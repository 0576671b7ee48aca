"""Inbound job request model.

JSON field names are camelCase on the wire (``maxRetries``) and snake_case
in Python (``max_retries``). Both spellings are accepted on input.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Strategy(str, Enum):
    """Merge strategy for a job.

    - consensus: parallel independent invocation, majority-intent merge
    - cooperative: sequential chain, each model sees prior outputs
    """

    CONSENSUS = "consensus"
    COOPERATIVE = "cooperative"


class JobRequest(BaseModel):
    """A validated orchestration job. Immutable once accepted.

    Attributes:
        prompt: Prompt sent to every model.
        models: Model identifiers; order matters for the cooperative chain.
        strategy: Merge strategy. Default: consensus.
        temperature: Passed through unvalidated, currently not consumed.
        max_retries: Passed through unvalidated, currently not consumed.
        metadata: Passed through unvalidated, currently not consumed.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    prompt: str = Field(min_length=1, description="Prompt sent to every model")
    models: list[str] = Field(
        min_length=1,
        description="Ordered model identifiers",
    )
    strategy: Strategy = Field(
        default=Strategy.CONSENSUS,
        description="consensus or cooperative",
    )
    temperature: Any = Field(
        default=None,
        description="Inert: not consumed by the orchestration core",
    )
    max_retries: Any = Field(
        default=None,
        description="Inert: no retries are performed",
    )
    metadata: Any = Field(
        default=None,
        description="Inert: opaque caller metadata",
    )
