"""Typed parsing of a job's merged text.

A Schema turns the merged answer into a typed value. It is optional:
callers that pass none get ``JobResult.parsed = None``.

Example:
    class Answer(BaseModel):
        value: int

    job = await orchestrator.run_job(request, schema=from_pydantic(Answer))
    job.parsed.value
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter, ValidationError


T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Schema(Protocol[T_co]):
    """Anything that can parse merged text into a value."""

    def parse(self, value: str) -> T_co:
        """Parse the merged text.

        Raises:
            Exception: Any error means the text does not fit the schema.
        """
        ...


class PydanticSchema(Generic[T]):
    """Schema backed by a pydantic TypeAdapter.

    The text is validated as JSON first; when that fails it is validated
    as a plain Python string, so ``from_pydantic(str)`` accepts free-form
    answers and ``from_pydantic(int)`` accepts "42".
    """

    def __init__(self, type_: type[T]) -> None:
        self._adapter: TypeAdapter[T] = TypeAdapter(type_)

    def parse(self, value: str) -> T:
        try:
            return self._adapter.validate_json(value)
        except ValidationError:
            return self._adapter.validate_python(value)


class CallableSchema(Generic[T]):
    """Schema backed by a plain function."""

    def __init__(self, fn: Callable[[str], T]) -> None:
        self._fn = fn

    def parse(self, value: str) -> T:
        return self._fn(value)


def from_pydantic(type_: type[T]) -> PydanticSchema[T]:
    """Build a Schema from a pydantic model or any type TypeAdapter accepts."""
    return PydanticSchema(type_)


def from_callable(fn: Callable[[str], Any]) -> CallableSchema[Any]:
    """Build a Schema from a function taking the merged text."""
    return CallableSchema(fn)
