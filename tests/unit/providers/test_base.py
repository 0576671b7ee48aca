"""Tests for ModelInvoker base class and require_payload."""

import pytest

from src.core.exceptions import ModelError
from src.providers.base import ModelInvoker, require_payload
from tests.fakes import FakeModelInvoker


class TestRequirePayload:
    """Test require_payload()."""

    def test_returns_text(self) -> None:
        assert require_payload("m1", "hello") == "hello"

    @pytest.mark.parametrize("payload", [None, "", 42, {"result": "x"}])
    def test_rejects_missing_or_empty(self, payload: object) -> None:
        with pytest.raises(ModelError, match="Invalid response from model m1") as exc_info:
            require_payload("m1", payload)
        assert exc_info.value.model_id == "m1"


class TestModelInvokerABC:
    """Test the ModelInvoker contract."""

    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            ModelInvoker()  # type: ignore[abstract]

    def test_default_name_is_class_name(self) -> None:
        class EchoInvoker(ModelInvoker):
            async def invoke(self, model_id: str, prompt: str) -> str:
                return prompt

        assert EchoInvoker().name == "EchoInvoker"

    async def test_default_aclose_is_noop(self) -> None:
        class EchoInvoker(ModelInvoker):
            async def invoke(self, model_id: str, prompt: str) -> str:
                return prompt

        await EchoInvoker().aclose()

    def test_fake_is_model_invoker(self) -> None:
        assert isinstance(FakeModelInvoker(), ModelInvoker)
