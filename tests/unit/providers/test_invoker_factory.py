"""Unit tests for InvokerFactory."""

from collections.abc import Generator

import pytest

from src.core.config import Settings
from src.core.exceptions import ConfigurationError
from src.providers.base import ModelInvoker
from src.providers.factory import InvokerFactory, create_invoker
from src.providers.fallback import FallbackModelInvoker
from src.providers.http import HttpModelInvoker
from tests.fakes import FakeModelInvoker


@pytest.fixture
def restore_registry() -> Generator[None, None, None]:
    """Undo register_invoker() calls made by a test."""
    saved = dict(InvokerFactory._registry)
    yield
    InvokerFactory._registry = saved


class TestCreateInvoker:
    """Test invoker construction from settings."""

    def test_no_endpoints_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="No model endpoints") as exc_info:
            InvokerFactory.create_invoker(Settings(model_endpoints=[]))
        assert exc_info.value.setting == "model_endpoints"

    def test_single_endpoint_gives_http_invoker(self) -> None:
        invoker = create_invoker(Settings(model_endpoints=["http://a/run"]))

        assert isinstance(invoker, HttpModelInvoker)
        assert invoker.endpoint == "http://a/run"

    def test_several_endpoints_give_fallback(self) -> None:
        invoker = InvokerFactory.create_invoker(
            Settings(model_endpoints=["http://a/run", "https://b/run"])
        )

        assert isinstance(invoker, FallbackModelInvoker)
        assert [b.endpoint for b in invoker.backends] == ["http://a/run", "https://b/run"]  # type: ignore[attr-defined]

    def test_unsupported_scheme_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported model endpoint scheme"):
            InvokerFactory.create_invoker(Settings(model_endpoints=["ftp://a/run"]))


class TestRegistry:
    """Test scheme registration."""

    def test_http_schemes_registered(self) -> None:
        assert {"http", "https"} <= set(InvokerFactory.get_registered_schemes())

    @pytest.mark.usefixtures("restore_registry")
    def test_register_custom_scheme(self) -> None:
        fake = FakeModelInvoker()

        def build(_endpoint: str, _settings: Settings) -> ModelInvoker:
            return fake

        InvokerFactory.register_invoker("FAKE", build)

        assert "fake" in InvokerFactory.get_registered_schemes()
        assert InvokerFactory.create_invoker(Settings(model_endpoints=["fake://x"])) is fake
