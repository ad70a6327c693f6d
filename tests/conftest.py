"""Shared pytest fixtures for SketchCalc tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from sketchcalc.api.main import create_app
from sketchcalc.core.config import SketchcalcConfig
from sketchcalc.core.model_client import ModelClient


class StubModelClient(ModelClient):
    """ModelClient that returns canned text and records every call.

    Attributes:
        reply: Text returned by :meth:`generate`.
        error: If set, raised by :meth:`generate` instead of replying.
        calls: ``(prompt, image_data)`` tuples, one per call.
    """

    def __init__(self, reply: str = "[]", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate(self, prompt: str, image_data: str) -> str:
        self.calls.append((prompt, image_data))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def test_config() -> SketchcalcConfig:
    """Create a configuration with a usable API key and no .env lookup.

    Returns:
        SketchcalcConfig instance for testing
    """
    return SketchcalcConfig(
        gemini_api_key="test-key",
        gemini_model="gemini-test",
        _env_file=None,
    )


@pytest.fixture
def unconfigured_config() -> SketchcalcConfig:
    """Create a configuration without an API key.

    Returns:
        SketchcalcConfig instance whose ``has_api_key`` is False
    """
    return SketchcalcConfig(gemini_api_key="", _env_file=None)


@pytest.fixture
def stub_client() -> StubModelClient:
    """Create a stub model client replying with a single expression.

    Returns:
        StubModelClient instance
    """
    return StubModelClient(reply='[{"expr": "2+2", "result": "4"}]')


@pytest.fixture
def test_client(test_config: SketchcalcConfig, stub_client: StubModelClient) -> TestClient:
    """Create a TestClient for an app wired to the stub model client.

    Returns:
        FastAPI TestClient
    """
    app = create_app(test_config, model_client=stub_client)
    return TestClient(app)


@pytest.fixture
def valid_payload() -> dict:
    """A well-formed ``POST /calculate`` body.

    Returns:
        Dictionary with ``image`` and ``dict_of_vars``
    """
    return {"image": "data:image/png;base64,AAAA", "dict_of_vars": {}}


@pytest.fixture
def make_test_client(test_config: SketchcalcConfig):
    """Factory fixture building a TestClient around a fresh stub client.

    Returns:
        Callable ``(reply="[]", error=None, config=None)`` returning a
        ``(TestClient, StubModelClient)`` tuple
    """

    def _make(
        reply: str = "[]",
        error: Exception | None = None,
        config: SketchcalcConfig | None = None,
    ) -> tuple[TestClient, StubModelClient]:
        client = StubModelClient(reply=reply, error=error)
        app = create_app(config or test_config, model_client=client)
        return TestClient(app), client

    return _make
