"""Tests for sketchcalc.core.config - configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the SKETCHCALC_ prefix.
- The bare GEMINI_API_KEY variable.
- API key readiness (blank and placeholder keys).
- Pydantic validation constraints (port range, log level literals).
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sketchcalc.core.config import API_KEY_PLACEHOLDER, SketchcalcConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove any real credentials or overrides from the environment."""
    for name in (
        "GEMINI_API_KEY",
        "SKETCHCALC_GEMINI_API_KEY",
        "SKETCHCALC_GEMINI_MODEL",
        "SKETCHCALC_SERVER_HOST",
        "SKETCHCALC_SERVER_PORT",
        "SKETCHCALC_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestConfigDefaults:
    """Verify that SketchcalcConfig provides sensible defaults."""

    def test_default_api_key_is_empty(self):
        cfg = SketchcalcConfig(_env_file=None)
        assert cfg.gemini_api_key == ""
        assert cfg.has_api_key is False

    def test_default_model(self):
        cfg = SketchcalcConfig(_env_file=None)
        assert cfg.gemini_model == "gemini-2.5-flash-preview-05-20"

    def test_default_server_settings(self):
        cfg = SketchcalcConfig(_env_file=None)
        assert cfg.server_host == "0.0.0.0"
        assert cfg.server_port == 8787

    def test_default_log_level(self):
        assert SketchcalcConfig(_env_file=None).log_level == "INFO"


class TestConfigEnvironment:
    """Verify environment variable loading."""

    def test_bare_gemini_api_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        cfg = SketchcalcConfig(_env_file=None)
        assert cfg.gemini_api_key == "from-env"
        assert cfg.has_api_key is True

    def test_prefixed_gemini_api_key(self, monkeypatch):
        monkeypatch.setenv("SKETCHCALC_GEMINI_API_KEY", "prefixed")
        assert SketchcalcConfig(_env_file=None).gemini_api_key == "prefixed"

    def test_prefixed_model_override(self, monkeypatch):
        monkeypatch.setenv("SKETCHCALC_GEMINI_MODEL", "gemini-2.0-flash")
        assert SketchcalcConfig(_env_file=None).gemini_model == "gemini-2.0-flash"

    def test_port_override(self, monkeypatch):
        monkeypatch.setenv("SKETCHCALC_SERVER_PORT", "9000")
        assert SketchcalcConfig(_env_file=None).server_port == 9000

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=file-key\nSKETCHCALC_LOG_LEVEL=DEBUG\n")
        cfg = SketchcalcConfig(_env_file=str(env_file))
        assert cfg.gemini_api_key == "file-key"
        assert cfg.log_level == "DEBUG"

    def test_keyword_argument_wins(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert SketchcalcConfig(gemini_api_key="explicit", _env_file=None).gemini_api_key == "explicit"


class TestHasApiKey:
    """Verify detection of unusable credentials."""

    def test_placeholder_is_not_a_key(self):
        cfg = SketchcalcConfig(gemini_api_key=API_KEY_PLACEHOLDER, _env_file=None)
        assert cfg.has_api_key is False

    def test_whitespace_is_not_a_key(self):
        cfg = SketchcalcConfig(gemini_api_key="   ", _env_file=None)
        assert cfg.has_api_key is False

    def test_real_key(self, test_config: SketchcalcConfig):
        assert test_config.has_api_key is True


class TestConfigValidation:
    """Verify Pydantic constraints."""

    def test_port_below_range(self):
        with pytest.raises(ValidationError):
            SketchcalcConfig(server_port=80, _env_file=None)

    def test_port_above_range(self):
        with pytest.raises(ValidationError):
            SketchcalcConfig(server_port=70000, _env_file=None)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            SketchcalcConfig(log_level="VERBOSE", _env_file=None)
