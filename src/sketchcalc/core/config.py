"""Configuration management for SketchCalc.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the SKETCHCALC_ prefix,
allowing easy customization without code changes.  The Gemini credential is the
one exception: it is also read from the bare ``GEMINI_API_KEY`` variable, which
is the name most deployment environments already use.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (SKETCHCALC_* prefix, or GEMINI_API_KEY)
2. .env file in the project root
3. Default values defined in SketchcalcConfig

Example .env file:
    GEMINI_API_KEY=AIza...
    SKETCHCALC_GEMINI_MODEL=gemini-2.5-flash-preview-05-20
    SKETCHCALC_SERVER_PORT=8787
    SKETCHCALC_LOG_LEVEL=DEBUG

Missing Credential
------------------
A missing or placeholder API key does NOT fail at import time.  The server
starts normally and ``POST /calculate`` answers with a 500 configuration
error until the key is supplied.  Use :attr:`SketchcalcConfig.has_api_key`
to check.

Usage Example
-------------
    from sketchcalc.core.config import config

    print(config.gemini_model)
    print(config.has_api_key)
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Value shipped in example .env files; treated the same as an unset key.
API_KEY_PLACEHOLDER = "your_gemini_api_key_here"


class SketchcalcConfig(BaseSettings):
    """Main configuration for SketchCalc.

    Attributes
    ----------
    Model Settings:
        gemini_api_key : str
            Credential for the Gemini API.  Empty means "not configured".
        gemini_model : str
            Gemini model name used for every calculation request.

    Server Settings:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Bind port for uvicorn (1024-65535).
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root logging level configured by the CLI entry point.

    Examples
    --------
    Create a custom configuration:

        >>> custom_config = SketchcalcConfig(
        ...     gemini_api_key="test-key",
        ...     gemini_model="gemini-2.0-flash",
        ... )
        >>> custom_config.has_api_key
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SKETCHCALC_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Model settings
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "gemini_api_key",
            "SKETCHCALC_GEMINI_API_KEY",
            "GEMINI_API_KEY",
        ),
        description="Gemini API key (GEMINI_API_KEY or SKETCHCALC_GEMINI_API_KEY)",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash-preview-05-20",
        description="Gemini model used to read the handwritten math",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=8787,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the CLI entry point",
    )

    @property
    def has_api_key(self) -> bool:
        """Whether a usable Gemini API key is configured.

        Blank values and the documented placeholder both count as missing.
        """
        key = self.gemini_api_key.strip()
        return bool(key) and key != API_KEY_PLACEHOLDER


# Global configuration instance
# Loaded once at import time from the environment and .env file.  The API
# layer receives it explicitly through ``create_app`` rather than reading it
# from here inside request handlers.
config = SketchcalcConfig()
