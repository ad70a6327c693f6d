"""Core services for SketchCalc.

- **SketchcalcConfig** / **config**: environment-based settings
  (``SKETCHCALC_`` prefix, plus ``GEMINI_API_KEY``).
- **Errors**: domain exceptions carrying their HTTP status and JSON body.
- **ModelClient** / **GeminiModelClient**: the narrow
  ``generate(prompt, image_data) -> text`` capability and its Gemini
  implementation.
"""

from sketchcalc.core.config import SketchcalcConfig, config
from sketchcalc.core.errors import (
    ConfigurationError,
    ParseError,
    SketchcalcError,
    UpstreamError,
    ValidationError,
)
from sketchcalc.core.model_client import GeminiModelClient, ModelClient

__all__ = [
    "ConfigurationError",
    "GeminiModelClient",
    "ModelClient",
    "ParseError",
    "SketchcalcConfig",
    "SketchcalcError",
    "UpstreamError",
    "ValidationError",
    "config",
]
