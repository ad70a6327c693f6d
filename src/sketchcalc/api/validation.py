"""Validation of ``POST /calculate`` bodies and server readiness."""

import logging
from typing import Any

from sketchcalc.api.models import CalculationRequest
from sketchcalc.core.config import SketchcalcConfig
from sketchcalc.core.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


def ensure_api_key(config: SketchcalcConfig) -> None:
    """Check that the server can reach the model at all.

    Args:
        config: Application configuration.

    Raises:
        ConfigurationError: If the Gemini API key is missing or still the
            placeholder value.
    """
    if not config.has_api_key:
        logger.error("FATAL ERROR: GEMINI_API_KEY is not set in the server environment.")
        raise ConfigurationError("Server configuration error: GEMINI_API_KEY is not set.")


def validate_calculation_request(body: Any) -> CalculationRequest:
    """Validate a decoded JSON body with user-friendly messages.

    Only the shape is checked: ``image`` must be a non-empty string and
    ``dict_of_vars`` must be an object.  The image content itself is not
    inspected.

    Args:
        body: The decoded JSON request body.

    Returns:
        The validated request.

    Raises:
        ValidationError: If validation fails with user-friendly message
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")

    image = body.get("image")
    if not image or not isinstance(image, str):
        raise ValidationError("Image data is required and must be a string.")

    variables = body.get("dict_of_vars")
    if not isinstance(variables, dict):
        raise ValidationError("dict_of_vars is required and must be an object.")

    return CalculationRequest(image=image, dict_of_vars=variables)
