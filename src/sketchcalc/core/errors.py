"""Domain exceptions for SketchCalc.

Every failure a ``POST /calculate`` request can end in is represented by a
subclass of :class:`SketchcalcError`.  Each subclass knows its HTTP status
code and how to render itself as the JSON error body, so the API layer only
needs a single exception handler.

=====================  ======  ==========================================
Exception              Status  Raised when
=====================  ======  ==========================================
ConfigurationError     500     The Gemini API key is missing/placeholder
ValidationError        400     The request body has the wrong shape
UpstreamError          500     The Gemini call failed
ParseError             500     No normalizer strategy recovered records
=====================  ======  ==========================================
"""

from __future__ import annotations

from typing import Any


class SketchcalcError(Exception):
    """Base class for errors that are reported to the API caller.

    Attributes:
        message: Human-readable summary, returned as ``message``.
        error: Optional underlying error text, returned as ``error``.
        status_code: HTTP status code for the response.
    """

    status_code: int = 500

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> dict[str, Any]:
        """Render the error as a JSON-serialisable response body."""
        payload: dict[str, Any] = {"message": self.message, "status": "error"}
        if self.error is not None:
            payload["error"] = self.error
        return payload


class ConfigurationError(SketchcalcError):
    """The server is missing configuration required to serve the request."""

    status_code = 500


class ValidationError(SketchcalcError):
    """The request body does not have the required shape.

    The message is intended to be displayed directly to the user.
    """

    status_code = 400


class UpstreamError(SketchcalcError):
    """The generative model call failed (transport, quota, blocked, ...)."""

    status_code = 500

    def __init__(self, error: str) -> None:
        super().__init__("Failed to process image", error=error)


class ParseError(SketchcalcError):
    """The model reply could not be turned into result records.

    Attributes:
        raw_response: Leading slice of the model reply, for diagnostics.
    """

    status_code = 500

    def __init__(self, error: str, raw_response: str) -> None:
        super().__init__("Failed to parse response from AI model.", error=error)
        self.raw_response = raw_response

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["raw_response"] = self.raw_response
        return payload
