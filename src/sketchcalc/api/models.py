"""Pydantic request and response models for the SketchCalc API.

These models define the JSON schema for the ``POST /calculate`` endpoint.

Models
------
CalculationRequest
    Validated form of the ``POST /calculate`` body.  Built by
    :func:`sketchcalc.api.validation.validate_calculation_request` rather
    than by FastAPI's automatic body parsing, so that malformed bodies get
    the documented 400 messages instead of a generic 422.
ResultRecord
    One expression/result pair read from the drawing.
CalculationResponse
    Envelope returned by ``POST /calculate`` on success or warning.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class CalculationRequest(BaseModel):
    """Request body for the ``POST /calculate`` endpoint.

    Attributes:
        image: Drawing as a ``data:image/png;base64,...`` URI or a raw
            base64 string.
        dict_of_vars: Variables the user assigned earlier, keyed by name.
            Echoed into the prompt so the model can substitute them.
    """

    image: str = Field(
        ...,
        min_length=1,
        description="Data URI or raw base64 of the drawing.",
    )
    dict_of_vars: dict[str, Any] = Field(
        ...,
        description="Previously assigned variables, e.g. {'x': 2}.",
    )


class ResultRecord(BaseModel):
    """A single expression/result pair.

    Attributes:
        expr: The expression as read from the drawing, or an explanation.
        result: The computed value, always a display string.
        assign: ``True`` when the record assigns a variable.
    """

    expr: str = Field(..., description="Expression or explanation text.")
    result: str = Field(..., description="Computed value as a display string.")
    assign: bool = Field(
        default=False,
        description="True if this record is a variable assignment.",
    )


class CalculationResponse(BaseModel):
    """Response body for ``POST /calculate``.

    Attributes:
        message: Human-readable summary.
        status: ``"success"`` or ``"warning"``; errors are rendered by the
            exception handlers in :mod:`sketchcalc.api.main`.
        data: Ordered result records, in the order the model reported them.
    """

    message: str
    status: Literal["success", "warning", "error"]
    data: list[ResultRecord] = Field(default_factory=list)
