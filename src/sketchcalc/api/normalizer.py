"""Recovery of result records from free-text model replies.

The model is asked for a JSON array of ``{"expr", "result", "assign"}``
objects, but it does not always comply: replies arrive wrapped in Markdown
fences, with bare fractions (``3/4``) in number position, with nested
objects as results, or as prose that merely mentions the fields.  This
module turns whatever came back into an ordered list of
:class:`~sketchcalc.api.models.ResultRecord`.

Strategy Chain
--------------
Parsing is a chain of independent strategies tried in order; the first
one that returns a value wins:

1. ``direct`` - plain :func:`json.loads`.
2. ``cleanup`` - strip code fences, collapse ``{"result": {...}}`` into a
   string, rewrite bare ``N/D`` as a 4-decimal string, then
   :func:`json.loads`.
3. ``regex`` - pull the first ``"expr"`` and the first ``"result"``
   fields out of the raw text and synthesize a single record.

Each strategy raises :class:`StrategyFailed` when it cannot produce a
value.  When every strategy fails, :class:`ResponseNormalizer` raises
:class:`~sketchcalc.core.errors.ParseError`.

Post-processing
---------------
Whatever value the chain produced is then passed through
:func:`normalize_records`, which coerces it into a list and makes every
record conform to the output contract (string ``expr``, string
``result``, boolean ``assign``).

Known Limitation
----------------
The ``regex`` strategy sets ``assign`` when the literal ``"assign": true``
appears anywhere in the reply, not only inside the record it extracted.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from sketchcalc.api.models import CalculationResponse, ResultRecord
from sketchcalc.core.errors import ParseError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns used by the cleanup and regex strategies.
# ---------------------------------------------------------------------------
_FENCE_RE = re.compile(r"^```(?:json)?\n?|```$", re.MULTILINE)
_NESTED_RESULT_RE = re.compile(r'\{\s*"result":\s*\{([^}]+)\}\s*\}')
_BARE_FRACTION_RE = re.compile(r"(\d+)/(\d+)")
_EXPR_FIELD_RE = re.compile(r'"expr":\s*"([^"]+)"')
_RESULT_FIELD_RE = re.compile(r'"result":\s*([^,}]+)')
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

ASSIGN_MARKER = '"assign": true'

# Diagnostic slice lengths for error and warning payloads.
PARSE_ERROR_PREVIEW_CHARS = 200
WARNING_PREVIEW_CHARS = 500

NO_EQUATION_RECORD = ResultRecord(
    expr="No equation detected",
    result="Please draw a clearer mathematical expression",
    assign=False,
)


class StrategyFailed(Exception):
    """A single parsing strategy could not recover a value."""


@dataclass(frozen=True)
class Strategy:
    """A named ``text -> parsed value`` function in the recovery chain."""

    name: str
    parse: Callable[[str], Any]


# ---------------------------------------------------------------------------
# Display helpers.
# ---------------------------------------------------------------------------


def display_value(value: Any) -> str:
    """Render a decoded JSON value as the string shown to the user.

    Scalars are written the way they appear in JSON (``true``, ``null``,
    ``2`` rather than ``2.0``); containers are written as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _display_or_default(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return display_value(value)


def _is_falsy(value: Any) -> bool:
    """Whether *value* is a falsy JSON scalar (null, "", false, 0, NaN)."""
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)):
        return value == 0 or math.isnan(value)
    return False


def _display_expr(value: Any) -> str:
    if _is_falsy(value):
        return "Expression"
    return display_value(value)


def _format_decimal(numerator: float, denominator: float) -> str:
    return f"{numerator / denominator:.4f}"


def _approximate_fraction(result: str) -> str:
    """Append a 4-decimal approximation to a ``N/D`` result string.

    ``"3/4"`` becomes ``"3/4 ≈ 0.7500"``.  Strings that are not exactly
    two numbers around a single slash are returned unchanged.
    """
    parts = result.split("/")
    if len(parts) != 2:
        return result
    numerator, denominator = (p.strip() for p in parts)
    if not (_NUMBER_RE.fullmatch(numerator) and _NUMBER_RE.fullmatch(denominator)):
        return result
    if float(denominator) == 0:
        return result
    return f"{result} ≈ {_format_decimal(float(numerator), float(denominator))}"


# ---------------------------------------------------------------------------
# Strategies.
# ---------------------------------------------------------------------------


def parse_direct(text: str) -> Any:
    """Decode *text* as JSON, accepting any JSON value."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StrategyFailed(str(e)) from e


def _collapse_nested_result(match: re.Match) -> str:
    content = match.group(1)
    simplified = content.replace('"', "").strip()
    return match.group(0).replace("{" + content + "}", f'"{simplified}"', 1)


def _fraction_to_decimal(match: re.Match) -> str:
    numerator, denominator = float(match.group(1)), float(match.group(2))
    if denominator == 0:
        return match.group(0)
    return f'"{_format_decimal(numerator, denominator)}"'


def clean_response_text(text: str) -> str:
    """Apply the textual rewrites used by the ``cleanup`` strategy.

    1. Remove Markdown fence markers and surrounding whitespace.
    2. Replace ``{"result": {"x": 2}}`` with ``{"result": "x: 2"}``.
    3. Replace every bare ``N/D`` with ``"<N÷D to 4 decimals>"``.

    The fraction rewrite is purely textual: it also fires inside quoted
    strings, which can leave the text unparseable.  The ``regex``
    strategy exists to catch those cases.
    """
    cleaned = _FENCE_RE.sub("", text).strip()
    cleaned = _NESTED_RESULT_RE.sub(_collapse_nested_result, cleaned)
    return _BARE_FRACTION_RE.sub(_fraction_to_decimal, cleaned)


def parse_cleaned(text: str) -> Any:
    """Decode *text* as JSON after :func:`clean_response_text`."""
    cleaned = clean_response_text(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug(f"Cleaned text: {cleaned}")
        raise StrategyFailed(str(e)) from e


def rescue_with_regex(text: str) -> list[dict[str, Any]]:
    """Synthesize one record from the first ``expr``/``result`` fields."""
    expr_match = _EXPR_FIELD_RE.search(text)
    result_match = _RESULT_FIELD_RE.search(text)
    if not (expr_match and result_match):
        raise StrategyFailed("no expr/result fields found in response text")

    result_value = result_match.group(1).strip()
    result_value = re.sub(r'[{}"]', "", result_value)
    return [
        {
            "expr": expr_match.group(1),
            "result": result_value,
            "assign": ASSIGN_MARKER in text,
        }
    ]


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("direct", parse_direct),
    Strategy("cleanup", parse_cleaned),
    Strategy("regex", rescue_with_regex),
)


# ---------------------------------------------------------------------------
# Post-processing.
# ---------------------------------------------------------------------------


def normalize_item(item: Any) -> ResultRecord:
    """Coerce a single decoded element into a :class:`ResultRecord`."""
    if not isinstance(item, dict):
        return ResultRecord(
            expr="Invalid item in response",
            result=display_value(item),
            assign=False,
        )

    result = item.get("result")
    if isinstance(result, dict):
        if "x" in result:
            result = f"x = {display_value(result['x'])}"
        elif "y" in result:
            result = f"y = {display_value(result['y'])}"
        else:
            result = display_value(result)
    elif isinstance(result, str) and "/" in result:
        result = _approximate_fraction(result)

    return ResultRecord(
        expr=_display_expr(item.get("expr")),
        result=_display_or_default(result, "No result"),
        assign=bool(item.get("assign")),
    )


def normalize_records(parsed: Any) -> list[ResultRecord]:
    """Coerce the output of a strategy into an ordered list of records.

    A single object becomes a one-element list; ``None`` becomes an empty
    list.  Order is preserved.
    """
    if parsed is None:
        items: list[Any] = []
    elif isinstance(parsed, list):
        items = parsed
    else:
        items = [parsed]
    return [normalize_item(item) for item in items]


# ---------------------------------------------------------------------------
# Chain runner.
# ---------------------------------------------------------------------------


class ResponseNormalizer:
    """Runs the strategy chain and post-processes the winning value.

    Args:
        strategies: Strategies to try in order.  Defaults to
            :data:`DEFAULT_STRATEGIES`.
    """

    def __init__(self, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES) -> None:
        self.strategies = tuple(strategies)

    def parse(self, text: str) -> Any:
        """Return the value produced by the first successful strategy.

        Raises:
            ParseError: If every strategy fails.
        """
        failures: list[str] = []
        for strategy in self.strategies:
            try:
                value = strategy.parse(text)
            except StrategyFailed as e:
                logger.warning(f"Strategy '{strategy.name}' could not parse model response: {e}")
                failures.append(f"{strategy.name}: {e}")
                continue
            if failures:
                logger.info(f"Recovered model response with strategy '{strategy.name}'")
            return value

        raise ParseError(
            error="; ".join(failures),
            raw_response=text[:PARSE_ERROR_PREVIEW_CHARS] + "...",
        )

    def normalize(self, text: str) -> list[ResultRecord]:
        """Parse *text* and return the normalized records."""
        return normalize_records(self.parse(text))


def build_response(records: list[ResultRecord], raw_text: str) -> CalculationResponse:
    """Wrap normalized records in the response envelope.

    An empty record list is never returned as-is: if the model said
    something, a ``warning`` exposes the start of the raw reply; if it said
    nothing, a placeholder record asks for a clearer drawing.
    """
    if not records and raw_text:
        return CalculationResponse(
            message="Image processed, but no valid parsable data found in AI response.",
            status="warning",
            data=[
                ResultRecord(
                    expr="Raw AI Response",
                    result=raw_text[:WARNING_PREVIEW_CHARS] + "...",
                    assign=False,
                )
            ],
        )

    return CalculationResponse(
        message="Image processed",
        status="success",
        data=records or [NO_EQUATION_RECORD],
    )
