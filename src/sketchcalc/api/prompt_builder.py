"""Prompt compilation for SketchCalc.

The prompt sent to the model is a fixed instruction template with a single
interpolated value: the caller's dictionary of variables, serialised as
compact JSON.  Everything else (evaluation order, the five problem
categories, the output contract and the decimal-formatting rule) is static
text.

Template Structure::

    [Task description]

    [PEMDAS rule with two worked examples]

    [The five problem categories and their output formats]

    [Escaping rule]

    [Dictionary of user-assigned variables]

    [Output contract: JSON array, no Markdown, string decimal results]

The module also extracts the base64 body from an image data URI, which is
the only other request-dependent input the model call needs.

Usage
-----
::

    prompt = build_prompt({"x": 2})
    image_data = extract_image_data("data:image/png;base64,iVBORw0...")
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

# ---------------------------------------------------------------------------
# Fixed instruction template.
# ``{variables}`` is the only placeholder; every literal brace in the JSON
# examples is doubled for ``str.format``.
# ---------------------------------------------------------------------------

_PROMPT_TEMPLATE = """
You have been given an image with some mathematical expressions, equations, or graphical problems, and you need to solve them.
Note: Use the PEMDAS rule for solving mathematical expressions. PEMDAS stands for the Priority Order: Parentheses, Exponents, Multiplication and Division (from left to right), Addition and Subtraction (from left to right). Parentheses have the highest priority, followed by Exponents, then Multiplication and Division, and lastly Addition and Subtraction.
For example:
Q. 2 + 3 * 4
(3 * 4) => 12, 2 + 12 = 14.
Q. 2 + 3 + 5 * 4 - 8 / 2
5 * 4 => 20, 8 / 2 => 4, 2 + 3 => 5, 5 + 20 => 25, 25 - 4 => 21.
YOU CAN HAVE FIVE TYPES OF EQUATIONS/EXPRESSIONS IN THIS IMAGE. SOLVE ALL EQUATIONS/EXPRESSIONS YOU FIND IN THE IMAGE:
Following are the cases:
1. Simple mathematical expressions like 2 + 2, 3 * 4, 5 / 6, 7 - 8, etc.: In this case, solve and return the answer in the format of a LIST OF DICTS [{{"expr": "given expression", "result": "calculated answer"}}]. IF MULTIPLE EXPRESSIONS ARE PRESENT, RETURN ONE DICT FOR EACH EXPRESSION.
2. Set of Equations like x^2 + 2x + 1 = 0, 3y + 4x = 0, 5x^2 + 6y + 7 = 12, etc.: In this case, solve for the given variable, and the format should be a COMMA SEPARATED LIST OF DICTS, with dict 1 as {{"expr": "x", "result": 2, "assign": true}} and dict 2 as {{"expr": "y", "result": 5, "assign": true}}. This example assumes x was calculated as 2, and y as 5. Include as many dicts as there are variables.
3. Assigning values to variables like x = 4, y = 5, z = 6, etc.: In this case, assign values to variables and return another key in the dict called {{"assign": true}}, keeping the variable as 'expr' and the value as 'result' in the original dictionary. RETURN AS A LIST OF DICTS.
4. Analyzing Graphical Math problems, which are word problems represented in drawing form, such as cars colliding, trigonometric problems, problems on the Pythagorean theorem, adding runs from a cricket wagon wheel, etc. These will have a drawing representing some scenario and accompanying information with the image. PAY CLOSE ATTENTION TO DIFFERENT COLORS FOR THESE PROBLEMS. You need to return the answer in the format of a LIST OF DICTS [{{"expr": "given expression", "result": "calculated answer"}}]. IF MULTIPLE PROBLEMS ARE PRESENT, SOLVE ALL OF THEM.
5. Detecting Abstract Concepts that a drawing might show, such as love, hate, jealousy, patriotism, or a historic reference to war, invention, discovery, quote, etc. USE THE SAME FORMAT AS OTHERS TO RETURN THE ANSWER, where 'expr' will be the explanation of the drawing, and 'result' will be the abstract concept.
Analyze ALL equations or expressions in this image and return the answer according to the given rules. If you find multiple expressions or equations, solve ALL of them and return one result object for each:
Make sure to use extra backslashes for escape characters like \\f -> \\\\f, \\n -> \\\\n, etc.
Here is a dictionary of user-assigned variables. If the given expression has any of these variables, use its actual value from this dictionary accordingly: {variables}.
DO NOT USE BACKTICKS OR MARKDOWN FORMATTING.
PROPERLY QUOTE THE KEYS AND VALUES IN THE DICTIONARY FOR EASIER PARSING. The result MUST be a valid JSON parsable array of objects.
IMPORTANT: For equations like 7x + 5 = 0, return [{{"expr": "7x + 5 = 0", "result": "x = -0.7143", "assign": true}}].
Always convert fractions to decimal format in the result field. Use string values for all result fields.
"""


def extract_image_data(image: str) -> str:
    """Return the base64 body of an image string.

    Everything after the first comma is the body (``data:...;base64,BODY``).
    Strings without a comma, or with nothing after it, are returned whole
    and treated as raw base64.

    Args:
        image: Data URI or raw base64 string.

    Returns:
        The base64 body.
    """
    _, comma, body = image.partition(",")
    if comma and body:
        return body
    return image


def serialize_variables(variables: Mapping[str, Any]) -> str:
    """Serialise the variable map as compact JSON (``{"x":2}``)."""
    return json.dumps(dict(variables), separators=(",", ":"), ensure_ascii=False)


def build_prompt(variables: Mapping[str, Any]) -> str:
    """Render the instruction prompt for a set of user variables.

    Args:
        variables: Previously assigned variables, embedded verbatim as
            compact JSON.

    Returns:
        The complete prompt text.
    """
    return _PROMPT_TEMPLATE.format(variables=serialize_variables(variables))
