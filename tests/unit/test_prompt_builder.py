"""Tests for sketchcalc.api.prompt_builder - prompt rendering and image extraction."""

from __future__ import annotations

from sketchcalc.api.prompt_builder import build_prompt, extract_image_data, serialize_variables


class TestExtractImageData:
    """Test data-URI body extraction."""

    def test_data_uri(self):
        assert extract_image_data("data:image/png;base64,AAAA") == "AAAA"

    def test_raw_base64(self):
        assert extract_image_data("iVBORw0KGgo=") == "iVBORw0KGgo="

    def test_single_split_point(self):
        """Only the first comma splits; the rest stays in the body."""
        assert extract_image_data("a,b,c") == "b,c"

    def test_trailing_comma_uses_whole_string(self):
        assert extract_image_data("data:image/png;base64,") == "data:image/png;base64,"


class TestSerializeVariables:
    """Test compact JSON serialisation."""

    def test_empty(self):
        assert serialize_variables({}) == "{}"

    def test_compact(self):
        assert serialize_variables({"x": 2, "y": "5"}) == '{"x":2,"y":"5"}'

    def test_non_ascii_preserved(self):
        assert serialize_variables({"θ": 0.5}) == '{"θ":0.5}'


class TestBuildPrompt:
    """Test prompt template rendering."""

    def test_variables_embedded(self):
        prompt = build_prompt({"x": 2})
        assert 'use its actual value from this dictionary accordingly: {"x":2}.' in prompt

    def test_deterministic(self):
        assert build_prompt({"a": 1}) == build_prompt({"a": 1})

    def test_only_variables_differ(self):
        a = build_prompt({})
        b = build_prompt({"x": 2})
        assert a.replace("{}.", '{"x":2}.') == b

    def test_five_categories(self):
        prompt = build_prompt({})
        assert "FIVE TYPES OF EQUATIONS/EXPRESSIONS" in prompt
        for number in ("1. Simple", "2. Set of Equations", "3. Assigning", "4. Analyzing", "5. Detecting"):
            assert number in prompt

    def test_output_contract(self):
        prompt = build_prompt({})
        assert '[{"expr": "given expression", "result": "calculated answer"}]' in prompt
        assert '{"assign": true}' in prompt
        assert "valid JSON parsable array of objects" in prompt
        assert "DO NOT USE BACKTICKS OR MARKDOWN FORMATTING." in prompt

    def test_decimal_rule(self):
        assert "Always convert fractions to decimal format in the result field." in build_prompt({})

    def test_escape_instruction(self):
        assert r"\f -> \\f" in build_prompt({})
