# FILE: tests/test_llm_parsing.py
"""
Tests for fixit/llm/parsing.py
JSON extraction from model output.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from fixit.llm.parsing import extract_json_object, parse_json_object


class TestExtractJsonObject:

    def test_plain_object(self):
        assert extract_json_object('{"a": 1}') == '{"a": 1}'

    def test_code_fence(self):
        text = '```json\n{"type": "plugin_management"}\n```'
        assert extract_json_object(text) == '{"type": "plugin_management"}'

    def test_surrounding_prose(self):
        text = 'Sure! Here it is: {"a": {"b": 2}} Hope that helps {"c": 3}'
        assert extract_json_object(text) == '{"a": {"b": 2}}'

    def test_braces_inside_strings_ignored(self):
        text = '{"target": "weird}name{", "n": 1} trailing'
        assert extract_json_object(text) == '{"target": "weird}name{", "n": 1}'

    def test_escaped_quote_inside_string(self):
        text = r'{"t": "say \"}\" now"}'
        assert extract_json_object(text) == text

    def test_unbalanced_returns_none(self):
        assert extract_json_object('{"a": {"b": 1}') is None

    def test_no_object(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object("") is None


class TestParseJsonObject:

    def test_trailing_comma_repaired(self):
        assert parse_json_object('{"a": 1, "b": [1, 2,],}') == {"a": 1, "b": [1, 2]}

    def test_invalid_json_returns_none(self):
        assert parse_json_object("{not: json}") is None

    def test_nested_result(self):
        data = parse_json_object('text {"type": "x", "parameters": {"k": "v"}} text')
        assert data == {"type": "x", "parameters": {"k": "v"}}
