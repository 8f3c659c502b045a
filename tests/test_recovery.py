import pytest
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tools.recovery import (
    Fallback,
    Parsed,
    extract_candidate,
    recover,
    recovered_value,
    strip_fences,
)

class TestRecovery:
    """Test recovery of JSON objects from free-text model replies."""

    def setup_method(self):
        """Set up test fixtures."""
        self.default = {"hero": {"headline": "Welcome"}}

    def test_plain_json_object(self):
        """Test a clean JSON reply is parsed as-is."""
        result = recover('{"a": 1, "b": [1, 2]}', self.default)

        assert isinstance(result, Parsed)
        assert result.value == {"a": 1, "b": [1, 2]}

    def test_fenced_json(self):
        """Test markdown code fences are stripped before parsing."""
        raw = '```json\n{"subject": "Spring sale", "cta": ["Shop now"]}\n```'

        result = recover(raw, self.default)

        assert isinstance(result, Parsed)
        assert result.value["subject"] == "Spring sale"

    def test_bare_fence_without_language(self):
        """Test fences without a language tag are stripped too."""
        result = recover('```\n{"ok": true}\n```', self.default)

        assert isinstance(result, Parsed)
        assert result.value == {"ok": True}

    def test_surrounding_prose(self):
        """Test text before the first brace and after the last brace is ignored."""
        raw = 'Sure! Here is your content:\n{"title": "Guide"}\nLet me know if you need changes.'

        result = recover(raw, self.default)

        assert isinstance(result, Parsed)
        assert result.value == {"title": "Guide"}

    def test_not_json_at_all(self):
        """Test prose without braces yields the fallback with the original text."""
        raw = "not json at all"

        result = recover(raw, self.default)

        assert isinstance(result, Fallback)
        assert result.default_value == self.default
        assert result.raw_text == raw

    def test_unparseable_braces(self):
        """Test a brace span that is not JSON yields the fallback."""
        result = recover("{this is: not valid}", self.default)

        assert isinstance(result, Fallback)
        assert result.raw_text == "{this is: not valid}"

    def test_empty_and_none_input(self):
        """Test empty or missing replies fall back without raising."""
        assert isinstance(recover("", self.default), Fallback)
        result = recover(None, self.default)
        assert isinstance(result, Fallback)
        assert result.raw_text == ""

    def test_raw_control_characters_in_strings(self):
        """Test raw control characters inside strings are removed on the retry."""
        raw = '{"text": "line one\nline two\ttabbed"}'

        result = recover(raw, self.default)

        assert isinstance(result, Parsed)
        assert result.value["text"] == "line oneline twotabbed"

    def test_top_level_array_is_not_an_object(self):
        """Test a bare JSON array is not accepted as an object."""
        result = recover('[1, 2, 3]', self.default)

        assert isinstance(result, Fallback)

    def test_multiple_blocks_are_captured_greedily(self):
        """Test two JSON-like blocks form one span from first '{' to last '}'."""
        raw = 'First: {"a": 1} and second: {"b": 2}'

        assert extract_candidate(raw) == '{"a": 1} and second: {"b": 2}'
        assert isinstance(recover(raw, self.default), Fallback)

    def test_nested_objects(self):
        """Test nested objects survive the outer-brace span."""
        raw = 'Result -> {"outer": {"inner": {"value": 3}}} <- done'

        result = recover(raw, self.default)

        assert isinstance(result, Parsed)
        assert result.value["outer"]["inner"]["value"] == 3

    def test_reversed_braces(self):
        """Test a closing brace before any opening brace yields no candidate."""
        assert extract_candidate("} nothing {") is None

    def test_strip_fences_keeps_content(self):
        """Test fence removal leaves the fenced text untouched."""
        assert strip_fences('```json {"x": 1}```') == '{"x": 1}'

    def test_recovered_value(self):
        """Test unwrapping of both result variants."""
        assert recovered_value(Parsed({"x": 1})) == {"x": 1}
        assert recovered_value(Fallback(self.default, "raw")) == self.default

    @pytest.mark.parametrize("raw", [
        "",
        "{",
        "}",
        "{{}}",
        '{"unterminated": "string}',
        "```json```",
        "\x00\x01\x02",
    ])
    def test_never_raises(self, raw):
        """Test recovery always returns a result for malformed input."""
        result = recover(raw, self.default)

        assert isinstance(result, (Parsed, Fallback))

if __name__ == "__main__":
    # Run tests
    pytest.main([__file__, "-v"])
