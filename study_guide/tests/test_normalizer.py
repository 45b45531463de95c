"""Unit tests for normalizer.py — code-fence stripping and JSON parsing."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pytest

from study_guide.services.errors import ResponseFormatError
from study_guide.services.normalizer import parse_json_payload, strip_code_fence


# ─────────────────────────────────────────────────────────────────────────────
# Tests: strip_code_fence
# ─────────────────────────────────────────────────────────────────────────────

class TestStripCodeFence:
    def test_strips_json_labelled_fence(self):
        raw = '```json\n{"title":"T","sections":[]}\n```'
        assert strip_code_fence(raw) == '{"title":"T","sections":[]}'

    def test_strips_generic_fence(self):
        raw = '```\n{"title":"T"}\n```'
        assert strip_code_fence(raw) == '{"title":"T"}'

    def test_label_is_case_insensitive(self):
        raw = '```JSON\n{"a": 1}\n```'
        assert strip_code_fence(raw) == '{"a": 1}'

    def test_unfenced_text_only_trimmed(self):
        raw = '   \n{"title": "T", "sections": []}\n  '
        assert strip_code_fence(raw) == '{"title": "T", "sections": []}'

    def test_surrounding_whitespace_around_fence(self):
        raw = '\n\n  ```json\n{"a": 1}\n```  \n'
        assert strip_code_fence(raw) == '{"a": 1}'

    def test_inner_backticks_preserved(self):
        raw = '```json\n{"tip": "use `x` here"}\n```'
        assert strip_code_fence(raw) == '{"tip": "use `x` here"}'

    def test_fence_not_at_start_left_alone(self):
        raw = 'Here you go: ```json {"a": 1} ```'
        assert strip_code_fence(raw) == raw


# ─────────────────────────────────────────────────────────────────────────────
# Tests: parse_json_payload
# ─────────────────────────────────────────────────────────────────────────────

class TestParseJsonPayload:
    def test_parses_fenced_guide(self):
        raw = '```json\n{"title":"T","sections":[]}\n```'
        assert parse_json_payload(raw) == {"title": "T", "sections": []}

    def test_parses_unfenced(self):
        assert parse_json_payload('{"title": "Cells", "sections": [{"header": "A"}]}') == {
            "title": "Cells",
            "sections": [{"header": "A"}],
        }

    def test_invalid_json_raises_format_error(self):
        with pytest.raises(ResponseFormatError) as exc_info:
            parse_json_payload("Sorry, I can't help with that.")
        assert "Failed to parse JSON response" in str(exc_info.value)

    def test_truncated_json_raises_format_error(self):
        with pytest.raises(ResponseFormatError):
            parse_json_payload('```json\n{"title": "T", "sections": [\n```')

    def test_source_named_in_message(self):
        with pytest.raises(ResponseFormatError) as exc_info:
            parse_json_payload("nope", source="fal.ai LLM")
        assert "fal.ai LLM" in exc_info.value.message


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
