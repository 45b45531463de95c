"""Unit tests for guide_pipeline.py — prompt composition, credential check, queuing."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import asyncio
import json
from unittest.mock import patch

import pytest
import httpx

from study_guide.config import Settings
from study_guide.models.guide import GuideOutcome
from study_guide.services.errors import ConfigurationError, UnsupportedInputError
from study_guide.services.file_input import BinaryContent, UploadKind
from study_guide.services.guide_pipeline import GeminiGuidePipeline, build_prompt


def _guide_json(title: str = "Cell Biology") -> str:
    return json.dumps({
        "title": title,
        "summary": "Cells are the unit of life.",
        "sections": [{"header": "Organelles", "bullet_points": ["Nucleus holds DNA"]}],
        "infographic_style": "clean",
    })


def _gemini_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def _settings(**overrides) -> Settings:
    values = {"gemini_api_key": "test-key", "gemini_models": ("m1", "m2")}
    values.update(overrides)
    return Settings(**values)


# ─────────────────────────────────────────────────────────────────────────────
# Tests: build_prompt
# ─────────────────────────────────────────────────────────────────────────────

class TestBuildPrompt:
    def test_instructions_precede_content(self):
        prompt = build_prompt("Mitochondria are the powerhouse of the cell.")
        assert prompt.endswith("Mitochondria are the powerhouse of the cell.")
        assert prompt.index("study guide") < prompt.index("Mitochondria")

    def test_names_every_field(self):
        prompt = build_prompt("x")
        for field in ("title", "summary", "student_benefit_focus", "sections",
                      "header", "bullet_points", "visual_suggestions",
                      "reminder_tips", "infographic_style"):
            assert field in prompt

    def test_falls_back_to_default_template(self):
        with patch("study_guide.services.prompts.load_prompt", return_value=""):
            prompt = build_prompt("content here")
        assert "AI tutor" in prompt
        assert "content here" in prompt


# ─────────────────────────────────────────────────────────────────────────────
# Tests: GeminiGuidePipeline
# ─────────────────────────────────────────────────────────────────────────────

class TestGeminiGuidePipeline:
    @pytest.mark.asyncio
    async def test_missing_key_fails_before_network(self):
        calls = []

        def handler(request):
            calls.append(request)
            return _gemini_reply(_guide_json())

        pipeline = GeminiGuidePipeline(
            _settings(gemini_api_key=None), transport=httpx.MockTransport(handler)
        )
        with pytest.raises(ConfigurationError) as exc_info:
            await pipeline.generate("some notes")

        assert calls == []
        assert "GEMINI_API_KEY" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_generates_guide(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return _gemini_reply(_guide_json())

        pipeline = GeminiGuidePipeline(_settings(), transport=httpx.MockTransport(handler))
        guide = await pipeline.generate("Cells have organelles.")

        assert guide.title == "Cell Biology"
        assert guide.sections[0].bullet_points == ["Nucleus holds DNA"]
        prompt = captured["body"]["contents"][0]["parts"][0]["text"]
        assert "Cells have organelles." in prompt

    @pytest.mark.asyncio
    async def test_uses_configured_model_order(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            if "m1" in request.url.path:
                return httpx.Response(404, json={"error": {"message": "models/m1 is not found"}})
            return _gemini_reply(_guide_json())

        pipeline = GeminiGuidePipeline(_settings(), transport=httpx.MockTransport(handler))
        await pipeline.generate("x")

        assert seen == [
            "/v1beta/models/m1:generateContent",
            "/v1beta/models/m2:generateContent",
        ]

    @pytest.mark.asyncio
    async def test_create_returns_outcome_without_image(self):
        pipeline = GeminiGuidePipeline(
            _settings(), transport=httpx.MockTransport(lambda r: _gemini_reply(_guide_json()))
        )
        outcome = await pipeline.create("x")

        assert isinstance(outcome, GuideOutcome)
        assert outcome.infographic_url is None
        assert outcome.study_guide.title == "Cell Biology"

    @pytest.mark.asyncio
    async def test_create_reads_text_upload(self):
        captured = {}

        def handler(request):
            captured["body"] = request.content.decode()
            return _gemini_reply(_guide_json())

        pipeline = GeminiGuidePipeline(_settings(), transport=httpx.MockTransport(handler))
        upload = BinaryContent(
            data="Osmosis moves water.".encode(), content_type="text/plain",
            file_name="notes.txt", kind=UploadKind.TEXT,
        )
        await pipeline.create(upload)

        assert "Osmosis moves water." in captured["body"]

    @pytest.mark.asyncio
    async def test_create_rejects_image_upload(self):
        pipeline = GeminiGuidePipeline(_settings())
        upload = BinaryContent(
            data=b"\x89PNG", content_type="image/png", file_name="a.png", kind=UploadKind.IMAGE,
        )
        with pytest.raises(UnsupportedInputError):
            await pipeline.create(upload)

    @pytest.mark.asyncio
    async def test_overlapping_calls_are_queued(self):
        state = {"active": 0, "max_active": 0}

        async def handler(request):
            state["active"] += 1
            state["max_active"] = max(state["max_active"], state["active"])
            await asyncio.sleep(0.01)
            state["active"] -= 1
            return _gemini_reply(_guide_json())

        pipeline = GeminiGuidePipeline(_settings(), transport=httpx.MockTransport(handler))
        guides = await asyncio.gather(pipeline.generate("a"), pipeline.generate("b"))

        assert len(guides) == 2
        assert state["max_active"] == 1

    @pytest.mark.asyncio
    async def test_degenerate_guide_is_returned(self):
        reply = json.dumps({"title": "Empty", "sections": []})
        pipeline = GeminiGuidePipeline(
            _settings(), transport=httpx.MockTransport(lambda r: _gemini_reply(reply))
        )
        guide = await pipeline.generate("x")

        assert guide.is_degenerate
        assert guide.summary == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
