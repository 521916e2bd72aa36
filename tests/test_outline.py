"""Tests for outline intake: slide-count clamping, reply parsing, fallback."""

import json
from unittest.mock import MagicMock

import pytest

from slidesmind.errors import GenerationFailure
from slidesmind.processor.outline import (
    DEFAULT_SLIDES,
    OutlineService,
    build_prompt,
    clamp_slide_count,
    fallback_outline,
    parse_outline,
)
from slidesmind.schema.draft import SlideType


def _reply(**overrides):
    data = {
        "title": "Solar Power",
        "subtitle": "Energy for everyone",
        "plan": ["Basics", "Economics"],
        "slides": [
            {"type": "title", "title": "Solar Power", "subtitle": "Energy"},
            {"type": "content", "title": "Basics", "content": ["Panels", "Inverters"]},
            {"type": "stats", "title": "Numbers",
             "stats": [{"label": "Capacity", "value": "1 TW"}]},
            {"type": "chart", "title": "Growth",
             "chartData": [{"label": "2020", "value": 10}, {"label": "2021"}]},
            {"type": "closing", "title": "Thanks"},
        ],
    }
    data.update(overrides)
    return json.dumps(data)


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------

class TestClampSlideCount:
    @pytest.mark.parametrize("requested,expected", [
        (None, DEFAULT_SLIDES),
        (1, 5),
        (5, 5),
        (12, 12),
        (25, 25),
        (40, 25),
    ])
    def test_clamp(self, requested, expected):
        assert clamp_slide_count(requested) == expected


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParseOutline:
    def test_plain_json(self):
        outline = parse_outline(_reply(), "Solar", 10)
        assert outline.title == "Solar Power"
        assert outline.plan == ["Basics", "Economics"]
        assert [s.type for s in outline.slides] == [
            SlideType.TITLE, SlideType.CONTENT, SlideType.STATS,
            SlideType.CHART, SlideType.CLOSING,
        ]
        assert not outline.fallback

    def test_code_fence_and_chatter_stripped(self):
        text = "Here you go:\n```json\n" + _reply() + "\n```\nEnjoy!"
        assert len(parse_outline(text, "Solar", 10).slides) == 5

    def test_truncated_to_slide_count(self):
        assert len(parse_outline(_reply(), "Solar", 3).slides) == 3

    def test_nested_fields(self):
        slides = parse_outline(_reply(), "Solar", 10).slides
        assert slides[2].stats[0].value == "1 TW"
        assert slides[3].chart_data[0].value == 10.0
        assert not slides[3].chart_data[1].is_valid

    def test_title_defaults_to_topic(self):
        outline = parse_outline(_reply(title=""), "Solar", 10)
        assert outline.title == "Solar"

    def test_string_content_wrapped(self):
        text = _reply(slides=[{"type": "quote", "title": "Q", "content": "Be brief"}])
        assert parse_outline(text, "Solar", 10).slides[0].content == ["Be brief"]

    @pytest.mark.parametrize("text", [
        "",
        "no json here",
        "{not json}",
        json.dumps({"title": "x"}),
        json.dumps({"slides": []}),
        json.dumps({"slides": ["not an object"]}),
        json.dumps({"slides": [{"type": "agenda", "title": "x"}]}),
    ])
    def test_unusable_reply(self, text):
        with pytest.raises(GenerationFailure):
            parse_outline(text, "Solar", 10)


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

class TestFallbackOutline:
    def test_three_slides(self):
        outline = fallback_outline("Solar")
        assert outline.fallback
        assert [s.type for s in outline.slides] == [
            SlideType.TITLE, SlideType.CONTENT, SlideType.CLOSING,
        ]

    def test_titles(self):
        slides = fallback_outline("Solar").slides
        assert slides[0].title == "Solar"
        assert slides[1].title == "Introduction"
        assert len(slides[1].content) == 3
        assert slides[2].title == "Thank You"
        assert slides[2].content == ["Questions?"]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class TestOutlineService:
    def test_uses_client_reply(self):
        client = MagicMock()
        client.complete.return_value = _reply()
        outline = OutlineService(client).generate("Solar", "en", 12)
        assert len(outline.slides) == 5
        prompt = client.complete.call_args[0][0]
        assert "Solar" in prompt and "12" in prompt

    def test_slide_count_clamped_in_prompt(self):
        client = MagicMock()
        client.complete.return_value = _reply()
        OutlineService(client).generate("Solar", slide_count=100)
        assert "Target slide count: 25" in client.complete.call_args[0][0]

    def test_bad_reply_falls_back(self):
        client = MagicMock()
        client.complete.return_value = "I cannot help with that."
        outline = OutlineService(client).generate("Solar")
        assert outline.fallback
        assert outline.slides[0].title == "Solar"

    def test_client_error_falls_back(self):
        client = MagicMock()
        client.complete.side_effect = TimeoutError("upstream timeout")
        assert OutlineService(client).generate("Solar").fallback

    def test_prompt_lists_slide_types(self):
        prompt = build_prompt("Solar", "fr", 8)
        assert "twoColumn" in prompt
        assert "in fr" in prompt
