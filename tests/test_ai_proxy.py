"""Tests for AI JSON repair and the never-raising completion wrapper.

Run with:  python -m pytest tests/test_ai_proxy.py -v
"""

import asyncio

import pytest

from fertility_planner.core.ai_proxy import clean_ai_json, complete_json, parse_ai_json
from fertility_planner.core.errors import UpstreamUnavailableError

FALLBACK = {"items": [{"title": "Sample"}]}


# ── JSON cleanup ─────────────────────────────────────────────────────────
@pytest.mark.parametrize("raw,expected", [
    ('{"a": 1}', {"a": 1}),
    ('```json\n{"a": 1}\n```', {"a": 1}),
    ('```\n{"a": 1}\n```', {"a": 1}),
    ('{"a": 1,}', {"a": 1}),
    ('{"a": [1, 2,],}', {"a": [1, 2]}),
    ('Here is the result: {"a": {"b": 2}} hope it helps', {"a": {"b": 2}}),
    ('{\n  "a": "x",\n  "b": "y"\n}', {"a": "x", "b": "y"}),
])
def test_parse_recovers_common_model_output(raw, expected):
    assert parse_ai_json(raw) == expected


def test_clean_strips_fences_and_trailing_comma():
    assert clean_ai_json('```json\n{"a": 1,}\n```') == '{"a": 1}'


@pytest.mark.parametrize("raw", [
    "not json at all",
    "{broken",
    '{"a": }',
])
def test_parse_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_ai_json(raw)


# ── complete_json ────────────────────────────────────────────────────────
def test_demo_mode_returns_copy_of_fallback():
    result = asyncio.run(complete_json("prompt", FALLBACK))
    assert result.fallback_used is True
    assert result.payload == FALLBACK
    assert result.payload is not FALLBACK
    result.payload["items"].append({"title": "mutated"})
    assert len(FALLBACK["items"]) == 1
    assert result.error == "AI service not configured"


def test_valid_reply_is_parsed(fake_gemini):
    fake_gemini.reply = '```json\n{"items": [{"title": "Real"},]}\n```'
    result = asyncio.run(complete_json("prompt", FALLBACK))
    assert result.fallback_used is False
    assert result.payload == {"items": [{"title": "Real"}]}
    assert result.error is None
    assert fake_gemini.calls[0]["prompt"] == "prompt"


def test_attachment_is_forwarded(fake_gemini):
    fake_gemini.reply = '{"ok": true}'
    asyncio.run(complete_json("look", FALLBACK, attachment=(b"img", "image/png")))
    assert fake_gemini.calls[0]["attachment"] == (b"img", "image/png")


@pytest.mark.parametrize("reply,error_fragment", [
    ("", "Empty AI response"),
    ("   ", "Empty AI response"),
    ("definitely not json", "Failed to parse AI response"),
    (UpstreamUnavailableError("Gemini request failed"), "Gemini request failed"),
    (RuntimeError("boom"), "boom"),
])
def test_failures_fall_back_without_raising(fake_gemini, reply, error_fragment):
    fake_gemini.reply = reply
    result = asyncio.run(complete_json("prompt", FALLBACK))
    assert result.fallback_used is True
    assert result.payload == FALLBACK
    assert error_fragment in result.error
