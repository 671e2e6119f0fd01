"""Tests for the Gemini client, response parsing, and prompts.

WHY: The Generation Service is the only untrusted input. Every failure
mode (bad key, quota, outage, dropped connection, mangled JSON) must
surface as the right typed error, and a good response must become IR
without loss.

HOW: GeminiClient runs against httpx.MockTransport, so no request leaves
the process. Handlers record the request for inspection and return
canned Gemini payloads. Coroutines are driven with asyncio.run().

RULES:
- The real Gemini API is never called
- Each test builds its own transport; no shared state
"""

from __future__ import annotations

import asyncio
import base64
import json

import httpx
import pytest

from caption_studio.api.client import GeminiClient
from caption_studio.api.media import MediaFile, guess_media_type
from caption_studio.api.models import (
    CAPTION_SCHEMA,
    captions_to_json,
    highlights_to_json,
    parse_captions,
    parse_highlights,
    to_response_schema,
    validate_captions,
)
from caption_studio.api.prompts import HIGHLIGHTS_PROMPT, captions_prompt
from caption_studio.core.ir import Caption, Highlight, Word
from caption_studio.core.style import StylePreset
from caption_studio.errors import ErrorCategory, MalformedResponseError, UpstreamServiceError

MEDIA = MediaFile(name="clip.mp4", mime_type="video/mp4", data=b"\x00\x01fake")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _run_client(handler, call):
    """Run ``call(client)`` against a GeminiClient backed by ``handler``."""

    async def _go():
        async with GeminiClient(
            api_key="test-key",
            base_url="https://gemini.test/v1beta",
            model="test-model",
            transport=httpx.MockTransport(handler),
        ) as client:
            return await call(client)

    return asyncio.run(_go())


# ---------------------------------------------------------------------------
# GeminiClient
# ---------------------------------------------------------------------------


class TestGenerateCaptions:
    """Successful caption generation."""

    def test_returns_caption_ir(self, sample_captions_json):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_gemini_payload(json.dumps(sample_captions_json)))

        captions = _run_client(
            handler, lambda c: c.generate_captions(MEDIA, "original", StylePreset.STANDARD)
        )

        assert len(captions) == 2
        assert captions[0] == Caption(
            text="Hello world",
            start=0.0,
            end=2.0,
            words=(Word("Hello", 0.0, 1.0), Word("world", 1.0, 2.0)),
        )

        request = requests[0]
        assert request.url.path == "/v1beta/models/test-model:generateContent"
        assert request.headers["x-goog-api-key"] == "test-key"

        body = json.loads(request.content)
        parts = body["contents"][0]["parts"]
        assert parts[0]["text"] == captions_prompt("original", StylePreset.STANDARD)
        assert parts[1]["inline_data"]["mime_type"] == "video/mp4"
        assert base64.b64decode(parts[1]["inline_data"]["data"]) == MEDIA.data
        config = body["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["responseSchema"]["type"] == "ARRAY"

    def test_joins_multiple_text_parts(self):
        text = json.dumps([{"text": "Hi", "start": 0, "end": 1}])
        payload = {"candidates": [{"content": {"parts": [{"text": text[:5]}, {"text": text[5:]}]}}]}
        captions = _run_client(
            lambda r: httpx.Response(200, json=payload),
            lambda c: c.generate_captions(MEDIA, None, StylePreset.KEYWORDS),
        )
        assert captions == [Caption(text="Hi", start=0.0, end=1.0)]

    def test_find_highlights(self, sample_highlights_json):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_gemini_payload(json.dumps(sample_highlights_json)))

        clips = _run_client(handler, lambda c: c.find_highlights(MEDIA))
        assert clips == [Highlight("The Big Reveal", "The host unveils the prototype.", 65.0, 95.5)]
        body = json.loads(requests[0].content)
        assert body["contents"][0]["parts"][0]["text"] == HIGHLIGHTS_PROMPT


class TestClientFailures:
    """Failure mapping to typed errors."""

    def test_invalid_key(self):
        def handler(request):
            return httpx.Response(
                400,
                json={"error": {"message": "API key not valid.", "status": "INVALID_ARGUMENT",
                                "details": [{"reason": "API_KEY_INVALID"}]}},
            )

        with pytest.raises(UpstreamServiceError) as exc_info:
            _run_client(handler, lambda c: c.find_highlights(MEDIA))
        assert exc_info.value.category == ErrorCategory.INVALID_CREDENTIAL
        assert "API_KEY_INVALID" in exc_info.value.detail

    def test_rate_limited_is_quota(self):
        with pytest.raises(UpstreamServiceError) as exc_info:
            _run_client(lambda r: httpx.Response(429, text="slow down"),
                        lambda c: c.find_highlights(MEDIA))
        assert exc_info.value.category == ErrorCategory.QUOTA_EXCEEDED

    def test_quota_in_body(self):
        with pytest.raises(UpstreamServiceError) as exc_info:
            _run_client(lambda r: httpx.Response(403, text="Quota exceeded for project"),
                        lambda c: c.find_highlights(MEDIA))
        assert exc_info.value.category == ErrorCategory.QUOTA_EXCEEDED

    def test_server_error_is_network(self):
        with pytest.raises(UpstreamServiceError) as exc_info:
            _run_client(lambda r: httpx.Response(503, text="unavailable"),
                        lambda c: c.find_highlights(MEDIA))
        assert exc_info.value.category == ErrorCategory.NETWORK

    def test_other_status_is_generic(self):
        with pytest.raises(UpstreamServiceError) as exc_info:
            _run_client(lambda r: httpx.Response(404, text="model not found"),
                        lambda c: c.find_highlights(MEDIA))
        assert exc_info.value.category == ErrorCategory.GENERIC

    def test_transport_error_is_network(self):
        def handler(request):
            raise httpx.ConnectError("connection reset", request=request)

        with pytest.raises(UpstreamServiceError) as exc_info:
            _run_client(handler, lambda c: c.find_highlights(MEDIA))
        assert exc_info.value.category == ErrorCategory.NETWORK
        assert exc_info.value.detail.startswith("FETCH_ERROR")

    @pytest.mark.parametrize("payload", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
        _gemini_payload("   "),
    ])
    def test_empty_response_is_malformed(self, payload):
        with pytest.raises(MalformedResponseError):
            _run_client(lambda r: httpx.Response(200, json=payload),
                        lambda c: c.find_highlights(MEDIA))

    def test_non_array_text_is_malformed(self):
        with pytest.raises(MalformedResponseError, match="not a valid JSON array"):
            _run_client(
                lambda r: httpx.Response(200, json=_gemini_payload('{"text": "hi"}')),
                lambda c: c.generate_captions(MEDIA, None, StylePreset.STANDARD),
            )

    def test_schema_violation_is_malformed(self):
        bad = json.dumps([{"text": "Hi", "start": "zero", "end": 1}])
        with pytest.raises(MalformedResponseError, match="0/start"):
            _run_client(
                lambda r: httpx.Response(200, json=_gemini_payload(bad)),
                lambda c: c.generate_captions(MEDIA, None, StylePreset.STANDARD),
            )

    def test_requires_context_manager(self):
        client = GeminiClient(api_key="k")
        with pytest.raises(RuntimeError):
            asyncio.run(client.generate_json("p", MEDIA, CAPTION_SCHEMA))

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        with pytest.raises(ValueError, match="API key not configured"):
            GeminiClient()


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TestModels:
    """Schema validation and JSON round trip."""

    @pytest.mark.parametrize("text,location", [
        ('[{"text": "hi", "start": NaN, "end": 1.0}]', "0/start"),
        ('[{"text": "hi", "start": 0, "end": Infinity}]', "0/end"),
        ('[{"text": "hi", "start": -Infinity, "end": 1}]', "0/start"),
        ('[{"text": "hi", "start": 0, "end": 1,'
         ' "words": [{"word": "hi", "start": 0, "end": NaN}]}]', "0/words/0/end"),
    ])
    def test_non_finite_times_rejected(self, text, location):
        with pytest.raises(MalformedResponseError, match="finite") as exc_info:
            parse_captions(text)
        assert location in str(exc_info.value)

    def test_non_finite_highlight_rejected(self):
        text = '[{"title": "t", "description": "d", "start": 0, "end": Infinity}]'
        with pytest.raises(MalformedResponseError, match="finite"):
            parse_highlights(text)

    def test_non_finite_decoded_data_rejected(self):
        with pytest.raises(MalformedResponseError):
            validate_captions([{"text": "hi", "start": float("nan"), "end": 1.0}])

    def test_parse_captions_tolerates_whitespace_and_extras(self):
        text = '\n [{"text": "a", "start": 0, "end": 1, "speaker": "x"}] \n'
        assert parse_captions(text) == [Caption(text="a", start=0.0, end=1.0)]

    def test_missing_required_field(self):
        with pytest.raises(MalformedResponseError):
            parse_highlights('[{"title": "t", "start": 0, "end": 1}]')

    def test_truncated_json(self):
        with pytest.raises(MalformedResponseError):
            parse_captions('[{"text": "a", "start": 0, "end": 1},]')

    def test_bad_word_rejects_whole_response(self):
        data = [
            {"text": "ok", "start": 0, "end": 1},
            {"text": "bad", "start": 1, "end": 2, "words": [{"word": "bad", "start": 1}]},
        ]
        with pytest.raises(MalformedResponseError):
            validate_captions(data)

    def test_captions_json_round_trip(self, captions_with_words):
        data = json.loads(captions_to_json(captions_with_words))
        assert validate_captions(data) == captions_with_words

    def test_captions_json_omits_empty_words(self, plain_captions):
        data = json.loads(captions_to_json(plain_captions))
        assert "words" not in data[0]

    def test_highlights_json(self, sample_highlights_json):
        clips = [Highlight.from_dict(item) for item in sample_highlights_json]
        assert json.loads(highlights_to_json(clips)) == sample_highlights_json

    def test_response_schema_uppercases_types_only(self):
        converted = to_response_schema(CAPTION_SCHEMA)
        assert converted["type"] == "ARRAY"
        item = converted["items"]
        assert item["properties"]["words"]["items"]["properties"]["start"]["type"] == "NUMBER"
        assert item["required"] == ["text", "start", "end"]
        assert CAPTION_SCHEMA["type"] == "array"


# ---------------------------------------------------------------------------
# Prompts and media
# ---------------------------------------------------------------------------


class TestPrompts:
    """Caption prompt composition."""

    def test_original_language(self):
        prompt = captions_prompt("original", StylePreset.STANDARD)
        assert prompt.startswith("Transcribe the spoken words")
        assert "translate" not in prompt
        assert "MUST include accurate word-level timestamps" in prompt

    def test_translation(self):
        prompt = captions_prompt("Spanish", StylePreset.STANDARD)
        assert "translate the transcription into fluent Spanish" in prompt

    def test_keywords_asks_for_markup_without_words(self):
        prompt = captions_prompt(None, StylePreset.KEYWORDS)
        assert "**very important**" in prompt
        assert "Do NOT include word-level timestamps" in prompt

    def test_look_only_preset_uses_standard_instructions(self):
        assert captions_prompt(None, StylePreset.POP_3D) == captions_prompt(
            None, StylePreset.STANDARD
        )


class TestMedia:
    """Media file handling."""

    @pytest.mark.parametrize("name,expected", [
        ("a.MP4", "video/mp4"),
        ("b.m4a", "audio/mp4"),
        ("c.unknownext", "application/octet-stream"),
    ])
    def test_guess_media_type(self, name, expected):
        assert guess_media_type(name) == expected

    def test_from_path(self, tmp_path):
        path = tmp_path / "voice.wav"
        path.write_bytes(b"RIFF1234")
        media = MediaFile.from_path(path)
        assert (media.name, media.mime_type, media.size) == ("voice.wav", "audio/wav", 8)
