"""Async HTTP client for the Gemini ``generateContent`` REST endpoint.

WHY: Captions and highlight clips are produced by a multimodal model.
This module encapsulates the HTTP details — auth header, inline media
encoding, JSON response mode, candidate unpacking, and failure mapping —
behind one client class so callers (service layer, CLI, tests) don't
need to know them.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GeminiClient is an
async context manager — enter it to get an authenticated client, exit to
close the connection pool. generate_json() sends one prompt plus one
media part with a response schema and returns the model's text;
generate_captions() and find_highlights() add prompts and validation.

RULES:
- Always use the async context manager (async with GeminiClient(...) as client:)
- Transport failures and non-2xx responses raise UpstreamServiceError
- 5xx and transport errors are NETWORK, 429 is QUOTA_EXCEEDED, other
  statuses are classified from the response body
- A response without candidate text raises MalformedResponseError
- Response text is validated against the JSON schema before returning IR
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from caption_studio.api.media import MediaFile
from caption_studio.api.models import (
    CAPTION_SCHEMA,
    HIGHLIGHT_SCHEMA,
    parse_captions,
    parse_highlights,
    to_response_schema,
)
from caption_studio.api.prompts import HIGHLIGHTS_PROMPT, captions_prompt
from caption_studio.config import GEMINI_BASE_URL, GEMINI_MODEL, load_api_key
from caption_studio.core.ir import Caption, Highlight
from caption_studio.core.style import StylePreset
from caption_studio.errors import (
    ErrorCategory,
    MalformedResponseError,
    UpstreamServiceError,
)

logger = logging.getLogger(__name__)

_TIMEOUT = httpx.Timeout(600.0, connect=30.0)


class GeminiClient:
    """Async client for Gemini multimodal JSON generation.

    RULES:
    - Use as: async with GeminiClient() as client: ...
    - api_key defaults to load_api_key() from .env
    - base_url / model default to GEMINI_BASE_URL / GEMINI_MODEL
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self._model = model or GEMINI_MODEL
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GeminiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"x-goog-api-key": self._api_key},
            timeout=_TIMEOUT,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GeminiClient must be used as an async context manager: "
                "async with GeminiClient() as client: ..."
            )
        return self._client

    async def generate_json(
        self,
        prompt: str,
        media: MediaFile,
        schema: Dict[str, Any],
    ) -> str:
        """Send a prompt with inline media and return the model's JSON text.

        Args:
            prompt: Instruction text.
            media: The media bytes to analyze.
            schema: JSON Schema of the expected response.

        Returns:
            The concatenated text of the first candidate's parts.
        """
        client = self._ensure_client()
        body = {
            "contents": [{"parts": [{"text": prompt}, media.to_inline_part()]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": to_response_schema(schema),
            },
        }

        try:
            resp = await client.post(
                "/models/{}:generateContent".format(self._model), json=body
            )
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(
                "FETCH_ERROR: {}".format(exc), ErrorCategory.NETWORK
            ) from exc

        if resp.status_code != 200:
            raise _status_error(resp)

        try:
            payload = resp.json()
            parts = payload["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise MalformedResponseError(
                "The AI service returned a response without any content."
            ) from exc
        if not text.strip():
            raise MalformedResponseError(
                "The AI service returned a response without any content."
            )
        return text

    async def generate_captions(
        self,
        media: MediaFile,
        target_language: str | None,
        preset: StylePreset,
    ) -> List[Caption]:
        prompt = captions_prompt(target_language, preset)
        text = await self.generate_json(prompt, media, CAPTION_SCHEMA)
        try:
            return parse_captions(text)
        except MalformedResponseError:
            logger.error("Invalid caption response from Gemini: %.500s", text)
            raise

    async def find_highlights(self, media: MediaFile) -> List[Highlight]:
        text = await self.generate_json(HIGHLIGHTS_PROMPT, media, HIGHLIGHT_SCHEMA)
        try:
            return parse_highlights(text)
        except MalformedResponseError:
            logger.error("Invalid highlight response from Gemini: %.500s", text)
            raise


def _status_error(resp: httpx.Response) -> UpstreamServiceError:
    detail = "HTTP {}: {}".format(resp.status_code, resp.text)
    if resp.status_code >= 500:
        return UpstreamServiceError(detail, ErrorCategory.NETWORK)
    if resp.status_code == 429:
        return UpstreamServiceError(detail, ErrorCategory.QUOTA_EXCEEDED)
    return UpstreamServiceError(detail)
