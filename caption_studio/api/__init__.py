"""Generation Service package — async interface to the Gemini API.

WHY: Captions and highlight clips come from an external multimodal model.
This package encapsulates all communication with it behind one client
class and validates every response before it reaches the caption core.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Responses are checked
against JSON schemas (jsonschema) defined in models.py.

RULES:
- All HTTP calls go through GeminiClient (no direct httpx usage elsewhere)
- Authentication is via the x-goog-api-key header from config
- Responses are never partially accepted
"""

from caption_studio.api.client import GeminiClient
from caption_studio.api.media import MediaFile

__all__ = ["GeminiClient", "MediaFile"]
