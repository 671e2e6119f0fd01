"""Configuration constants, media types, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. The upload ceiling, Gemini endpoint, default model,
and export defaults are plain data — not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values that environment variables may override. The
load_api_key() function provides a clear error when the key is missing.

RULES:
- API key is loaded from .env via python-dotenv, never hardcoded
- GEMINI_API_KEY wins over the legacy API_KEY variable
- MEDIA_TYPES maps lowercase extensions (with dot) to MIME types
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Upload ceiling
# ---------------------------------------------------------------------------

MAX_UPLOAD_MB = int(os.getenv("CAPTION_STUDIO_MAX_UPLOAD_MB", "500"))
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024
"""Media files above this size are rejected before calling Gemini."""

# ---------------------------------------------------------------------------
# Supported media
# ---------------------------------------------------------------------------

MEDIA_TYPES: dict[str, str] = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
    ".avi": "video/x-msvideo",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
}

# ---------------------------------------------------------------------------
# Generation Service (Gemini REST API)
# ---------------------------------------------------------------------------

GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
DEFAULT_TARGET_LANGUAGE = os.getenv("DEFAULT_TARGET_LANGUAGE", "original")
""""original" keeps the source language; anything else requests a translation."""

# ---------------------------------------------------------------------------
# Export defaults
# ---------------------------------------------------------------------------

DEFAULT_MAX_CHARS_PER_LINE = 42
DEFAULT_MAX_LINES_PER_CARD = 2


def load_api_key() -> str:
    """Load the Gemini API key from the environment.

    WHY: The API key is required for every generation call. Loading it
    from the environment (via .env) keeps it out of source code.

    RULES:
    - Reads GEMINI_API_KEY, then API_KEY
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()
    if not key:
        raise ValueError(
            "Gemini API key not configured. "
            "Add GEMINI_API_KEY to the .env file in the app folder."
        )
    return key
