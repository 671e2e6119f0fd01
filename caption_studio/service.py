"""Generation entry points: size check, Gemini call, validated result.

WHY: Both the CLI and any future front end need the same sequence —
reject oversized media before uploading anything, call the Generation
Service, and hand back a fully validated caption or highlight list (or a
typed error, never partial data).

HOW: check_media_size() enforces MAX_UPLOAD_BYTES. load_media() checks
the size on disk before reading the bytes. generate_subtitles() and
generate_highlights() open a GeminiClient (unless one is passed in),
delegate, and log the outcome. Unexpected transport-level exceptions are
converted to UpstreamServiceError here, at the boundary.

RULES:
- Size is validated before any API call and before reading the file
- CaptionStudioError subclasses propagate unchanged
- Anything else raised by the client is logged and wrapped as
  UpstreamServiceError (category derived from its message)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

from caption_studio.api.client import GeminiClient
from caption_studio.api.media import MediaFile
from caption_studio.config import DEFAULT_TARGET_LANGUAGE, MAX_UPLOAD_BYTES
from caption_studio.core.ir import Caption, Highlight
from caption_studio.core.style import StylePreset
from caption_studio.errors import CaptionStudioError, UpstreamServiceError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_media_size(size_bytes: int, limit_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Reject media larger than the upload ceiling.

    Raises:
        ValidationError: With the measured size and the ceiling, in MB.
    """
    if size_bytes > limit_bytes:
        raise ValidationError(
            "File is too large ({:.2f}MB). Please use a file under {:g}MB.".format(
                size_bytes / 1024 / 1024, limit_bytes / 1024 / 1024
            )
        )


def load_media(path: str | Path, limit_bytes: int = MAX_UPLOAD_BYTES) -> MediaFile:
    """Read a media file after checking its size on disk."""
    path = Path(path)
    check_media_size(path.stat().st_size, limit_bytes)
    return MediaFile.from_path(path)


async def _call_service(
    client: Optional[GeminiClient],
    call: Callable[[GeminiClient], Awaitable[T]],
    media_name: str,
) -> T:
    # GeminiClient() raises ValueError for a missing API key; left unwrapped.
    owned = GeminiClient() if client is None else None
    try:
        if owned is not None:
            async with owned:
                return await call(owned)
        return await call(client)
    except CaptionStudioError:
        raise
    except Exception as exc:
        logger.exception("Generation Service call failed for %s", media_name)
        raise UpstreamServiceError(str(exc)) from exc


async def generate_subtitles(
    media: MediaFile,
    target_language: str = DEFAULT_TARGET_LANGUAGE,
    preset: StylePreset = StylePreset.STANDARD,
    client: Optional[GeminiClient] = None,
) -> List[Caption]:
    """Generate captions for a media file.

    Args:
        media: The media to transcribe.
        target_language: "original" or a language to translate into.
        preset: Shapes the prompt (word timestamps, keywords, emojis).
        client: An entered GeminiClient; a new one is opened when None.

    Returns:
        The validated caption collection.
    """
    logger.info(
        "Requesting subtitle generation for %s (target language: %s, preset: %s)",
        media.name, target_language, StylePreset(preset).value,
    )
    check_media_size(media.size)

    captions = await _call_service(
        client,
        lambda c: c.generate_captions(media, target_language, preset),
        media.name,
    )
    logger.info("Generated %d subtitle lines for %s", len(captions), media.name)
    return captions


async def generate_highlights(
    media: MediaFile,
    client: Optional[GeminiClient] = None,
) -> List[Highlight]:
    """Find highlight clips in a media file."""
    logger.info("Requesting highlight generation for %s", media.name)
    check_media_size(media.size)

    clips = await _call_service(client, lambda c: c.find_highlights(media), media.name)
    logger.info("Generated %d highlight clips for %s", len(clips), media.name)
    return clips
