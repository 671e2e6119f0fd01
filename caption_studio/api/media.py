"""Media file handle passed to the Generation Service."""

from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from caption_studio.config import MEDIA_TYPES


def guess_media_type(filename: str) -> str:
    """MIME type from the file extension, falling back to mimetypes."""
    suffix = Path(filename).suffix.lower()
    if suffix in MEDIA_TYPES:
        return MEDIA_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


@dataclass(frozen=True)
class MediaFile:
    """Raw media bytes plus the name and MIME type sent alongside them."""

    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path) -> MediaFile:
        path = Path(path)
        return cls(name=path.name, mime_type=guess_media_type(path.name), data=path.read_bytes())

    def to_inline_part(self) -> dict:
        """Gemini ``inline_data`` content part with base64-encoded bytes."""
        return {
            "inline_data": {
                "mime_type": self.mime_type,
                "data": base64.b64encode(self.data).decode("ascii"),
            }
        }
