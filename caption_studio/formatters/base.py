"""Abstract base formatter, output container, and export options.

WHY: Every subtitle format consumes the same caption collection but
produces different file content. This base class enforces a consistent
interface so the CLI and session layers can work with any formatter
generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. FormatterOutput bundles a file suffix with its
content and MIME type. ExportOptions is the per-call export configuration.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list — one item per produced file
- ``suffix`` starts with a dot, e.g. ``".srt"``
- Formatters are pure: no file I/O, the caller writes the content
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any, Mapping, Sequence

from caption_studio.config import DEFAULT_MAX_CHARS_PER_LINE, DEFAULT_MAX_LINES_PER_CARD
from caption_studio.core.ir import Caption
from caption_studio.errors import ValidationError


class ExportMode(str, Enum):
    LINES = "lines"
    WORDS = "words"


@dataclass(frozen=True)
class ExportOptions:
    """Export configuration supplied fresh for each export call.

    Attributes:
        mode: "lines" exports one entry per caption (or card); "words"
              exports one entry per word timestamp.
        max_chars_per_line: Rewrap budget per line; 0 disables rewrap.
        max_lines_per_card: Rewrap budget per card; 0 disables rewrap.
    """

    mode: ExportMode = ExportMode.LINES
    max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE
    max_lines_per_card: int = DEFAULT_MAX_LINES_PER_CARD

    @property
    def rewrap_enabled(self) -> bool:
        return self.max_chars_per_line > 0 and self.max_lines_per_card > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExportOptions:
        """Build options from loosely-typed input (CLI, JSON).

        RULES:
        - Missing keys take the defaults
        - mode must be "lines" or "words"
        - Limits must be non-negative integers (bool is rejected)

        Raises:
            ValidationError: If any field is structurally invalid.
        """
        raw_mode = data.get("mode", ExportMode.LINES.value)
        try:
            mode = ExportMode(raw_mode)
        except ValueError:
            raise ValidationError(
                "Unknown export mode '{}'. Available: {}".format(
                    raw_mode, ", ".join(m.value for m in ExportMode)
                )
            ) from None

        limits = {}
        for key, default in (
            ("max_chars_per_line", DEFAULT_MAX_CHARS_PER_LINE),
            ("max_lines_per_card", DEFAULT_MAX_LINES_PER_CARD),
        ):
            value = data.get(key, default)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(
                    "{} must be a non-negative integer, got {!r}".format(key, value)
                )
            limits[key] = value

        return cls(mode=mode, **limits)


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the media stem, e.g. ``".srt"``
                → ``"interview.srt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/x-subrip"``.
    """

    suffix: str
    content: str
    media_type: str


def output_filename(media_name: str, suffix: str) -> str:
    """Name an export after its media file, dropping the last extension.

    ``"talk.final.mp4"`` + ``".srt"`` → ``"talk.final.srt"``.
    """
    stem = PurePath(media_name).stem if media_name else "captions"
    return "{}{}".format(stem, suffix)


class BaseFormatter(ABC):
    """Abstract base for all subtitle formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SubRip (SRT)'."""

    @abstractmethod
    def format(
        self,
        captions: Sequence[Caption],
        options: ExportOptions | None = None,
    ) -> list[FormatterOutput]:
        """Convert the caption collection into one or more output files.

        Args:
            captions: Captions in display order.
            options: Export configuration; formatters that have no options
                     ignore it. None means ExportOptions() defaults.

        Returns:
            List of FormatterOutput objects.
        """
