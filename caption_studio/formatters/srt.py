"""SRT formatter — line mode with optional rewrap, and word mode.

WHY: SRT is the most widely accepted subtitle format. Editors want either
full caption lines (optionally re-flowed to a line/character budget for
players that do not wrap) or one entry per word for kinetic-text tools.

HOW: Line mode optionally runs the rewrap engine, then writes one entry
per caption. Word mode flattens every caption's word list and writes one
entry per word; when no caption has words it falls back to line mode.

RULES:
- Entry format: ``<n>\\n<start> --> <end>\\n<text>\\n``, entries joined by
  ``\\n`` (so one blank line between entries), numbering from 1
- Timestamps use the SRT codec (``HH:MM:SS,mmm``)
- Rewrap only when both limits are > 0
- Word-mode fallback uses the same options, so rewrap still applies
- Empty input produces an empty string
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from caption_studio.core.ir import Caption, flatten_words
from caption_studio.core.rewrap import rewrap_captions
from caption_studio.core.timecode import TimestampFormat, format_timestamp
from caption_studio.formatters.base import (
    BaseFormatter,
    ExportMode,
    ExportOptions,
    FormatterOutput,
)

SRT_MEDIA_TYPE = "application/x-subrip"


def _render_entries(entries: Iterable[Tuple[float, float, str]]) -> str:
    blocks = []
    for index, (start, end, text) in enumerate(entries, start=1):
        blocks.append(
            "{}\n{} --> {}\n{}\n".format(
                index,
                format_timestamp(start, TimestampFormat.SRT),
                format_timestamp(end, TimestampFormat.SRT),
                text,
            )
        )
    return "\n".join(blocks)


def export_srt(
    captions: Sequence[Caption],
    options: Optional[ExportOptions] = None,
) -> str:
    """Serialize captions to an SRT document.

    Args:
        captions: Captions in display order.
        options: Export mode and rewrap limits (defaults: lines, 42x2).

    Returns:
        The SRT file content.
    """
    options = options or ExportOptions()

    if options.mode == ExportMode.WORDS:
        words = flatten_words(captions)
        if not words:
            return export_srt(captions, replace(options, mode=ExportMode.LINES))
        return _render_entries((w.start, w.end, w.word) for w in words)

    to_export: Sequence[Caption] = captions
    if options.rewrap_enabled:
        to_export = rewrap_captions(
            captions, options.max_chars_per_line, options.max_lines_per_card
        )
    return _render_entries((c.start, c.end, c.text) for c in to_export)


class SRTFormatter(BaseFormatter):
    """Formatter that produces a single SubRip file."""

    @property
    def name(self) -> str:
        return "SubRip (SRT)"

    def format(
        self,
        captions: Sequence[Caption],
        options: Optional[ExportOptions] = None,
    ) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".srt",
                content=export_srt(captions, options),
                media_type=SRT_MEDIA_TYPE,
            )
        ]
