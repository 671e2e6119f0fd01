"""WebVTT formatter — full caption text, no rewrap.

WHY: Browsers' <track> element only accepts WebVTT. Web players wrap
text themselves, so captions are exported as-is.

RULES:
- Header ``WEBVTT\\n\\n``, then ``<start> --> <end>\\n<text>\\n`` per
  caption, entries joined by ``\\n``; no sequence numbers
- Timestamps use the VTT codec (``HH:MM:SS.mmm``)
- Export options are accepted for interface parity and ignored
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from caption_studio.core.ir import Caption
from caption_studio.core.timecode import TimestampFormat, format_timestamp
from caption_studio.formatters.base import BaseFormatter, ExportOptions, FormatterOutput

VTT_HEADER = "WEBVTT\n\n"
VTT_MEDIA_TYPE = "text/vtt"


def export_vtt(captions: Sequence[Caption]) -> str:
    """Serialize captions to a WebVTT document."""
    body = "\n".join(
        "{} --> {}\n{}\n".format(
            format_timestamp(c.start, TimestampFormat.VTT),
            format_timestamp(c.end, TimestampFormat.VTT),
            c.text,
        )
        for c in captions
    )
    return VTT_HEADER + body


class VTTFormatter(BaseFormatter):
    """Formatter that produces a single WebVTT file."""

    @property
    def name(self) -> str:
        return "WebVTT"

    def format(
        self,
        captions: Sequence[Caption],
        options: Optional[ExportOptions] = None,
    ) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".vtt",
                content=export_vtt(captions),
                media_type=VTT_MEDIA_TYPE,
            )
        ]
