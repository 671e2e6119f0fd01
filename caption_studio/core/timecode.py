"""Timestamp codecs for subtitle files and on-screen time labels.

WHY: SRT and WebVTT share the HH:MM:SS<sep>mmm shape but differ in the
millisecond separator, and players reject files with the wrong one. The
editor timeline and the highlight list show shorter labels. Keeping all
of these in one module makes the byte-level format easy to verify.

HOW: Every codec rounds the float seconds to whole milliseconds once,
then splits with divmod. parse_timestamp() reverses the file codecs.

RULES:
- SRT uses "," before milliseconds, VTT uses "."
- Hours are never wrapped or truncated; 100h+ renders with more digits
- Negative input is clamped to zero
- Display codecs are for the UI only, never for file export
"""

from __future__ import annotations

import re
from enum import Enum


class TimestampFormat(str, Enum):
    """Subtitle file timestamp variants."""

    SRT = "srt"
    VTT = "vtt"


_SEPARATORS = {
    TimestampFormat.SRT: ",",
    TimestampFormat.VTT: ".",
}

_TIMESTAMP_RE = re.compile(
    r"^\s*(?:(?P<h>\d+):)?(?P<m>\d{1,2}):(?P<s>\d{1,2})[,.](?P<ms>\d{1,3})\s*$"
)


def _split_ms(seconds: float) -> tuple[int, int, int, int]:
    total_ms = int(round(max(seconds, 0.0) * 1000.0))
    total_s, ms = divmod(total_ms, 1000)
    total_m, s = divmod(total_s, 60)
    h, m = divmod(total_m, 60)
    return h, m, s, ms


def format_timestamp(
    seconds: float,
    variant: TimestampFormat = TimestampFormat.SRT,
) -> str:
    """Format elapsed seconds as ``HH:MM:SS,mmm`` (SRT) or ``HH:MM:SS.mmm`` (VTT).

    Args:
        seconds: Elapsed time from the start of the media.
        variant: Which subtitle format's separator to use.

    Returns:
        The timestamp string with 2-2-2-3 digit groups (hours may grow).
    """
    h, m, s, ms = _split_ms(seconds)
    sep = _SEPARATORS[TimestampFormat(variant)]
    return "{:02d}:{:02d}:{:02d}{}{:03d}".format(h, m, s, sep, ms)


def parse_timestamp(text: str) -> float:
    """Parse an SRT or VTT timestamp back into seconds.

    RULES:
    - Accepts either "," or "." before the milliseconds
    - The hours field is optional (VTT allows ``MM:SS.mmm``)
    - Milliseconds shorter than 3 digits are right-padded ("5" → 500ms)
    - Raises ValueError on anything else
    """
    match = _TIMESTAMP_RE.match(text)
    if not match:
        raise ValueError("Invalid timestamp: {!r}".format(text))
    hours = int(match.group("h") or 0)
    minutes = int(match.group("m"))
    secs = int(match.group("s"))
    ms = int(match.group("ms").ljust(3, "0"))
    return hours * 3600 + minutes * 60 + secs + ms / 1000.0


def format_display_time(seconds: float) -> str:
    """Timeline label ``MM:SS.mmm`` — no hours field, minutes absorb hours."""
    h, m, s, ms = _split_ms(seconds)
    return "{:02d}:{:02d}.{:03d}".format(h * 60 + m, s, ms)


def format_clip_time(seconds: float) -> str:
    """Highlight list label ``MM:SS`` with whole seconds floored."""
    whole = int(max(seconds, 0.0))
    minutes, secs = divmod(whole, 60)
    return "{:02d}:{:02d}".format(minutes, secs)
