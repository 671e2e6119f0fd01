"""Subtitle formatter registry — pluggable export hub.

WHY: The CLI and session layers need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.

RULES:
- Keys are lowercase format identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from caption_studio.formatters.srt import SRTFormatter, export_srt
from caption_studio.formatters.vtt import VTTFormatter, export_vtt

if TYPE_CHECKING:
    from caption_studio.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SRTFormatter,
    "vtt": VTTFormatter,
}

__all__ = ["FORMATTERS", "SRTFormatter", "VTTFormatter", "export_srt", "export_vtt"]
