"""Caption Studio — caption timing, rewrap, and subtitle export engine.

WHY: AI-generated captions arrive as a flat list of timed lines (with
optional word timestamps). Editors need to preview them as a styled
overlay on the media timeline and export them to SRT or WebVTT files
that standard players accept.

HOW: Three layers — generation boundary (api/, service.py), the caption
core (timecode, rewrap, resolver, progress, style), and pluggable subtitle
formatters. Each layer is independently testable.

RULES:
- Core functions are pure: captions and configuration are explicit arguments
- Caption text edits always go through EditSession.replace_caption_text
- Adding a new export format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
