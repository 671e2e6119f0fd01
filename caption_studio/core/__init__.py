"""Caption core — data model, timing, rewrap, and overlay composition.

WHY: The core package contains the stable heart of the tool: the caption
dataclasses and the pure functions that time, wrap, and compose them.
These are consumed by the formatters, the session, and the CLI.

HOW: ir.py defines the data structures, timecode.py the timestamp codecs,
rewrap.py the card splitter, resolver.py and progress.py the playback
path, style.py and effects.py the overlay styling, session.py the
single-owner editing state.

RULES:
- IR dataclasses are frozen — a changed caption is a new Caption
- Nothing in core performs I/O or reads ambient state
"""
