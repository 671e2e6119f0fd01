"""Cue resolver: which caption is on screen at a playback time.

WHY: The media clock reports the playback position many times per second
and at irregular intervals. Each report must map to at most one caption,
and repeated reports inside the same caption must not make the overlay
redraw from scratch.

HOW: active_caption() is a linear first-match scan over the collection.
CueTracker wraps it for the clock callback: it remembers the caption it
returned last and flags ``changed`` only when a different caption (or
None after a caption) comes back. should_stop() is the highlight-clip
rule for pausing playback at the end of a range.

RULES:
- Intervals are closed on both ends: start <= t <= end
- Overlapping captions: the first in collection order wins
- Identity matters: an unchanged cue returns the same Caption object
- No indexing — caption counts per media file are small
"""

from __future__ import annotations

from typing import Optional, Sequence

from caption_studio.core.ir import Caption, PlaybackRange


def active_caption(captions: Sequence[Caption], t: float) -> Optional[Caption]:
    """Return the first caption whose [start, end] contains ``t``, or None."""
    for caption in captions:
        if caption.start <= t <= caption.end:
            return caption
    return None


def should_stop(playback_range: Optional[PlaybackRange], t: float) -> bool:
    """True once the clock reaches the end of a highlight clip's range."""
    return playback_range is not None and t >= playback_range.end


class CueTracker:
    """Per-tick caption lookup with change detection.

    WHY: The overlay only needs to rebuild its caption text when the
    active caption actually changes; progress within a caption is cheap.

    HOW: update() resolves the active caption and compares it by identity
    with the previous result. reset() swaps in an edited collection and
    forces the next update() to report a change.

    RULES:
    - ``current`` is the caption returned by the most recent update()
    - ``changed`` is True after the first update() and after reset()
    """

    def __init__(self, captions: Sequence[Caption] = ()) -> None:
        self._captions: Sequence[Caption] = captions
        self._primed = False
        self.current: Optional[Caption] = None
        self.changed = False

    @property
    def captions(self) -> Sequence[Caption]:
        return self._captions

    def reset(self, captions: Sequence[Caption]) -> None:
        """Replace the caption collection (e.g. after an edit)."""
        self._captions = captions
        self._primed = False
        self.current = None

    def update(self, t: float) -> Optional[Caption]:
        caption = active_caption(self._captions, t)
        self.changed = not self._primed or caption is not self.current
        self._primed = True
        self.current = caption
        return caption
