"""Editing session: the single owner of a caption collection and its style.

WHY: After generation the user edits caption text, switches presets, and
scrubs the media while the overlay follows. All of that state has to live
somewhere explicit so the core functions stay pure and never read globals.

HOW: EditSession holds the caption tuple, the style options, and a
CueTracker for the playback clock. Edits build a new tuple and swap it in
with one assignment, so readers (resolver, serializers) only ever see a
complete collection. on_time_update() is the clock callback.

RULES:
- replace_caption_text() is the only way to change caption text, and it
  always clears that caption's words
- The caption collection is a tuple; it is replaced, never mutated
- Word animation is offered only if the first caption carries words
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from caption_studio.core.ir import Caption, PlaybackRange
from caption_studio.core.progress import CaptionFrame, compose_frame
from caption_studio.core.resolver import CueTracker, should_stop
from caption_studio.core.style import DEFAULT_STYLE, StyleOptions, StylePreset, apply_preset


@dataclass(frozen=True)
class PlaybackTick:
    """Result of one media-clock update.

    Attributes:
        frame: The overlay to draw, or None when no caption is active.
        caption_changed: False when the active caption is the same object
                         as on the previous tick.
        stop: True when a highlight clip's range end has been reached.
    """

    frame: Optional[CaptionFrame]
    caption_changed: bool
    stop: bool = False


@dataclass
class EditSession:
    """State for one generated caption collection being edited and previewed."""

    captions: Tuple[Caption, ...] = ()
    style: StyleOptions = DEFAULT_STYLE
    media_name: str = ""
    playback_range: Optional[PlaybackRange] = None
    _tracker: CueTracker = field(default_factory=CueTracker, init=False, repr=False)

    def __post_init__(self) -> None:
        self.captions = tuple(self.captions)
        self._tracker.reset(self.captions)

    @classmethod
    def from_captions(
        cls,
        captions: Sequence[Caption],
        preset: Optional[StylePreset] = None,
        media_name: str = "",
    ) -> EditSession:
        style = DEFAULT_STYLE if preset is None else apply_preset(DEFAULT_STYLE, preset)
        return cls(captions=tuple(captions), style=style, media_name=media_name)

    @property
    def word_animation_available(self) -> bool:
        return len(self.captions) > 0 and self.captions[0].has_words

    def replace_caption_text(self, index: int, text: str) -> Caption:
        """Replace one caption's text and clear its word timestamps.

        Raises:
            IndexError: If ``index`` is outside the collection.
        """
        updated = self.captions[index].with_text(text)
        captions = list(self.captions)
        captions[index] = updated
        self.captions = tuple(captions)
        self._tracker.reset(self.captions)
        return updated

    def apply_preset(self, preset: StylePreset) -> StyleOptions:
        self.style = apply_preset(self.style, preset)
        return self.style

    def on_time_update(self, t: float) -> PlaybackTick:
        """Media-clock callback: resolve the caption and compose its frame."""
        caption = self._tracker.update(t)
        frame = compose_frame(caption, self.style, t) if caption is not None else None
        return PlaybackTick(
            frame=frame,
            caption_changed=self._tracker.changed,
            stop=should_stop(self.playback_range, t),
        )
