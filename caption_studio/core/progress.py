"""Progress compositor: per-tick reveal state for the caption overlay.

WHY: While media plays, the active caption is drawn with a reveal
animation — a karaoke colour sweep proportional to elapsed time, or a
word-by-word colour change keyed to each word's own start. Independently,
"**keyword**" markup is drawn in the highlight colour at heavy weight.
The renderer needs all of this as plain data for the current time.

HOW: Small pure functions compute each concern:
  karaoke_progress() — elapsed share of the caption, 0..100
  reveal_words()     — revealed/pending flag per Word
  split_emphasis()   — text split into plain and emphasized spans
compose_frame() combines them for one caption, one style, one time.

RULES:
- Progress is always finite and within [0, 100], even for zero-duration
  captions (100 once the clock reaches start, 0 before)
- WORD animation without word data falls back to NONE
- Emphasis spans are computed in every mode; they sit under the colour
  progress rather than replacing it
- Unmatched "**" markers are left in the text as-is
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from caption_studio.core.ir import Caption, Word
from caption_studio.core.style import Animation, StyleOptions

EMPHASIS_MARKER = "**"
EMPHASIS_WEIGHT = 900

_EMPHASIS_RE = re.compile(r"(\*\*.*?\*\*)", re.DOTALL)


@dataclass(frozen=True)
class TextSpan:
    text: str
    emphasized: bool = False


@dataclass(frozen=True)
class WordReveal:
    word: Word
    revealed: bool


@dataclass(frozen=True)
class ColorSplit:
    """Left-to-right two-colour split for karaoke mode.

    Characters left of ``percent`` are drawn in ``spoken_color``, the
    rest in ``pending_color``.
    """

    percent: float
    spoken_color: str
    pending_color: str

    def to_css(self) -> str:
        return "linear-gradient(to right, {0} {2:g}%, {1} {2:g}%)".format(
            self.spoken_color, self.pending_color, self.percent
        )


@dataclass(frozen=True)
class CaptionFrame:
    """Everything the overlay needs to draw one caption at one instant."""

    caption: Caption
    animation: Animation
    spans: Tuple[TextSpan, ...]
    text_color: str
    highlight_color: str
    emphasis_weight: int = EMPHASIS_WEIGHT
    karaoke: Optional[ColorSplit] = None
    words: Tuple[WordReveal, ...] = field(default_factory=tuple)


def karaoke_progress(caption: Caption, t: float) -> float:
    """Percent of the caption's duration elapsed at time ``t``, clamped to 0..100."""
    duration = caption.end - caption.start
    if duration <= 0:
        return 100.0 if t >= caption.start else 0.0
    fraction = (t - caption.start) / duration
    if math.isnan(fraction):
        return 0.0
    return max(0.0, min(1.0, fraction)) * 100.0


def reveal_words(words: Sequence[Word], t: float) -> List[WordReveal]:
    """Mark each word revealed once the clock reaches its start."""
    return [WordReveal(word=w, revealed=t >= w.start) for w in words]


def split_emphasis(text: str) -> List[TextSpan]:
    """Split caption text on ``**emphasis**`` markup.

    "a **big** deal" becomes three spans: "a ", "big" (emphasized) and
    " deal". Markers are non-greedy, so "**a** and **b**" yields two
    emphasized spans.
    """
    if EMPHASIS_MARKER not in text:
        return [TextSpan(text)]

    spans: List[TextSpan] = []
    for part in _EMPHASIS_RE.split(text):
        if not part:
            continue
        if (
            len(part) >= 2 * len(EMPHASIS_MARKER)
            and part.startswith(EMPHASIS_MARKER)
            and part.endswith(EMPHASIS_MARKER)
        ):
            inner = part[len(EMPHASIS_MARKER):-len(EMPHASIS_MARKER)]
            spans.append(TextSpan(inner, emphasized=True))
        else:
            spans.append(TextSpan(part))
    return spans


def effective_animation(caption: Caption, style: StyleOptions) -> Animation:
    """The animation actually used for this caption."""
    if style.animation == Animation.WORD and not caption.has_words:
        return Animation.NONE
    return style.animation


def compose_frame(caption: Caption, style: StyleOptions, t: float) -> CaptionFrame:
    """Build the overlay frame for ``caption`` at playback time ``t``.

    Args:
        caption: The active caption (from the cue resolver).
        style: The session's current style options.
        t: Playback time in seconds.

    Returns:
        A CaptionFrame with emphasis spans and, depending on the effective
        animation, the karaoke colour split or the per-word reveal states.
    """
    animation = effective_animation(caption, style)
    karaoke = None
    words: Tuple[WordReveal, ...] = ()

    if animation == Animation.KARAOKE:
        karaoke = ColorSplit(
            percent=karaoke_progress(caption, t),
            spoken_color=style.highlight_color,
            pending_color=style.text_color,
        )
    elif animation == Animation.WORD:
        words = tuple(reveal_words(caption.words, t))

    return CaptionFrame(
        caption=caption,
        animation=animation,
        spans=tuple(split_emphasis(caption.text)),
        text_color=style.text_color,
        highlight_color=style.highlight_color,
        karaoke=karaoke,
        words=words,
    )
