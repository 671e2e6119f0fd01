"""Intermediate representation dataclasses for captions and highlights.

WHY: The Generation Service returns plain JSON arrays. The resolver,
compositor, rewrap engine, and serializers all need the same timed units
with the same field names. The IR gives them one well-typed form and
keeps JSON parsing at the edges.

HOW: Frozen dataclasses form a small hierarchy:
  Word          — one spoken word with its own time span
  Caption       — one timed line of text, optionally with Words
  Highlight     — a titled clip range suggested for short-form video
  PlaybackRange — the [start, end] window a highlight clip plays in
Each has to_dict()/from_dict() matching the wire JSON shape.

RULES:
- All times are float seconds
- Caption.words is a tuple and may be empty; words are tied to the exact
  current text, so with_text() always clears them
- from_dict() trusts its input; schema validation happens in api.models
- to_dict() omits "words" when there are none
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Sequence


@dataclass(frozen=True)
class Word:
    """A single spoken word with timing.

    RULES:
    - start <= end is assumed of upstream input, not enforced
    """

    word: str
    start: float
    end: float

    def to_dict(self) -> dict[str, Any]:
        return {"word": self.word, "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Word:
        return cls(
            word=str(data["word"]),
            start=float(data["start"]),
            end=float(data["end"]),
        )


@dataclass(frozen=True)
class Caption:
    """One timed caption line.

    WHY: This is the unit everything else works on — the resolver picks
    one per tick, the rewrap engine splits one into cards, the serializers
    write one per entry.

    RULES:
    - text may contain "**emphasis**" markup and "\\n" line breaks
    - start == end (zero duration) is allowed and must not crash consumers
    - words, when present, span the same interval and are time-ordered
    """

    text: str
    start: float
    end: float
    words: tuple[Word, ...] = field(default_factory=tuple)

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def has_words(self) -> bool:
        return len(self.words) > 0

    def with_text(self, text: str) -> Caption:
        """Return a copy with new text and no word timestamps."""
        return replace(self, text=text, words=())

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "text": self.text,
            "start": self.start,
            "end": self.end,
        }
        if self.words:
            data["words"] = [w.to_dict() for w in self.words]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Caption:
        return cls(
            text=str(data["text"]),
            start=float(data["start"]),
            end=float(data["end"]),
            words=tuple(Word.from_dict(w) for w in data.get("words") or ()),
        )


@dataclass(frozen=True)
class Highlight:
    """A highlight clip suggested by the Generation Service."""

    title: str
    description: str
    start: float
    end: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "start": self.start,
            "end": self.end,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Highlight:
        return cls(
            title=str(data["title"]),
            description=str(data["description"]),
            start=float(data["start"]),
            end=float(data["end"]),
        )

    @property
    def playback_range(self) -> PlaybackRange:
        return PlaybackRange(start=self.start, end=self.end)


@dataclass(frozen=True)
class PlaybackRange:
    """A window of the media timeline to play, then stop."""

    start: float
    end: float


def flatten_words(captions: Sequence[Caption]) -> list[Word]:
    """All words of all captions, in caption order then word order."""
    return [word for caption in captions for word in caption.words]


def find_overlaps(captions: Sequence[Caption]) -> list[tuple[int, int]]:
    """Return index pairs of captions whose time spans overlap.

    WHY: The resolver tolerates overlapping captions (first match wins),
    but callers loading a file may want to warn about them.

    HOW: Pairwise comparison — caption counts are small (one media file).

    RULES:
    - Sharing a boundary instant (a.end == b.start) is not an overlap
    """
    overlaps: list[tuple[int, int]] = []
    for i, a in enumerate(captions):
        for j in range(i + 1, len(captions)):
            b = captions[j]
            if a.start < b.end and b.start < a.end:
                overlaps.append((i, j))
    return overlaps
