"""Shared test fixtures for the caption_studio test suite.

WHY: Most test modules need the same small caption collections — one
with word timestamps, one without, and the wire JSON a Generation
Service response would carry. Centralizing them avoids duplication.

HOW: Pytest fixtures build Caption IR from fixed literal data.

RULES:
- Times are chosen so boundaries are exact in binary floating point
- Word timestamps lie inside their caption's [start, end] span
"""

from typing import Any, Dict, List

import pytest

from caption_studio.core.ir import Caption


# ---------------------------------------------------------------------------
# Sample caption data (Generation Service wire shape)
# ---------------------------------------------------------------------------

SAMPLE_CAPTIONS_JSON: List[Dict[str, Any]] = [
    {
        "text": "Hello world",
        "start": 0.0,
        "end": 2.0,
        "words": [
            {"word": "Hello", "start": 0.0, "end": 1.0},
            {"word": "world", "start": 1.0, "end": 2.0},
        ],
    },
    {
        "text": "This is **very** important",
        "start": 2.5,
        "end": 4.0,
        "words": [
            {"word": "This", "start": 2.5, "end": 2.75},
            {"word": "is", "start": 2.75, "end": 3.0},
            {"word": "**very**", "start": 3.0, "end": 3.5},
            {"word": "important", "start": 3.5, "end": 4.0},
        ],
    },
]

SAMPLE_HIGHLIGHTS_JSON: List[Dict[str, Any]] = [
    {
        "title": "The Big Reveal",
        "description": "The host unveils the prototype.",
        "start": 65.0,
        "end": 95.5,
    },
]


@pytest.fixture
def sample_captions_json():
    """Caption list as the Generation Service returns it."""
    return [dict(item) for item in SAMPLE_CAPTIONS_JSON]


@pytest.fixture
def captions_with_words():
    """Two captions carrying word-level timestamps."""
    return [Caption.from_dict(item) for item in SAMPLE_CAPTIONS_JSON]


@pytest.fixture
def plain_captions():
    """Three text-only captions, as a Keywords/Emojis preset would produce."""
    return [
        Caption(text="First line", start=0.0, end=1.5),
        Caption(text="Second line", start=2.0, end=4.0),
        Caption(text="Third line", start=4.0, end=6.0),
    ]


@pytest.fixture
def sample_highlights_json():
    """Highlight list as the Generation Service returns it."""
    return [dict(item) for item in SAMPLE_HIGHLIGHTS_JSON]
