"""Unit tests for the editing session.

WHY: The session owns the caption collection while the user edits and
scrubs. Stale word timestamps after an edit would reveal words that no
longer exist; a mutated collection would confuse the cue tracker.

HOW: Build sessions from the shared fixtures, edit, switch presets, and
drive on_time_update() like a media clock.
"""

import pytest

from caption_studio.core.ir import Highlight
from caption_studio.core.session import EditSession
from caption_studio.core.style import DEFAULT_STYLE, Animation, Position, StylePreset


class TestEditSession:
    """Caption edits and style changes."""

    def test_from_captions_applies_preset(self, captions_with_words):
        session = EditSession.from_captions(captions_with_words, preset=StylePreset.TIKTOK)
        assert session.style.position == Position.MIDDLE_CENTER
        assert isinstance(session.captions, tuple)

    def test_from_captions_default_style(self, plain_captions):
        assert EditSession.from_captions(plain_captions).style == DEFAULT_STYLE

    def test_word_animation_available(self, captions_with_words, plain_captions):
        assert EditSession.from_captions(captions_with_words).word_animation_available
        assert not EditSession.from_captions(plain_captions).word_animation_available
        assert not EditSession().word_animation_available

    def test_replace_caption_text_clears_words(self, captions_with_words):
        session = EditSession.from_captions(captions_with_words)
        updated = session.replace_caption_text(0, "Hi world")
        assert updated.text == "Hi world"
        assert updated.words == ()
        assert (updated.start, updated.end) == (0.0, 2.0)
        assert session.captions[0] is updated
        assert session.captions[1].has_words

    def test_replace_swaps_whole_tuple(self, plain_captions):
        session = EditSession.from_captions(plain_captions)
        before = session.captions
        session.replace_caption_text(1, "Changed")
        assert session.captions is not before
        assert before[1].text == "Second line"

    def test_replace_out_of_range(self, plain_captions):
        session = EditSession.from_captions(plain_captions)
        with pytest.raises(IndexError):
            session.replace_caption_text(10, "nope")

    def test_apply_preset(self, plain_captions):
        session = EditSession.from_captions(plain_captions)
        style = session.apply_preset(StylePreset.MINIMALIST)
        assert session.style is style
        assert style.animation == Animation.NONE


class TestOnTimeUpdate:
    """Media clock callback."""

    def test_tick_sequence(self, captions_with_words):
        session = EditSession.from_captions(captions_with_words)

        first = session.on_time_update(0.5)
        assert first.caption_changed is True
        assert first.frame.caption.text == "Hello world"
        assert [w.revealed for w in first.frame.words] == [True, False]

        second = session.on_time_update(1.5)
        assert second.caption_changed is False
        assert [w.revealed for w in second.frame.words] == [True, True]

        gap = session.on_time_update(2.25)
        assert gap.frame is None
        assert gap.caption_changed is True

    def test_edit_forces_change(self, captions_with_words):
        session = EditSession.from_captions(captions_with_words)
        session.on_time_update(0.5)
        session.replace_caption_text(0, "Edited")
        tick = session.on_time_update(0.6)
        assert tick.caption_changed is True
        assert tick.frame.caption.text == "Edited"
        assert tick.frame.animation == Animation.NONE

    def test_highlight_range_stop(self, plain_captions):
        clip = Highlight(title="t", description="d", start=2.0, end=4.0)
        session = EditSession.from_captions(plain_captions)
        session.playback_range = clip.playback_range
        assert session.on_time_update(3.0).stop is False
        assert session.on_time_update(4.0).stop is True
