"""Rewrap engine: re-flow caption text into fixed-size cards.

WHY: Generated captions are "logical lines" of arbitrary length. Many
players and broadcast specs need at most N characters per line and M
lines on screen at once. Rewrapping splits each caption into cards that
fit both limits and shares the caption's time span between them.

HOW: Three steps per caption:
  1. wrap_words()  — greedy packing of whitespace tokens into lines
  2. group_lines() — consecutive lines grouped into cards of <= M lines
  3. the caption's duration is divided evenly across its cards
Captions are processed independently; output order follows input order.

RULES:
- Tokens are never split; a token longer than the limit gets its own line
- A caption with no tokens produces no cards (it is dropped)
- Card i of N spans [start + i*d/N, start + (i+1)*d/N]
- Cards carry no word timestamps (their text no longer matches the words)
- Callers bypass rewrap when either limit is <= 0; if called anyway, a
  non-positive limit degrades to one token per line / one line per card
"""

from __future__ import annotations

from typing import List, Sequence

from caption_studio.core.ir import Caption


def wrap_words(tokens: Sequence[str], max_chars_per_line: int) -> List[str]:
    """Greedily pack tokens into lines of at most ``max_chars_per_line``.

    A token is appended to the current line (joined by one space) while
    ``len(line) + 1 + len(token) <= max_chars_per_line``; otherwise the
    line is closed and the token starts the next one.

    Args:
        tokens: Non-empty word tokens in reading order.
        max_chars_per_line: Character budget per line.

    Returns:
        The packed lines. Empty if there are no tokens.
    """
    lines: List[str] = []
    current = ""
    for token in tokens:
        if not current:
            current = token
        elif len(current) + 1 + len(token) <= max_chars_per_line:
            current = "{} {}".format(current, token)
        else:
            lines.append(current)
            current = token
    if current:
        lines.append(current)
    return lines


def group_lines(lines: Sequence[str], max_lines_per_card: int) -> List[str]:
    """Group consecutive lines into cards, joined with newlines.

    The last card may hold fewer lines than the limit.
    """
    step = max(max_lines_per_card, 1)
    return [
        "\n".join(lines[i:i + step])
        for i in range(0, len(lines), step)
    ]


def split_caption(
    caption: Caption,
    max_chars_per_line: int,
    max_lines_per_card: int,
) -> List[Caption]:
    """Split one caption into cards that fit both limits.

    Returns:
        Zero or more cards, in reading order, that together cover the
        caption's original [start, end] span.
    """
    tokens = caption.text.split()
    if not tokens:
        return []

    lines = wrap_words(tokens, max_chars_per_line)
    cards = group_lines(lines, max_lines_per_card)

    per_card = caption.duration / len(cards)
    return [
        Caption(
            text=text,
            start=caption.start + i * per_card,
            end=caption.start + (i + 1) * per_card,
        )
        for i, text in enumerate(cards)
    ]


def rewrap_captions(
    captions: Sequence[Caption],
    max_chars_per_line: int,
    max_lines_per_card: int,
) -> List[Caption]:
    """Rewrap every caption into cards, preserving order.

    WHY: SRT line-mode export offers "max chars per line" and "max lines
    per card" so the file displays well on players that do not wrap.

    HOW: Each input caption expands in place into the cards returned by
    split_caption().

    Args:
        captions: The caption collection, in display order.
        max_chars_per_line: Character budget per line (> 0).
        max_lines_per_card: Line budget per card (> 0).

    Returns:
        A new list of cards; the input is not modified.
    """
    result: List[Caption] = []
    for caption in captions:
        result.extend(split_caption(caption, max_chars_per_line, max_lines_per_card))
    return result
