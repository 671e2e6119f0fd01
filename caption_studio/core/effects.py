"""Pure mappings from style options to rendering directives.

WHY: The renderer (CSS overlay today, a burn-in compositor tomorrow)
should not re-derive how an "outline" is drawn or how a hex colour plus
an opacity becomes rgba(). These are data transforms with no state.

HOW: effect_shadows() turns the selected effect into a list of
TextShadow directives: one for SHADOW, eight zero-blur offsets for
OUTLINE (a stroke faked by repeated shadows), none for NONE.
text_shadow_css() renders them; hex_to_rgba() and text_align() cover the
box background and alignment.

RULES:
- OUTLINE with width <= 0 draws nothing
- Only the parameter block of the selected effect is read
- Unknown colour formats are passed through unchanged
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence

from caption_studio.core.style import EffectType, Position, StyleOptions

_HEX_RE = re.compile(r"^#([A-Fa-f0-9]{3}){1,2}$")
_RGB_RE = re.compile(r"^rgba?\(\s*([^,()]+?)\s*,\s*([^,()]+?)\s*,\s*([^,()]+?)\s*(?:,[^()]*)?\)$")


@dataclass(frozen=True)
class TextShadow:
    offset_x: float
    offset_y: float
    blur: float
    color: str

    def to_css(self) -> str:
        return "{}px {}px {}px {}".format(
            _num(self.offset_x), _num(self.offset_y), _num(self.blur), self.color
        )


def _num(value: float) -> str:
    # 2.0 -> "2", 1.5 -> "1.5"
    return "{:g}".format(value)


def effect_shadows(style: StyleOptions) -> List[TextShadow]:
    """Shadows to draw behind the caption text for the selected effect."""
    if style.effect == EffectType.SHADOW:
        s = style.shadow
        return [TextShadow(s.offset_x, s.offset_y, s.blur, s.color)]

    if style.effect == EffectType.OUTLINE:
        width = style.stroke.width
        color = style.stroke.color
        if width <= 0:
            return []
        offsets = [
            (-width, -width), (width, -width),
            (-width, width), (width, width),
            (-width, 0), (width, 0),
            (0, -width), (0, width),
        ]
        return [TextShadow(x, y, 0, color) for x, y in offsets]

    return []


def text_shadow_css(shadows: Sequence[TextShadow]) -> str:
    """CSS ``text-shadow`` value, or ``"none"``."""
    if not shadows:
        return "none"
    return ", ".join(s.to_css() for s in shadows)


def hex_to_rgba(color: str, opacity: float) -> str:
    """Combine a colour and an opacity into an ``rgba()`` string.

    RULES:
    - "transparent" or opacity 0 → fully transparent black
    - "#RGB" is expanded to "#RRGGBB"
    - "rgb(...)"/"rgba(...)" keep their channels, opacity replaced
    """
    if color == "transparent" or opacity == 0:
        return "rgba(0,0,0,0)"

    if _HEX_RE.match(color):
        digits = color[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        value = int(digits, 16)
        r, g, b = (value >> 16) & 255, (value >> 8) & 255, value & 255
        return "rgba({},{},{},{})".format(r, g, b, _num(opacity))

    match = _RGB_RE.match(color)
    if match:
        r, g, b = match.groups()
        return "rgba({}, {}, {}, {})".format(r, g, b, _num(opacity))

    return color


def text_align(position: Position) -> str:
    """Horizontal text alignment implied by the grid column."""
    column = Position(position).column
    if column == "left":
        return "left"
    if column == "right":
        return "right"
    return "center"
