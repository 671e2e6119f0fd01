"""Caption overlay style options and named presets.

WHY: The overlay has many knobs — font, size, colours, spacing, an
effect (shadow or outline) with its own parameters, a 9-way position,
and an animation mode. Presets set a whole look at once (e.g. TikTok:
big uppercase Montserrat, middle of the frame, word-by-word reveal).

HOW: StyleOptions is a frozen dataclass with nested StrokeOptions and
ShadowOptions blocks. Each StylePreset maps to a pure override function
``StyleOptions -> StyleOptions`` in PRESET_OVERRIDES; apply_preset()
looks it up. Closed sets (fonts, positions, effects, animations, text
case) are Enums.

RULES:
- Styles are never mutated; presets return new StyleOptions
- The stroke block only matters when effect == OUTLINE, the shadow block
  only when effect == SHADOW
- STANDARD, KEYWORDS and EMOJIS shape the generated text, not the look;
  their override is the identity
- Colours are CSS colour strings ("#RRGGBB", "#RGB" or "rgba(...)")
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict


class Font(str, Enum):
    """Overlay font families (CSS font-family values)."""

    SANS = "'Inter', sans-serif"
    SERIF = "'Merriweather', serif"
    MODERN = "'Poppins', sans-serif"
    MONO = "'Roboto Mono', monospace"
    SCRIPT = "'Lobster', cursive"
    CONDENSED = "'Oswald', sans-serif"
    GEOMETRIC = "'Montserrat', sans-serif"
    ROUNDED = "'Lato', sans-serif"


class Position(str, Enum):
    """Where the caption box sits in a 3x3 grid over the video."""

    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    MIDDLE_LEFT = "middle-left"
    MIDDLE_CENTER = "middle-center"
    MIDDLE_RIGHT = "middle-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def row(self) -> str:
        return self.value.split("-")[0]

    @property
    def column(self) -> str:
        return self.value.split("-")[1]


class Animation(str, Enum):
    NONE = "none"
    KARAOKE = "karaoke"
    WORD = "word"


class EffectType(str, Enum):
    NONE = "none"
    SHADOW = "shadow"
    OUTLINE = "outline"


class TextCase(str, Enum):
    NORMAL = "none"
    UPPERCASE = "uppercase"


class StylePreset(str, Enum):
    """Named looks offered when generating captions."""

    STANDARD = "standard"
    TIKTOK = "tiktok"
    KEYWORDS = "keywords"
    EMOJIS = "emojis"
    MINIMALIST = "minimalist"
    BOLD_OUTLINE = "bold_outline"
    POP_3D = "pop_3d"


@dataclass(frozen=True)
class StrokeOptions:
    color: str = "#000000"
    width: float = 2


@dataclass(frozen=True)
class ShadowOptions:
    color: str = "rgba(0, 0, 0, 0.75)"
    blur: float = 5
    offset_x: float = 2
    offset_y: float = 2


@dataclass(frozen=True)
class StyleOptions:
    """Everything the overlay renderer needs to draw a caption.

    Attributes:
        font_size: rem units.
        letter_spacing: em units.
        background_opacity: 0 (transparent) to 1 (opaque).
        highlight_color: used for spoken words, karaoke fill and
                         **emphasis** spans.
    """

    font: Font = Font.MODERN
    font_size: float = 2.5
    is_bold: bool = True
    is_italic: bool = False
    text_case: TextCase = TextCase.NORMAL
    letter_spacing: float = 0.05
    line_height: float = 1.2
    text_color: str = "#FFFFFF"
    background_color: str = "#000000"
    background_opacity: float = 0.5
    highlight_color: str = "#FFFF00"
    effect: EffectType = EffectType.SHADOW
    stroke: StrokeOptions = field(default_factory=StrokeOptions)
    shadow: ShadowOptions = field(default_factory=ShadowOptions)
    position: Position = Position.BOTTOM_CENTER
    animation: Animation = Animation.WORD


DEFAULT_STYLE = StyleOptions()


# ---------------------------------------------------------------------------
# Preset overrides
# ---------------------------------------------------------------------------


def _unchanged(style: StyleOptions) -> StyleOptions:
    return style


def _tiktok(style: StyleOptions) -> StyleOptions:
    return replace(
        style,
        font=Font.GEOMETRIC,
        font_size=4.0,
        is_bold=True,
        text_case=TextCase.UPPERCASE,
        text_color="#FFFFFF",
        highlight_color="#FFFF00",
        effect=EffectType.SHADOW,
        shadow=ShadowOptions(color="rgba(0,0,0,0.8)", blur=8, offset_x=0, offset_y=4),
        position=Position.MIDDLE_CENTER,
        animation=Animation.WORD,
        line_height=1.1,
        background_opacity=0,
    )


def _minimalist(style: StyleOptions) -> StyleOptions:
    return replace(
        style,
        font=Font.SANS,
        font_size=2.2,
        is_bold=False,
        is_italic=False,
        text_case=TextCase.NORMAL,
        text_color="#FFFFFF",
        background_opacity=0,
        effect=EffectType.NONE,
        position=Position.BOTTOM_CENTER,
        animation=Animation.NONE,
        line_height=1.3,
        letter_spacing=0,
    )


def _bold_outline(style: StyleOptions) -> StyleOptions:
    return replace(
        style,
        font=Font.CONDENSED,
        font_size=4.5,
        is_bold=True,
        text_case=TextCase.UPPERCASE,
        text_color="#FFFF00",
        highlight_color="#FFFFFF",
        background_opacity=0,
        effect=EffectType.OUTLINE,
        stroke=StrokeOptions(color="#000000", width=3),
        position=Position.BOTTOM_CENTER,
        animation=Animation.KARAOKE,
        line_height=1.1,
        letter_spacing=0.05,
    )


def _pop_3d(style: StyleOptions) -> StyleOptions:
    return replace(
        style,
        font=Font.ROUNDED,
        font_size=3.5,
        is_bold=True,
        text_case=TextCase.NORMAL,
        text_color="#FFFFFF",
        highlight_color="#818cf8",  # indigo-400
        background_opacity=0,
        effect=EffectType.SHADOW,
        shadow=ShadowOptions(color="rgba(0, 0, 0, 1)", blur=0, offset_x=4, offset_y=4),
        position=Position.MIDDLE_CENTER,
        animation=Animation.WORD,
        line_height=1.2,
    )


PRESET_OVERRIDES: Dict[StylePreset, Callable[[StyleOptions], StyleOptions]] = {
    StylePreset.STANDARD: _unchanged,
    StylePreset.TIKTOK: _tiktok,
    StylePreset.KEYWORDS: _unchanged,
    StylePreset.EMOJIS: _unchanged,
    StylePreset.MINIMALIST: _minimalist,
    StylePreset.BOLD_OUTLINE: _bold_outline,
    StylePreset.POP_3D: _pop_3d,
}


def apply_preset(style: StyleOptions, preset: StylePreset) -> StyleOptions:
    """Return ``style`` with the preset's overrides applied.

    Raises:
        ValueError: If ``preset`` is not a known StylePreset value.
    """
    return PRESET_OVERRIDES[StylePreset(preset)](style)
