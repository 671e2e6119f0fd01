"""Prompt text for the Generation Service.

Caption prompts are built from a language instruction, a shared base
instruction, and per-preset style instructions. Presets that animate
word-by-word (Standard, TikTok) must ask for word timestamps; text-only
presets (Keywords, Emojis) must ask the model to omit them.
"""

from __future__ import annotations

from caption_studio.core.style import StylePreset

ORIGINAL_LANGUAGE = "original"

_STYLE_INSTRUCTIONS = {
    StylePreset.TIKTOK: (
        "- Generate short, punchy, and engaging subtitle lines suitable for social media like TikTok.\n"
        "- Each subtitle object should represent a very short phrase or sentence.\n"
        "- CRITICALLY IMPORTANT: You MUST include accurate word-level timestamps."
    ),
    StylePreset.KEYWORDS: (
        "- Identify the most important keywords or phrases in each subtitle line.\n"
        "- In the 'text' field, wrap these keywords with double asterisks. "
        "For example: \"This is a **very important** message.\"\n"
        "- Do NOT include word-level timestamps; the 'words' array should be omitted for this style."
    ),
    StylePreset.EMOJIS: (
        "- Analyze the sentiment and context of each subtitle line.\n"
        "- Append one or two relevant emojis to the end of the 'text' field for each line "
        "to add expressiveness.\n"
        "- Do NOT include word-level timestamps; the 'words' array should be omitted for this style."
    ),
}

_DEFAULT_STYLE_INSTRUCTIONS = (
    "- Generate standard, high-quality subtitles.\n"
    "- CRITICALLY IMPORTANT: You MUST include accurate word-level timestamps for every line."
)

HIGHLIGHTS_PROMPT = (
    "You are an expert video editor. Analyze the provided video and identify the most "
    "engaging, viral-worthy, or important moments that would make good short clips. "
    "For each moment you identify, create a highlight clip.\n\n"
    "For each clip, provide:\n"
    "1.  A short, catchy, YouTube-style title.\n"
    "2.  A brief, one-sentence summary of what happens in the clip.\n"
    "3.  The precise start and end timestamps in seconds.\n\n"
    "Return the result as a JSON array that strictly follows the specified schema. "
    "Ensure the timestamps are accurate and sequential."
)


def language_instruction(target_language: str | None) -> str:
    if target_language and target_language != ORIGINAL_LANGUAGE:
        return (
            "Transcribe the spoken words in the provided file, and then translate the "
            "transcription into fluent {0}. The final subtitles must be in {0}."
        ).format(target_language)
    return "Transcribe the spoken words in the provided file (which could be video or audio)."


def captions_prompt(target_language: str | None, preset: StylePreset) -> str:
    """Full caption-generation prompt for a target language and preset.

    Presets without their own instructions (Standard and the look-only
    presets) get the standard instructions with word timestamps.
    """
    base = (
        "{} The subtitles should be concise and broken into logical lines. "
        "Ensure the timestamps (start and end) are sequential and do not overlap incorrectly. "
        "Provide the output as a JSON array that matches the specified schema."
    ).format(language_instruction(target_language))
    style = _STYLE_INSTRUCTIONS.get(StylePreset(preset), _DEFAULT_STYLE_INSTRUCTIONS)
    return "{}\nSTYLE INSTRUCTIONS:\n{}".format(base, style)
