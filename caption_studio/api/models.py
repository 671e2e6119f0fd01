"""Response schemas and validated parsing for Generation Service output.

WHY: The Generation Service is an LLM; its output is untrusted. A caption
list with a missing "end" or a string where a number belongs would crash
the resolver or produce a corrupt SRT file much later. Validating the
whole response up front turns that into one clear MalformedResponseError.

HOW: CAPTION_SCHEMA and HIGHLIGHT_SCHEMA are JSON Schema documents that
jsonschema validates against. to_response_schema() converts them into
the OpenAPI-subset dialect Gemini expects in ``responseSchema``.
parse_captions() / parse_highlights() do text → JSON → schema → IR.

RULES:
- The response text must be a JSON array ("[" ... "]" after stripping)
- Any schema violation rejects the whole response (no partial recovery)
- NaN and Infinity are rejected even where the schema says "number"
- Extra properties are tolerated; required ones are not optional
"""

from __future__ import annotations

import copy
import json
import math
from typing import Any, Dict, List, Optional, Tuple

import jsonschema

from caption_studio.core.ir import Caption, Highlight
from caption_studio.errors import MalformedResponseError

WORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "word": {"type": "string"},
        "start": {"type": "number"},
        "end": {"type": "number"},
    },
    "required": ["word", "start", "end"],
}

CAPTION_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "text": {
                "type": "string",
                "description": "The full text of the subtitle line.",
            },
            "start": {
                "type": "number",
                "description": "The start time of the subtitle in seconds.",
            },
            "end": {
                "type": "number",
                "description": "The end time of the subtitle in seconds.",
            },
            "words": {
                "type": "array",
                "description": (
                    "Optional word-level timestamps for the subtitle line. "
                    "Omit if not applicable for the style."
                ),
                "items": WORD_SCHEMA,
            },
        },
        "required": ["text", "start", "end"],
    },
}

HIGHLIGHT_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "A short, catchy, YouTube-style title for the highlight clip.",
            },
            "description": {
                "type": "string",
                "description": "A brief, one-sentence summary of what happens in the clip.",
            },
            "start": {
                "type": "number",
                "description": "The start time of the highlight in seconds.",
            },
            "end": {
                "type": "number",
                "description": "The end time of the highlight in seconds.",
            },
        },
        "required": ["title", "description", "start", "end"],
    },
}


def to_response_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a JSON Schema into Gemini's ``responseSchema`` dialect.

    Gemini uses upper-case OpenAPI type names ("ARRAY", "OBJECT", ...).
    """
    converted = copy.deepcopy(schema)

    def _walk(node: Any) -> None:
        if isinstance(node, dict):
            if isinstance(node.get("type"), str):
                node["type"] = node["type"].upper()
            for key, value in node.items():
                if key != "type":
                    _walk(value)
        elif isinstance(node, list):
            for item in node:
                _walk(item)

    _walk(converted)
    return converted


def _load_array(text: str, kind: str) -> List[Dict[str, Any]]:
    json_text = text.strip()
    if not (json_text.startswith("[") and json_text.endswith("]")):
        raise MalformedResponseError(
            "Failed to parse {} from the AI. The response was not a valid JSON array.".format(kind)
        )
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(
            "Failed to parse {} from the AI: {}".format(kind, exc)
        ) from exc


def _non_finite_path(node: Any, path: Tuple[str, ...] = ()) -> Optional[Tuple[str, ...]]:
    # json.loads accepts NaN and Infinity, and so does "type": "number".
    if isinstance(node, float) and not math.isfinite(node):
        return path
    if isinstance(node, dict):
        children = node.items()
    elif isinstance(node, list):
        children = enumerate(node)
    else:
        return None
    for key, value in children:
        found = _non_finite_path(value, path + (str(key),))
        if found is not None:
            return found
    return None


def _validate(data: Any, schema: Dict[str, Any], kind: str) -> None:
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise MalformedResponseError(
            "Failed to parse {} from the AI: {} (at {})".format(kind, exc.message, location)
        ) from exc

    bad = _non_finite_path(data)
    if bad is not None:
        raise MalformedResponseError(
            "Failed to parse {} from the AI: times must be finite numbers (at {})".format(
                kind, "/".join(bad) or "<root>"
            )
        )


def validate_captions(data: Any) -> List[Caption]:
    """Validate already-decoded JSON against CAPTION_SCHEMA and build the IR."""
    _validate(data, CAPTION_SCHEMA, "subtitles")
    return [Caption.from_dict(item) for item in data]


def parse_captions(text: str) -> List[Caption]:
    """Parse a Generation Service caption response.

    Raises:
        MalformedResponseError: If the text is not a JSON array of captions.
    """
    return validate_captions(_load_array(text, "subtitles"))


def parse_highlights(text: str) -> List[Highlight]:
    """Parse a Generation Service highlight response.

    Raises:
        MalformedResponseError: If the text is not a JSON array of highlights.
    """
    data = _load_array(text, "highlights")
    _validate(data, HIGHLIGHT_SCHEMA, "highlights")
    return [Highlight.from_dict(item) for item in data]


def captions_to_json(captions: List[Caption]) -> str:
    return json.dumps([c.to_dict() for c in captions], indent=2, ensure_ascii=False)


def highlights_to_json(highlights: List[Highlight]) -> str:
    return json.dumps([h.to_dict() for h in highlights], indent=2, ensure_ascii=False)
