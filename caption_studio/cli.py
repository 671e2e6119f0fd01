"""Command-line interface for Caption Studio.

WHY: Users need a simple way to generate captions for a media file,
tweak them, preview the overlay state at a given time, and export SRT or
WebVTT files — all from the terminal and scriptable.

HOW: argparse with four subcommands:
  generate — size check, Gemini call, save {stem}.captions.json (or
             {stem}.highlights.json) plus any requested subtitle files
  export   — caption JSON → SRT/VTT via the FORMATTERS registry
  edit     — replace one caption's text (clears its word timestamps)
  preview  — resolve the active caption at --at and print its frame,
             optionally playing one highlight clip (--highlights, --clip)
Status messages go to stderr; output files are saved next to the input
(or to --output-dir) without overwriting existing files.

RULES:
- Status output goes to stderr (not stdout); --stdout prints exports
- Errors are reported as "Error: <title>: <message>" with exit code 1
- Output naming: {stem}{suffix}, numeric suffix for conflicts (talk-2.srt)
- --verbose enables INFO logging from the library modules
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from caption_studio.api.models import (
    captions_to_json,
    highlights_to_json,
    parse_highlights,
    validate_captions,
)
from caption_studio.config import (
    DEFAULT_MAX_CHARS_PER_LINE,
    DEFAULT_MAX_LINES_PER_CARD,
    DEFAULT_TARGET_LANGUAGE,
    MEDIA_TYPES,
)
from caption_studio.core.effects import effect_shadows, hex_to_rgba, text_align, text_shadow_css
from caption_studio.core.ir import Caption, Highlight, find_overlaps
from caption_studio.core.progress import CaptionFrame
from caption_studio.core.session import EditSession
from caption_studio.core.style import Animation, StylePreset
from caption_studio.core.timecode import format_clip_time, format_display_time
from caption_studio.errors import (
    CaptionStudioError,
    MalformedResponseError,
    ValidationError,
    describe_error,
)
from caption_studio.formatters import FORMATTERS
from caption_studio.formatters.base import ExportOptions, FormatterOutput, output_filename
from caption_studio import service

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def _resolve_output_path(filename: str, output_dir: Path) -> Path:
    """Return a path in output_dir that does not exist yet.

    ``talk.srt`` → ``talk.srt``, then ``talk-2.srt``, ``talk-3.srt``, ...
    """
    base_path = output_dir / filename
    if not base_path.exists():
        return base_path

    stem = base_path.stem
    ext = base_path.suffix
    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_text(content: str, filename: str, output_dir: Path) -> Path:
    path = _resolve_output_path(filename, output_dir)
    path.write_text(content, encoding="utf-8")
    return path


def _replace_text(path: Path, content: str) -> None:
    """Write to a sibling temp file, then swap it over ``path``.

    The original file is either fully replaced or left untouched.
    """
    tmp_path = path.with_name(".{}.tmp".format(path.name))
    try:
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def load_captions_file(path: str | Path) -> List[Caption]:
    """Load and validate a caption JSON file.

    Raises:
        ValidationError: If the file is not JSON or does not match the
                         caption schema.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError("{} is not valid JSON: {}".format(path.name, exc)) from exc
    try:
        captions = validate_captions(data)
    except MalformedResponseError as exc:
        raise ValidationError("{} is not a caption file: {}".format(path.name, exc)) from exc

    for i, j in find_overlaps(captions):
        logger.warning("Captions %d and %d overlap; the earlier one wins on screen", i + 1, j + 1)
    return captions


def load_highlights_file(path: str | Path) -> List[Highlight]:
    """Load and validate a highlight JSON file (from 'generate --highlights').

    Raises:
        ValidationError: If the file does not match the highlight schema.
    """
    path = Path(path)
    try:
        return parse_highlights(path.read_text(encoding="utf-8"))
    except MalformedResponseError as exc:
        raise ValidationError("{} is not a highlight file: {}".format(path.name, exc)) from exc


def _media_name_for(captions_path: Path, media_name: Optional[str]) -> str:
    if media_name:
        return media_name
    # "talk.captions.json" → "talk.captions" → exports as "talk.srt"
    return Path(captions_path.stem).name


def _export(
    captions: Sequence[Caption],
    format_keys: Sequence[str],
    options: ExportOptions,
) -> List[FormatterOutput]:
    outputs: List[FormatterOutput] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        _status("  Running {} formatter...".format(formatter.name))
        outputs.extend(formatter.format(captions, options))
    return outputs


def _parse_formats(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    keys = [f.strip().lower() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise ValidationError(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS))
                )
            )
    return keys


def _export_options(args: argparse.Namespace) -> ExportOptions:
    return ExportOptions.from_dict({
        "mode": args.mode,
        "max_chars_per_line": args.max_chars,
        "max_lines_per_card": args.max_lines,
    })


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


async def _run_generate(args: argparse.Namespace) -> None:
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        raise ValidationError("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise ValidationError("Output directory does not exist: {}".format(output_dir))

    format_keys = _parse_formats(args.formats)
    media = service.load_media(input_path)
    stem = Path(media.name).stem

    if args.highlights:
        _status("Finding highlights in {}...".format(media.name))
        clips = await service.generate_highlights(media)
        saved = _save_text(highlights_to_json(clips), "{}.highlights.json".format(stem), output_dir)
        for clip in clips:
            _status("  {} - {}  {}".format(
                format_clip_time(clip.start), format_clip_time(clip.end), clip.title
            ))
        _status("Saved: {}".format(saved))
        return

    preset = StylePreset(args.preset)
    _status("Generating subtitles for {} (preset: {})...".format(media.name, preset.value))
    captions = await service.generate_subtitles(media, args.language, preset)
    saved_files = [
        _save_text(captions_to_json(captions), "{}.captions.json".format(stem), output_dir)
    ]

    if format_keys:
        _status("Formatting output...")
        for output in _export(captions, format_keys, _export_options(args)):
            saved_files.append(
                _save_text(output.content, output_filename(media.name, output.suffix), output_dir)
            )

    _status("Done! {} subtitle lines.".format(len(captions)))
    for f in saved_files:
        _status("  Saved: {}".format(f))


def _run_export(args: argparse.Namespace) -> None:
    captions_path = Path(args.captions_file).resolve()
    captions = load_captions_file(captions_path)
    format_keys = _parse_formats(args.formats) or ["srt"]
    options = _export_options(args)
    media_name = _media_name_for(captions_path, args.media_name)

    outputs = _export(captions, format_keys, options)
    if args.stdout:
        for output in outputs:
            sys.stdout.write(output.content)
        return

    output_dir = Path(args.output_dir).resolve() if args.output_dir else captions_path.parent
    for output in outputs:
        path = _save_text(output.content, output_filename(media_name, output.suffix), output_dir)
        _status("  Saved: {}".format(path))


def _run_edit(args: argparse.Namespace) -> None:
    captions_path = Path(args.captions_file).resolve()
    session = EditSession(captions=tuple(load_captions_file(captions_path)))
    index = args.index - 1
    if not 0 <= index < len(session.captions):
        raise ValidationError(
            "Caption {} does not exist (file has {} captions)".format(
                args.index, len(session.captions)
            )
        )
    updated = session.replace_caption_text(index, args.text)
    _replace_text(captions_path, captions_to_json(list(session.captions)))
    _status("Caption {} ({} --> {}) updated; word timestamps cleared.".format(
        args.index, format_display_time(updated.start), format_display_time(updated.end)
    ))


def describe_frame(frame: Optional[CaptionFrame]) -> str:
    """Human-readable rendering of an overlay frame for the terminal."""
    if frame is None:
        return "(no caption)"

    text = "".join(
        "[{}]".format(span.text) if span.emphasized else span.text
        for span in frame.spans
    )
    lines = [
        "{} --> {}".format(
            format_display_time(frame.caption.start), format_display_time(frame.caption.end)
        ),
        text,
        "animation: {}".format(frame.animation.value),
    ]
    if frame.karaoke is not None:
        lines.append("karaoke: {:.1f}%".format(frame.karaoke.percent))
    if frame.words:
        lines.append(" ".join(
            w.word.word if w.revealed else "_" * len(w.word.word) for w in frame.words
        ))
    return "\n".join(lines)


def _run_preview(args: argparse.Namespace) -> None:
    captions = load_captions_file(args.captions_file)
    session = EditSession.from_captions(
        captions,
        preset=StylePreset(args.preset) if args.preset else None,
    )
    if args.animation:
        session.style = replace(session.style, animation=Animation(args.animation))
    if session.style.animation == Animation.WORD and not session.word_animation_available:
        _status("Warning: these captions have no word timestamps; word animation is off.")

    if args.highlights:
        clips = load_highlights_file(args.highlights)
        if not 1 <= args.clip <= len(clips):
            raise ValidationError(
                "Clip {} does not exist (file has {} clips)".format(args.clip, len(clips))
            )
        clip = clips[args.clip - 1]
        session.playback_range = clip.playback_range
        print("clip: {} ({} - {})".format(
            clip.title, format_clip_time(clip.start), format_clip_time(clip.end)
        ))

    style = session.style
    print("text-shadow: {}".format(text_shadow_css(effect_shadows(style))))
    print("background: {}".format(hex_to_rgba(style.background_color, style.background_opacity)))
    print("text-align: {}".format(text_align(style.position)))
    for t in args.at:
        tick = session.on_time_update(t)
        print("@ {}".format(format_display_time(t)))
        print(describe_frame(tick.frame))
        if tick.stop:
            print("(clip ended; playback stops)")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_export_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=["lines", "words"],
        default="lines",
        help="SRT export granularity (default: %(default)s).",
    )
    parser.add_argument(
        "--max-chars",
        type=int,
        default=DEFAULT_MAX_CHARS_PER_LINE,
        help="Max characters per line when rewrapping; 0 disables (default: %(default)s).",
    )
    parser.add_argument(
        "--max-lines",
        type=int,
        default=DEFAULT_MAX_LINES_PER_CARD,
        help="Max lines per card when rewrapping; 0 disables (default: %(default)s).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: next to the input file).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Subcommands: generate, export, edit, preview
    - Export flags (--mode, --max-chars, --max-lines) are shared by
      generate and export
    """
    parser = argparse.ArgumentParser(
        prog="caption_studio",
        description="Generate, edit, preview and export AI captions (SRT, WebVTT).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log library activity to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate captions or highlights for a media file.")
    gen.add_argument("input_file", help="Path to the video or audio file.")
    gen.add_argument(
        "--language",
        default=DEFAULT_TARGET_LANGUAGE,
        help="Target caption language, or 'original' to keep the spoken language "
             "(default: %(default)s).",
    )
    gen.add_argument(
        "--preset",
        choices=[p.value for p in StylePreset],
        default=StylePreset.STANDARD.value,
        help="Caption style preset (default: %(default)s).",
    )
    gen.add_argument(
        "--highlights",
        action="store_true",
        help="Find highlight clips instead of generating captions.",
    )
    gen.add_argument(
        "--formats",
        default=None,
        help="Comma-separated subtitle formats to export as well. "
             "Available: {}.".format(", ".join(sorted(FORMATTERS))),
    )
    _add_export_flags(gen)

    exp = sub.add_parser("export", help="Export a caption JSON file to SRT/VTT.")
    exp.add_argument("captions_file", help="Caption JSON file (from 'generate').")
    exp.add_argument(
        "--formats",
        default="srt",
        help="Comma-separated formats. Available: {}. Default: %(default)s.".format(
            ", ".join(sorted(FORMATTERS))
        ),
    )
    exp.add_argument(
        "--media-name",
        default=None,
        help="Media filename used to name the exports (default: derived from the JSON file).",
    )
    exp.add_argument("--stdout", action="store_true", help="Print instead of saving.")
    _add_export_flags(exp)

    edit = sub.add_parser("edit", help="Replace the text of one caption.")
    edit.add_argument("captions_file", help="Caption JSON file to update in place.")
    edit.add_argument("index", type=int, help="1-based caption number.")
    edit.add_argument("text", help="New caption text.")

    prev = sub.add_parser("preview", help="Show the overlay state at given times.")
    prev.add_argument("captions_file", help="Caption JSON file.")
    prev.add_argument(
        "--at",
        type=float,
        action="append",
        required=True,
        help="Playback time in seconds. Can be specified multiple times.",
    )
    prev.add_argument("--preset", choices=[p.value for p in StylePreset], default=None)
    prev.add_argument("--animation", choices=[a.value for a in Animation], default=None)
    prev.add_argument(
        "--highlights",
        default=None,
        help="Highlight JSON file; preview plays one clip and stops at its end.",
    )
    prev.add_argument(
        "--clip",
        type=int,
        default=1,
        help="1-based clip number in --highlights (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "generate":
            asyncio.run(_run_generate(args))
        elif args.command == "export":
            _run_export(args)
        elif args.command == "edit":
            _run_edit(args)
        elif args.command == "preview":
            _run_preview(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (CaptionStudioError, ValueError, OSError) as e:
        print("Error: {}".format(describe_error(e)), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
