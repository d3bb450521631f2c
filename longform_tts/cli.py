"""CLI interface with subcommand routing."""

import argparse
import asyncio
import dataclasses
import logging
import os
import shutil
import sys
import time

from longform_tts.config import DispatchConfig, api_key_from_env
from longform_tts.constants import DEFAULT_OUTPUT, DEFAULT_VOICE, VERSION
from longform_tts.errors import SpeechError, friendly_message
from longform_tts.exporter import export, output_format
from longform_tts.gemini import GeminiSpeechClient
from longform_tts.governor import RateGovernor
from longform_tts.segmenter import segment_text
from longform_tts.speech import synthesize_speech
from longform_tts.voices import list_selectors, resolve_voice


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required for MP3 export but was not found.", file=sys.stderr)
        print("Install it or write a .wav file instead.", file=sys.stderr)
        raise SystemExit(1)


def _read_text(file_path: str) -> str:
    """Read the input text file, exiting on missing or empty files."""
    if not os.path.exists(file_path):
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)

    with open(file_path, encoding="utf-8") as f:
        text = f.read()

    if not text.strip():
        print(f"Error: File is empty: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    return text


def _build_config(args) -> DispatchConfig:
    """Environment config with command-line overrides applied."""
    overrides = {}
    if getattr(args, "max_length", None) is not None:
        overrides["max_segment_length"] = args.max_length
    if getattr(args, "concurrency", None) is not None:
        overrides["concurrency"] = args.concurrency
    if getattr(args, "timeout", None) is not None:
        overrides["job_timeout"] = args.timeout
    try:
        return dataclasses.replace(DispatchConfig.from_env(), **overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)


class _ProgressPrinter:
    """Prints whole-percent progress steps once each."""

    def __init__(self):
        self.last = -1

    def __call__(self, percent: float) -> None:
        step = int(percent)
        if step > self.last:
            self.last = step
            print(f"  Progress: {step}%")


def cmd_speak(args):
    """Synthesize a text file into an audio file."""
    text = _read_text(args.file)

    try:
        profile = resolve_voice(args.voice)
        fmt = output_format(args.output)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    if fmt == "mp3":
        _check_ffmpeg()

    api_key = api_key_from_env()
    if not api_key:
        print("Error: GEMINI_API_KEY environment variable not set.", file=sys.stderr)
        raise SystemExit(1)

    config = _build_config(args)
    client = GeminiSpeechClient(api_key=api_key, model=config.model)
    governor = RateGovernor.from_config(config)

    print(f"Synthesizing {len(text)} characters with voice {args.voice}...")
    started = time.monotonic()
    try:
        wav = asyncio.run(
            synthesize_speech(
                text, profile, client,
                governor=governor, config=config, on_progress=_ProgressPrinter(),
            )
        )
    except SpeechError as e:
        logging.getLogger(__name__).debug("Synthesis failed", exc_info=True)
        print(f"Error: {friendly_message(e)}", file=sys.stderr)
        raise SystemExit(1)

    output_path = export(wav, args.output)
    print(f"Done: {output_path} ({time.monotonic() - started:.1f}s)")


def cmd_split(args):
    """Show the segments a text file would be dispatched as."""
    text = _read_text(args.file)
    config = _build_config(args)
    segments = segment_text(text, config.max_segment_length)
    print(f"{len(segments)} segments (max {config.max_segment_length} chars):")
    for seg in segments:
        preview = seg.text.replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        print(f"  [{seg.index:03d}] {len(seg.text):5d}  {preview}")


def cmd_voices(args):
    """List available voices."""
    voices = list_selectors(args.filter)
    if not voices:
        print("No matching voices found.")
        return
    print("Available voices:")
    for name, description in voices:
        print(f"  {name:<16} {description}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="longform-tts",
        description="Longform TTS: turn long texts into speech with Gemini",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # speak
    speak_parser = subparsers.add_parser("speak", help="Synthesize a text file")
    speak_parser.add_argument("file", help="Path to the text file")
    speak_parser.add_argument("--voice", default=DEFAULT_VOICE, help="Voice name or preset")
    speak_parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="Output .wav or .mp3 path")
    speak_parser.add_argument("--max-length", type=int, help="Maximum characters per segment")
    speak_parser.add_argument("--concurrency", type=int, help="Segments synthesized at once")
    speak_parser.add_argument("--timeout", type=float, help="Give up after this many seconds")
    speak_parser.set_defaults(func=cmd_speak)

    # split
    split_parser = subparsers.add_parser("split", help="Preview segmentation of a text file")
    split_parser.add_argument("file", help="Path to the text file")
    split_parser.add_argument("--max-length", type=int, help="Maximum characters per segment")
    split_parser.set_defaults(func=cmd_split)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by substring")
    voices_parser.set_defaults(func=cmd_voices)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
