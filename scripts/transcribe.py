#!/usr/bin/env python
"""Transcribe a hummed or sung recording into notes.

Usage
-----
    # Print one note per line
    python scripts/transcribe.py hum.wav

    # Only the first 10 seconds, 2048-sample frames, full correlation sum
    python scripts/transcribe.py hum.wav --duration 10 --frame-size 2048 --precise

    # Machine-readable output
    python scripts/transcribe.py hum.wav --json

Thresholds are read from HUM_* environment variables (see
ingestion/settings.py) and a local .env file.

Exit codes
----------
    0  — success (including an empty transcription)
    1  — the file could not be loaded or decoded
    2  — invalid configuration or arguments
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_CONFIG, PRECISE_CONFIG  # noqa: E402
from core.transcription.pitch import midi_to_name  # noqa: E402
from core.transcription.types import TranscriptionResult  # noqa: E402
from ingestion.settings import load_frame_size, load_transcription_config  # noqa: E402
from ingestion.transcriber import HumTranscriber  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Transcribe a monophonic hum into notes")
    p.add_argument("audio", type=Path, help="Path to the recording")
    p.add_argument(
        "--duration",
        type=float,
        default=60.0,
        help="Maximum seconds to load (default: 60)",
    )
    p.add_argument(
        "--frame-size",
        type=int,
        default=None,
        help="Samples per frame (default: HUM_FRAME_SIZE or 1024)",
    )
    p.add_argument(
        "--precise",
        action="store_true",
        help="Full correlation sum (stride 1) instead of every other product",
    )
    p.add_argument("--json", action="store_true", help="Print the result as JSON")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def result_to_dict(result: TranscriptionResult) -> dict:
    return {
        "notes": [
            {
                "midi": n.midi,
                "name": str(midi_to_name(n.midi)),
                "duration_class": n.duration_class.name,
                "duration_ms": round(n.duration_ms, 3),
            }
            for n in result.notes
        ],
        "frame_count": result.frame_count,
        "voiced_frame_count": result.voiced_frame_count,
        "duration_sec": round(result.duration_sec, 3),
        "processing_time_ms": round(result.processing_time_ms, 2),
    }


def render_text(result: TranscriptionResult) -> str:
    if not result.notes:
        return "No notes detected."
    lines = [
        f"{i:>3}  {str(midi_to_name(n.midi)):<4} {n.duration_class.name:<8} "
        f"{n.duration_ms:8.1f} ms"
        for i, n in enumerate(result.notes, start=1)
    ]
    lines.append(
        f"{len(result.notes)} notes from {result.frame_count} frames "
        f"({result.voiced_frame_count} voiced), {result.duration_sec:.2f}s of audio"
    )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_transcription_config(
            base=PRECISE_CONFIG if args.precise else DEFAULT_CONFIG
        )
        frame_size = args.frame_size or load_frame_size()
        transcriber = HumTranscriber(config, frame_size=frame_size)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    try:
        result = transcriber.transcribe_file(args.audio, duration=args.duration)
    except (FileNotFoundError, ValueError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1

    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print(render_text(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
