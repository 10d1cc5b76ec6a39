"""
core/transcription/quantizer.py — Pitch intervals → quantized note events.

Two passes:
    1. merge_intervals() joins consecutive same-pitch intervals separated
       by at most ``merge_gap_ms`` of silence. This absorbs brief detector
       dropouts inside a sustained note without merging across real rests
       or pitch changes. Gap time does not count toward the duration.
    2. classify_duration() buckets each merged duration:
           < 350 ms          → EIGHTH
           350 ms … 1200 ms  → QUARTER (both ends inclusive)
           > 1200 ms         → HALF

The thresholds are fixed, not tempo-adaptive.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.config import QuantizerConfig
from core.transcription.types import DurationClass, NoteEvent, PitchInterval

_DEFAULT_QUANTIZER = QuantizerConfig()

# Millisecond values are rounded to this many decimals before comparison so
# binary float noise (0.35 s → 349.99999999999994 ms) cannot cross a boundary.
_MS_DECIMALS = 6


def _to_ms(seconds: float) -> float:
    return round(seconds * 1000.0, _MS_DECIMALS)


@dataclass(frozen=True)
class MergedNote:
    """One logical note built from one or more same-pitch intervals."""

    midi: int
    start: float
    end: float
    duration_ms: float
    """Sum of the member intervals' durations, gaps excluded."""

    interval_count: int = 1


def merge_intervals(
    intervals: Sequence[PitchInterval],
    gap_tolerance_ms: float = _DEFAULT_QUANTIZER.merge_gap_ms,
) -> list[MergedNote]:
    """Merge consecutive same-pitch intervals across short gaps.

    Args:
        intervals: Intervals in temporal order.
        gap_tolerance_ms: Largest gap (inclusive) that is bridged.

    Returns:
        Merged notes in the same order. Empty for empty input.
    """
    merged: list[MergedNote] = []
    for interval in intervals:
        if merged:
            last = merged[-1]
            gap_ms = _to_ms(interval.start - last.end)
            if interval.midi == last.midi and gap_ms <= gap_tolerance_ms:
                merged[-1] = MergedNote(
                    midi=last.midi,
                    start=last.start,
                    end=interval.end,
                    duration_ms=_to_ms(last.duration_ms / 1000.0 + interval.duration_sec),
                    interval_count=last.interval_count + 1,
                )
                continue
        merged.append(
            MergedNote(
                midi=interval.midi,
                start=interval.start,
                end=interval.end,
                duration_ms=_to_ms(interval.duration_sec),
            )
        )
    return merged


def classify_duration(
    duration_ms: float,
    config: QuantizerConfig = _DEFAULT_QUANTIZER,
) -> DurationClass:
    """Map a duration in milliseconds to its duration class."""
    if duration_ms < config.eighth_below_ms:
        return DurationClass.EIGHTH
    if duration_ms > config.half_above_ms:
        return DurationClass.HALF
    return DurationClass.QUARTER


def quantize(
    intervals: Sequence[PitchInterval],
    config: QuantizerConfig = _DEFAULT_QUANTIZER,
) -> list[NoteEvent]:
    """Merge intervals and quantize each merged note.

    Returns:
        NoteEvents in input temporal order. An empty input is a valid,
        empty result.
    """
    return [
        NoteEvent(
            midi=note.midi,
            duration_class=classify_duration(note.duration_ms, config),
            duration_ms=note.duration_ms,
        )
        for note in merge_intervals(intervals, config.merge_gap_ms)
    ]
