"""
core/transcription/pitch.py — Frequency ↔ MIDI conversion and note naming.

Pure math, no state. 12-tone equal temperament with A4 = 440 Hz = MIDI 69;
no transposition, key signature or microtonal handling.
"""

from __future__ import annotations

import math

from core.transcription.types import PitchName

A4_HZ: float = 440.0
A4_MIDI: int = 69
SEMITONES_PER_OCTAVE: int = 12


def frequency_to_midi(hz: float | None) -> int | None:
    """Convert frequency in Hz to the nearest MIDI note number.

    Formula: midi = round(12 × log₂(hz / 440) + 69)

    Args:
        hz: Frequency in Hz.

    Returns:
        MIDI note number, unclamped. None if hz is None, ≤ 0 or not finite.
    """
    if hz is None or not math.isfinite(hz) or hz <= 0.0:
        return None
    return round(SEMITONES_PER_OCTAVE * math.log2(hz / A4_HZ) + A4_MIDI)


def midi_to_frequency(midi: int) -> float:
    """Inverse of the MIDI formula: 440 × 2^((midi − 69) / 12)."""
    return A4_HZ * 2.0 ** ((midi - A4_MIDI) / SEMITONES_PER_OCTAVE)


def midi_to_name(midi: int) -> PitchName:
    """Convert a MIDI note number to scientific pitch notation.

    Examples:
        69 → A4
        60 → C4
        61 → C#4
        21 → A0
    """
    return PitchName.from_midi(midi)


def is_in_voice_band(hz: float | None, low_hz: float, high_hz: float) -> bool:
    """True when ``low_hz < hz < high_hz``. Bounds are exclusive."""
    if hz is None or not math.isfinite(hz):
        return False
    return low_hz < hz < high_hz
