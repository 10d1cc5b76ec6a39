"""
core/transcription — Monophonic hum/sing → note transcription core.

Pipeline, leaf first:
    estimator   one audio frame → fundamental frequency (or None)
    pitch       frequency ↔ MIDI number ↔ note name
    segmenter   per-frame pitch stream → closed pitch intervals
    quantizer   intervals → merged, duration-classed note events
    session     start / on_frame / stop / finalize for one recording

All modules are pure computation: no file I/O, no blocking. File loading
lives in ingestion/audio_loader.py.

Public API:
    Types:      AudioFrame, PitchSample, PitchInterval, NoteEvent,
                DurationClass, PitchName, TrackingState, TranscriptionResult
    Errors:     TranscriptionError, OrderingViolation, SessionStateError
    Session:    TranscriptionSession
"""

from core.transcription.errors import OrderingViolation, SessionStateError, TranscriptionError
from core.transcription.session import TranscriptionSession
from core.transcription.types import (
    AudioFrame,
    DurationClass,
    NoteEvent,
    PitchInterval,
    PitchName,
    PitchSample,
    TrackingState,
    TranscriptionResult,
)

__all__ = [
    "AudioFrame",
    "DurationClass",
    "NoteEvent",
    "OrderingViolation",
    "PitchInterval",
    "PitchName",
    "PitchSample",
    "SessionStateError",
    "TrackingState",
    "TranscriptionError",
    "TranscriptionResult",
    "TranscriptionSession",
]
