"""
core/transcription/segmenter.py — Per-frame pitch stream → pitch intervals.

A two-state machine, SILENT and VOICED(midi), driven one PitchSample at a
time in timestamp order:

    SILENT    → VOICED(m)   in-band sample mapping to m; open at t
    VOICED(m) → VOICED(m')  m' != m; close {start, t, m}, open at t with m'
    VOICED(m) → SILENT      no frequency or out of band; close at t
    SILENT    → SILENT      nothing
    VOICED(m) → VOICED(m)   nothing; repeated pitches never close an interval

Silence never produces an interval of its own — the quantizer reads gaps
between intervals as silence.

The state lives in a TrackingState owned by one segmenter, which is owned
by one recording session.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from core.config import SegmenterConfig
from core.transcription.errors import OrderingViolation
from core.transcription.pitch import frequency_to_midi, is_in_voice_band
from core.transcription.types import PitchInterval, PitchSample, TrackingState

logger = logging.getLogger(__name__)


class NoteSegmenter:
    """Collapse a stream of PitchSamples into closed PitchIntervals.

    Usage:
        segmenter = NoteSegmenter()
        for sample in samples:
            interval = segmenter.push(sample)
            if interval is not None:
                intervals.append(interval)
        final = segmenter.flush()
    """

    def __init__(self, config: SegmenterConfig | None = None) -> None:
        self._config = config or SegmenterConfig()
        self._state = TrackingState()

    @property
    def state(self) -> TrackingState:
        """The live tracking state. Read it, don't write it."""
        return self._state

    def _midi_for(self, sample: PitchSample) -> int | None:
        if not is_in_voice_band(
            sample.frequency_hz,
            self._config.voice_band_low_hz,
            self._config.voice_band_high_hz,
        ):
            return None
        return frequency_to_midi(sample.frequency_hz)

    def _close(self, end: float) -> PitchInterval | None:
        state = self._state
        midi = state.current_midi
        start = state.interval_start
        state.current_midi = None
        if midi is None:
            return None
        if end <= start:
            logger.debug("Dropping zero-length interval for midi %d at %.6fs", midi, start)
            return None
        return PitchInterval(start=start, end=end, midi=midi)

    def push(self, sample: PitchSample) -> PitchInterval | None:
        """Advance the state machine by one sample.

        Returns:
            The interval closed by this sample, or None.

        Raises:
            OrderingViolation: The sample is earlier than the previous one.
                The state is left unchanged.
        """
        state = self._state
        t = sample.timestamp
        if state.last_timestamp is not None and t < state.last_timestamp:
            raise OrderingViolation(t, state.last_timestamp)
        state.last_timestamp = t

        midi = self._midi_for(sample)
        if midi == state.current_midi:
            return None

        closed = self._close(t)
        if midi is not None:
            state.current_midi = midi
            state.interval_start = t
        return closed

    def flush(self) -> PitchInterval | None:
        """Close any open interval at the last known timestamp.

        Called once at end of stream. The segmenter is SILENT afterwards.
        """
        if self._state.last_timestamp is None:
            return None
        return self._close(self._state.last_timestamp)


def segment(
    samples: Iterable[PitchSample],
    config: SegmenterConfig | None = None,
) -> list[PitchInterval]:
    """Run a fresh segmenter over a finished sample stream, flushing at the end."""
    segmenter = NoteSegmenter(config)
    intervals: list[PitchInterval] = []
    for sample in samples:
        interval = segmenter.push(sample)
        if interval is not None:
            intervals.append(interval)
    final = segmenter.flush()
    if final is not None:
        intervals.append(final)
    return intervals
