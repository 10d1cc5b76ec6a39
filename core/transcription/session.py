"""
core/transcription/session.py — One recording session, frame in → notes out.

TranscriptionSession is the boundary the audio and session-control
collaborators talk to:

    session = TranscriptionSession()
    session.start()
    for frame in capture:          # audio thread, synchronous per buffer
        session.on_frame(frame)
    notes = session.finalize()     # control thread; stops and quantizes

Lifecycle:
    IDLE ──start()──▶ RECORDING ──stop()──▶ STOPPED

The session exclusively owns its segmenter (and TrackingState) and the
accumulated intervals. All of it is guarded by one lock, so ``on_frame``
on a real-time thread and ``stop`` on a control thread hand off cleanly:
once ``stop`` returns, the open interval has been flushed and every later
frame is dropped. Frames delivered outside RECORDING are dropped, not
errors; the audio subsystem may still have buffers in flight.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from core.config import DEFAULT_CONFIG, TranscriptionConfig
from core.transcription.errors import SessionStateError
from core.transcription.estimator import estimate_frequency
from core.transcription.quantizer import quantize
from core.transcription.segmenter import NoteSegmenter
from core.transcription.types import AudioFrame, NoteEvent, PitchInterval, PitchSample

logger = logging.getLogger(__name__)

FrameObserver = Callable[..., None]
"""Called as ``observer(outcome=..., latency_seconds=...)`` after every frame."""


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


@dataclass
class SessionStats:
    """Running counters for one session."""

    frames: int = 0
    voiced_frames: int = 0
    dropped_frames: int = 0
    budget_overruns: int = 0
    processed_until: float = 0.0
    """End time of the most recent processed frame, in seconds."""


class TranscriptionSession:
    """Drive estimator → pitch mapper → segmenter per frame; quantize at the end.

    Args:
        config: Pipeline thresholds. Defaults to DEFAULT_CONFIG.
        observer: Optional per-frame callback, e.g. a metrics recorder.
            Receives ``outcome`` ("voiced", "unvoiced", "dropped") and
            ``latency_seconds`` (None for dropped frames).
    """

    def __init__(
        self,
        config: TranscriptionConfig = DEFAULT_CONFIG,
        *,
        observer: FrameObserver | None = None,
    ) -> None:
        self._config = config
        self._observer = observer
        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._segmenter = NoteSegmenter(config.segmenter)
        self._intervals: list[PitchInterval] = []
        self._clock = 0.0
        self.stats = SessionStats()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def intervals(self) -> tuple[PitchInterval, ...]:
        """Intervals closed so far, in temporal order."""
        with self._lock:
            return tuple(self._intervals)

    def start(self) -> None:
        """Begin accepting frames.

        Raises:
            SessionStateError: The session was already started.
        """
        with self._lock:
            if self._state is not SessionState.IDLE:
                raise SessionStateError(f"Cannot start a session that is {self._state.value}")
            self._state = SessionState.RECORDING
        logger.info("Transcription session started")

    def on_frame(self, frame: AudioFrame) -> None:
        """Process one captured frame synchronously.

        The frame's own timestamp is used when present; otherwise the
        session advances a sample clock by each frame's duration.

        Raises:
            OrderingViolation: The frame is timestamped earlier than the
                previous one.
        """
        with self._lock:
            if self._state is not SessionState.RECORDING:
                self.stats.dropped_frames += 1
                logger.debug("Dropping frame delivered while %s", self._state.value)
                self._notify("dropped", None)
                return

            started = time.perf_counter()
            timestamp = frame.timestamp if frame.timestamp is not None else self._clock
            sample = PitchSample(
                timestamp=timestamp,
                frequency_hz=estimate_frequency(frame, self._config.estimator),
            )
            interval = self._segmenter.push(sample)
            if interval is not None:
                self._intervals.append(interval)

            self._clock = timestamp + frame.duration_sec
            self.stats.frames += 1
            self.stats.processed_until = self._clock
            if sample.is_voiced:
                self.stats.voiced_frames += 1

            elapsed = time.perf_counter() - started
            if elapsed > frame.duration_sec > 0.0:
                self.stats.budget_overruns += 1
                logger.warning(
                    "Frame at %.3fs took %.2f ms, over its %.2f ms real-time budget",
                    timestamp,
                    elapsed * 1000.0,
                    frame.duration_sec * 1000.0,
                )
            self._notify("voiced" if sample.is_voiced else "unvoiced", elapsed)

    def stop(self) -> None:
        """Stop accepting frames and flush the open interval.

        Raises:
            SessionStateError: The session is not recording.
        """
        with self._lock:
            if self._state is not SessionState.RECORDING:
                raise SessionStateError(f"Cannot stop a session that is {self._state.value}")
            self._stop_locked()

    def _stop_locked(self) -> None:
        self._state = SessionState.STOPPED
        final = self._segmenter.flush()
        if final is not None:
            self._intervals.append(final)
        logger.info(
            "Transcription session stopped: %d frames, %d voiced, %d intervals",
            self.stats.frames,
            self.stats.voiced_frames,
            len(self._intervals),
        )

    def finalize(self) -> list[NoteEvent]:
        """Stop if still recording, then quantize the accumulated intervals.

        Returns:
            Notes in temporal order. Empty when nothing was voiced.

        Raises:
            SessionStateError: The session was never started.
        """
        with self._lock:
            if self._state is SessionState.IDLE:
                raise SessionStateError("Cannot finalize a session that was never started")
            if self._state is SessionState.RECORDING:
                self._stop_locked()
            intervals = tuple(self._intervals)
        notes = quantize(intervals, self._config.quantizer)
        logger.info("Transcribed %d notes", len(notes))
        return notes

    def _notify(self, outcome: str, latency_seconds: float | None) -> None:
        if self._observer is not None:
            self._observer(outcome=outcome, latency_seconds=latency_seconds)
