"""
ingestion/transcriber.py — Offline orchestrator: recording → notes.

HumTranscriber wires the pipeline for audio that is already recorded:

    audio file
        │
        ├─ load_audio()             [ingestion/audio_loader.py — I/O boundary]
        │       ↓
        ├─ iter_frames()            [core/transcription/frames.py — fixed buffers]
        │       ↓
        ├─ TranscriptionSession     [core/transcription/session.py]
        │     on_frame() per buffer, finalize() at the end
        │       ↓
        └─ TranscriptionResult      notes + intervals + counters

Each call runs its own session, so concurrent requests never share
tracking state. Metrics are recorded here rather than in core/, which
stays free of infrastructure imports.

Usage:
    transcriber = HumTranscriber()
    result = transcriber.transcribe_file("/path/to/hum.wav")
    for note in result.notes:
        print(midi_to_name(note.midi), note.duration_class.name)
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from core.config import DEFAULT_CONFIG, TranscriptionConfig
from core.transcription.frames import DEFAULT_FRAME_SIZE, iter_frames
from core.transcription.session import TranscriptionSession
from core.transcription.types import TranscriptionResult
from infrastructure.metrics import (
    LatencyTimer,
    record_budget_overruns,
    record_frame,
    record_session,
)
from ingestion.audio_loader import DEFAULT_DURATION, load_audio

logger = logging.getLogger(__name__)


class HumTranscriber:
    """Transcribe in-memory or on-disk recordings with one session per call.

    Args:
        config: Pipeline thresholds shared by every call.
        frame_size: Samples per frame fed to the session.
    """

    def __init__(
        self,
        config: TranscriptionConfig = DEFAULT_CONFIG,
        *,
        frame_size: int = DEFAULT_FRAME_SIZE,
    ) -> None:
        if frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {frame_size}")
        self._config = config
        self._frame_size = frame_size

    def transcribe_samples(
        self,
        y: np.ndarray,
        sr: int,
        *,
        frame_size: int | None = None,
    ) -> TranscriptionResult:
        """Run a full session over a mono signal.

        Args:
            y: Mono samples.
            sr: Sample rate in Hz.
            frame_size: Override the transcriber's frame size for this call.

        Returns:
            TranscriptionResult. Empty notes when nothing was voiced or the
            signal is shorter than one frame.

        Raises:
            ValueError: Invalid sample rate, frame size or non-mono input.
        """
        size = frame_size or self._frame_size

        with LatencyTimer() as timer:
            session = TranscriptionSession(self._config, observer=record_frame)
            session.start()
            for frame in iter_frames(y, sr, frame_size=size):
                session.on_frame(frame)
            notes = session.finalize()

        record_budget_overruns(session.stats.budget_overruns)
        record_session(duration_classes=[n.duration_class.name for n in notes])

        elapsed_ms = timer.elapsed * 1000.0
        logger.info(
            "Transcribed %.2fs of audio into %d notes in %.1f ms",
            len(y) / float(sr),
            len(notes),
            elapsed_ms,
        )
        return TranscriptionResult(
            notes=tuple(notes),
            intervals=session.intervals,
            frame_count=session.stats.frames,
            voiced_frame_count=session.stats.voiced_frames,
            duration_sec=len(y) / float(sr),
            processing_time_ms=elapsed_ms,
        )

    def transcribe_file(
        self,
        path: str | Path,
        *,
        duration: float | None = DEFAULT_DURATION,
    ) -> TranscriptionResult:
        """Load a recording and transcribe it.

        Raises:
            FileNotFoundError: File does not exist.
            ValueError: Unsupported format.
            RuntimeError: Decoding failed.
        """
        y, sr = load_audio(path, duration=duration)
        return self.transcribe_samples(y, sr)
