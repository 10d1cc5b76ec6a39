"""
core/transcription/types.py — Data types for the hum transcription pipeline.

Value types are frozen dataclasses — immutable objects that can be safely
handed from one pipeline stage to the next and on to collaborators.
TrackingState is the one deliberately mutable type: it belongs to a single
recording session and only the note segmenter writes to it.

Design principles:
    - No I/O, no side effects.
    - "No pitch" is ``None``, never a numeric sentinel.
    - PitchInterval enforces ``end > start`` and NoteEvent ``duration_ms > 0``
      at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from core.transcription.errors import TranscriptionError

_NOTE_LETTERS: tuple[tuple[str, bool], ...] = (
    ("C", False),
    ("C", True),
    ("D", False),
    ("D", True),
    ("E", False),
    ("F", False),
    ("F", True),
    ("G", False),
    ("G", True),
    ("A", False),
    ("A", True),
    ("B", False),
)


class DurationClass(str, Enum):
    """Coarse note durations. Values are the note-value denominators."""

    EIGHTH = "8"
    QUARTER = "4"
    HALF = "2"


@dataclass(frozen=True, eq=False)
class AudioFrame:
    """One fixed-length buffer of mono audio.

    The samples are copied into a read-only float64 array on construction,
    so a frame cannot change after capture.
    """

    samples: np.ndarray
    """1-D array of samples, nominally in [-1, 1]."""

    sample_rate: int
    """Sampling rate in Hz."""

    timestamp: float | None = None
    """Capture time of the first sample in seconds, if the audio subsystem
    reports one. Sessions fall back to a sample clock when None."""

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float64)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    @property
    def duration_sec(self) -> float:
        """Real-time length of the frame in seconds (0.0 if sample_rate <= 0)."""
        if self.sample_rate <= 0:
            return 0.0
        return len(self.samples) / float(self.sample_rate)


@dataclass(frozen=True)
class PitchSample:
    """One frame's pitch estimate, stamped with its capture time."""

    timestamp: float
    frequency_hz: float | None = None

    @property
    def is_voiced(self) -> bool:
        return self.frequency_hz is not None


@dataclass(frozen=True)
class PitchInterval:
    """A span of constant detected pitch.

    Invariants:
        end > start
    """

    start: float
    end: float
    midi: int

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise TranscriptionError(
                f"PitchInterval end ({self.end}) must be greater than start ({self.start})"
            )

    @property
    def duration_sec(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class PitchName:
    """Scientific pitch notation split into its parts, e.g. C#4."""

    letter: str
    sharp: bool
    octave: int

    @classmethod
    def from_midi(cls, midi: int) -> PitchName:
        """Name a MIDI number using sharps. Octave is ``midi // 12 - 1``."""
        letter, sharp = _NOTE_LETTERS[midi % 12]
        return cls(letter=letter, sharp=sharp, octave=midi // 12 - 1)

    def __str__(self) -> str:
        return f"{self.letter}{'#' if self.sharp else ''}{self.octave}"


@dataclass(frozen=True)
class NoteEvent:
    """A final transcribed note: pitch plus coarse duration.

    Invariants:
        duration_ms > 0
    """

    midi: int
    """MIDI note number. A4 = 69, C4 = 60."""

    duration_class: DurationClass
    """Quantized duration bucket."""

    duration_ms: float
    """Measured duration that was quantized, in milliseconds (gaps excluded)."""

    def __post_init__(self) -> None:
        if not self.duration_ms > 0.0:
            raise TranscriptionError(
                f"NoteEvent duration_ms must be positive, got {self.duration_ms}"
            )


@dataclass
class TrackingState:
    """Mutable segmentation state for one recording session.

    ``current_midi`` is None while silent. ``interval_start`` is only
    meaningful while voiced.
    """

    current_midi: int | None = None
    interval_start: float = 0.0
    last_timestamp: float | None = None

    @property
    def is_voiced(self) -> bool:
        return self.current_midi is not None


@dataclass(frozen=True)
class TranscriptionResult:
    """Everything a finished transcription produced.

    Attributes:
        notes:              Quantized notes in temporal order.
        intervals:          Raw pitch intervals the notes were merged from.
        frame_count:        Frames fed to the session.
        voiced_frame_count: Frames for which a frequency was estimated.
        duration_sec:       Length of the audio that was processed.
        processing_time_ms: Wall-clock time for the whole run.
    """

    notes: tuple[NoteEvent, ...] = field(default_factory=tuple)
    intervals: tuple[PitchInterval, ...] = field(default_factory=tuple)
    frame_count: int = 0
    voiced_frame_count: int = 0
    duration_sec: float = 0.0
    processing_time_ms: float = 0.0
