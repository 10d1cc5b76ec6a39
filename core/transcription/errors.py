"""Exceptions raised by the transcription core.

Estimation anomalies (quiet frames, malformed frames, weak correlation) are
never raised — the estimator returns None for them. Only violations of the
integration contract surface as exceptions.
"""

from __future__ import annotations


class TranscriptionError(Exception):
    """Base class for transcription errors."""


class OrderingViolation(TranscriptionError):
    """A pitch sample arrived earlier than the last one processed."""

    def __init__(self, timestamp: float, last_timestamp: float) -> None:
        super().__init__(
            f"Pitch sample at {timestamp:.6f}s arrived after a sample at "
            f"{last_timestamp:.6f}s; samples must be in non-decreasing time order"
        )
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp


class SessionStateError(TranscriptionError):
    """A session lifecycle call was made in the wrong state."""
