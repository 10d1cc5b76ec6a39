"""
core/transcription/frames.py — Slice a mono signal into AudioFrames.

Stands in for the capture collaborator when the audio is already in memory
(a loaded file, an uploaded sample array). A live capture delivers whole
fixed-size buffers, so a trailing partial frame is dropped.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

from core.transcription.types import AudioFrame

DEFAULT_FRAME_SIZE: int = 1024
"""Samples per frame. ~23 ms at 44.1 kHz."""


def iter_frames(
    y: np.ndarray,
    sample_rate: int,
    *,
    frame_size: int = DEFAULT_FRAME_SIZE,
    hop: int | None = None,
) -> Iterator[AudioFrame]:
    """Yield consecutive fixed-length frames with sample-clock timestamps.

    Args:
        y: Mono audio, shape [n_samples].
        sample_rate: Sampling rate in Hz.
        frame_size: Samples per frame.
        hop: Samples between frame starts. Defaults to frame_size
             (back-to-back buffers, no overlap).

    Yields:
        AudioFrame with ``timestamp = start_sample / sample_rate``.

    Raises:
        ValueError: Non-positive frame_size, hop or sample_rate, or y not 1-D.
    """
    if frame_size <= 0:
        raise ValueError(f"frame_size must be positive, got {frame_size}")
    step = frame_size if hop is None else hop
    if step <= 0:
        raise ValueError(f"hop must be positive, got {step}")
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")

    signal = np.asarray(y)
    if signal.ndim != 1:
        raise ValueError(f"Expected mono 1-D audio, got shape {signal.shape}")

    for start in range(0, len(signal) - frame_size + 1, step):
        yield AudioFrame(
            samples=signal[start : start + frame_size],
            sample_rate=sample_rate,
            timestamp=start / float(sample_rate),
        )
