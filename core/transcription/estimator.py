"""
core/transcription/estimator.py — Fundamental frequency of one audio frame.

Normalized time-domain autocorrelation over a bounded lag range. The energy
gate and the correlation-confidence gate together make the voiced/unvoiced
decision; there is no separate voice classifier.

Scan:
    1. Reject malformed frames and frames below the silence energy.
    2. For each lag in [min_lag, max_lag], correlate the frame with itself
       shifted by lag: every ``stride``-th product is summed and the sum
       is divided by the overlap length.
    3. Candidates are local maxima of the correlation curve, which keeps the
       lobe around zero lag out of the running.
    4. Stop early once an established peak has been followed by a sharp
       drop. For voiced input the true period is the first strong peak, so
       this only trims work.
    5. Among peaks close to the best one, the shortest lag wins.

Usage:
    from core.transcription.estimator import estimate_frequency
    hz = estimate_frequency(frame)  # float or None
"""

from __future__ import annotations

import logging

import numpy as np

from core.config import EstimatorConfig
from core.transcription.types import AudioFrame

logger = logging.getLogger(__name__)

_DEFAULT_ESTIMATOR = EstimatorConfig()


def lag_range(sample_rate: int, frame_length: int, config: EstimatorConfig) -> tuple[int, int]:
    """Return the inclusive ``(min_lag, max_lag)`` scanned for a frame.

    ``min_lag`` bounds the highest detectable frequency, ``max_lag`` the
    lowest; ``max_lag`` never exceeds half the frame length. The range is
    empty when ``min_lag > max_lag``.
    """
    min_lag = max(2, int(sample_rate // config.max_frequency_hz))
    max_lag = min(int(sample_rate // config.min_frequency_hz), frame_length // 2)
    return min_lag, max_lag


def _correlation(x: np.ndarray, lag: int, stride: int) -> float:
    """Sum of ``x[i] * x[i + lag]`` over every ``stride``-th overlapping i,
    divided by the full overlap length ``len(x) - lag``.

    With ``stride=2`` only half the overlap is summed, so a pure sine of
    amplitude A peaks near A²/4 rather than A²/2.
    """
    overlap = len(x) - lag
    head = x[0:overlap:stride]
    tail = x[lag : lag + overlap : stride]
    return float(np.dot(head, tail)) / overlap


def _is_malformed(frame: AudioFrame, config: EstimatorConfig) -> str | None:
    """Return a reason string if the frame cannot be analysed, else None."""
    samples = frame.samples
    if frame.sample_rate <= 0:
        return f"non-positive sample rate {frame.sample_rate}"
    if samples.ndim != 1:
        return f"expected 1-D samples, got shape {samples.shape}"
    if samples.size == 0:
        return "empty frame"
    if config.frame_size is not None and samples.size != config.frame_size:
        return f"expected {config.frame_size} samples, got {samples.size}"
    if not np.all(np.isfinite(samples)):
        return "non-finite samples"
    return None


def estimate_frequency(
    frame: AudioFrame,
    config: EstimatorConfig = _DEFAULT_ESTIMATOR,
) -> float | None:
    """Estimate the fundamental frequency of one frame.

    Args:
        frame: Mono audio frame.
        config: Estimator thresholds.

    Returns:
        Frequency in Hz, or None when the frame is malformed, silent,
        unpitched, or too short to contain a single lag.
    """
    reason = _is_malformed(frame, config)
    if reason is not None:
        logger.debug("Rejecting malformed frame: %s", reason)
        return None

    x = frame.samples
    energy = float(np.dot(x, x))
    if energy < config.silence_energy:
        return None

    min_lag, max_lag = lag_range(frame.sample_rate, len(x), config)
    if min_lag > max_lag:
        logger.debug("Frame of %d samples too short for lag %d", len(x), min_lag)
        return None

    # curve[0] is the lag just below the range, so min_lag can be a peak.
    curve: list[float] = [_correlation(x, min_lag - 1, config.stride)]
    running_max = 0.0
    for lag in range(min_lag, max_lag + 1):
        corr = _correlation(x, lag, config.stride)
        if curve[-1] > corr and len(curve) > 1 and curve[-1] > curve[-2]:
            running_max = max(running_max, curve[-1])
        curve.append(corr)
        if running_max > config.established_correlation and corr < running_max * config.drop_ratio:
            break

    peaks = _find_peaks(curve, min_lag - 1)
    if not peaks:
        return None

    best_corr = max(corr for _, corr in peaks)
    if best_corr < config.confidence_threshold:
        return None

    floor = best_corr * config.octave_tolerance
    best_lag = next(lag for lag, corr in peaks if corr >= floor)
    return frame.sample_rate / best_lag


def _find_peaks(curve: list[float], first_lag: int) -> list[tuple[int, float]]:
    """Local maxima of the correlation curve as ``(lag, corr)`` pairs.

    A peak is higher than its left neighbour and not lower than its right
    one. The last scanned lag counts when the curve is still rising there.
    """
    peaks: list[tuple[int, float]] = []
    last = len(curve) - 1
    for i in range(1, len(curve)):
        if curve[i] <= curve[i - 1]:
            continue
        if i < last and curve[i] < curve[i + 1]:
            continue
        if curve[i] > 0.0:
            peaks.append((first_lag + i, curve[i]))
    return peaks
