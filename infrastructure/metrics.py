"""Prometheus metrics for the hum transcription service.

Exposes per-frame pipeline behaviour so dashboards show whether the
estimator keeps up with real time and how much of the input is voiced.

Metrics:
    hum_frames_total                  Counter by outcome (voiced/unvoiced/dropped)
    hum_frame_latency_seconds         Histogram of per-frame processing time
    hum_frame_budget_overruns_total   Frames that took longer than their own duration
    hum_sessions_total                Finished sessions by outcome (notes/empty)
    hum_notes_total                   Emitted notes by duration class

Usage::

    from infrastructure.metrics import (
        record_frame,
        record_session,
    )
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

frames_total = Counter(
    "hum_frames_total",
    "Audio frames handled by outcome",
    ["outcome"],
    registry=_REGISTRY,
)

frame_latency_seconds = Histogram(
    "hum_frame_latency_seconds",
    "Per-frame estimation + segmentation time in seconds",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1],
    registry=_REGISTRY,
)

frame_budget_overruns_total = Counter(
    "hum_frame_budget_overruns_total",
    "Frames whose processing took longer than the frame's real-time duration",
    registry=_REGISTRY,
)

sessions_total = Counter(
    "hum_sessions_total",
    "Finished transcription sessions by outcome",
    ["outcome"],
    registry=_REGISTRY,
)

notes_total = Counter(
    "hum_notes_total",
    "Transcribed notes by duration class",
    ["duration_class"],
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_frame(*, outcome: str, latency_seconds: float | None = None) -> None:
    """Record one handled frame.

    Args:
        outcome: One of "voiced", "unvoiced", "dropped".
        latency_seconds: Processing time; omitted for dropped frames.
    """
    frames_total.labels(outcome=outcome).inc()
    if latency_seconds is not None:
        frame_latency_seconds.observe(latency_seconds)


def record_budget_overruns(count: int = 1) -> None:
    """Increment the real-time budget overrun counter."""
    if count > 0:
        frame_budget_overruns_total.inc(count)


def record_session(*, duration_classes: list[str]) -> None:
    """Record a finished session and the notes it produced.

    Args:
        duration_classes: Duration class name of every emitted note.
    """
    sessions_total.labels(outcome="notes" if duration_classes else "empty").inc()
    for name in duration_classes:
        notes_total.labels(duration_class=name).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            session.on_frame(frame)
        record_frame(outcome="voiced", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
