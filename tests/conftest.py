"""
Shared fixtures for the test suite.

Centralizes synthetic-signal builders and the API client override so
individual test files don't repeat them.
"""

from __future__ import annotations

import numpy as np
import pytest
from fastapi.testclient import TestClient

from api.deps import get_transcriber
from api.main import app
from core.config import DEFAULT_CONFIG
from core.transcription.pitch import midi_to_frequency
from core.transcription.types import AudioFrame, PitchSample
from ingestion.transcriber import HumTranscriber

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SR: int = 44100
"""Sample rate used by synthetic signals."""

AMPLITUDE: float = 0.9
"""Sine amplitude. With the default stride of 2 a sine peaks near A²/4 ≈ 0.2,
above the 0.15 confidence threshold."""


# ---------------------------------------------------------------------------
# Signal builders
# ---------------------------------------------------------------------------


def sine(hz: float, n_samples: int, *, sr: int = SR, amplitude: float = AMPLITUDE) -> np.ndarray:
    """Return ``n_samples`` of a sine wave at ``hz``."""
    t = np.arange(n_samples) / sr
    return (amplitude * np.sin(2.0 * np.pi * hz * t)).astype(np.float32)


def sine_frame(hz: float, n_samples: int = 2048, *, sr: int = SR, **kwargs) -> AudioFrame:
    """Return one AudioFrame holding a sine wave."""
    return AudioFrame(samples=sine(hz, n_samples, sr=sr, **kwargs), sample_rate=sr)


def melody(notes: list[tuple[int | None, float]], *, sr: int = SR) -> np.ndarray:
    """Concatenate (midi-or-None, seconds) segments; None is silence."""
    parts = []
    for midi, seconds in notes:
        n = int(round(seconds * sr))
        if midi is None:
            parts.append(np.zeros(n, dtype=np.float32))
        else:
            parts.append(sine(midi_to_frequency(midi), n, sr=sr))
    return np.concatenate(parts) if parts else np.zeros(0, dtype=np.float32)


def midi_sample(timestamp: float, midi: int | None) -> PitchSample:
    """PitchSample at the exact frequency of ``midi`` (None → silence)."""
    hz = None if midi is None else midi_to_frequency(midi)
    return PitchSample(timestamp=timestamp, frequency_hz=hz)


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def api_client():
    """FastAPI ``TestClient`` with the transcriber pinned to DEFAULT_CONFIG.

    Keeps HUM_* variables in the developer's environment out of API tests.
    """
    app.dependency_overrides[get_transcriber] = lambda: HumTranscriber(DEFAULT_CONFIG)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
