"""
ingestion/audio_loader.py — File I/O boundary for recorded hums.

This is the ONLY module in the transcription pipeline that reads files from
disk. Everything downstream (core/transcription/*) takes a pre-loaded
(y, sr) pair, sliced into AudioFrames.

Usage:
    from ingestion.audio_loader import load_audio
    y, sr = load_audio("/path/to/hum.wav", duration=20.0)
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

# Supported audio file extensions (must be loadable by librosa / soundfile)
AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".wav", ".flac", ".aiff", ".aif", ".ogg", ".m4a", ".opus", ".webm"}
)

# Hummed phrases are short; cap the load so a wrong file can't exhaust memory.
DEFAULT_DURATION: float = 60.0


def load_audio(
    path: str | Path,
    *,
    duration: float | None = DEFAULT_DURATION,
    sr: int | None = None,
) -> tuple[np.ndarray, int]:
    """Load a recording as mono float32 and return (y, sr).

    Args:
        path: Path to an audio file (wav, mp3, flac, aiff, ogg, m4a, opus, webm).
        duration: Maximum seconds to load. None loads the whole file.
        sr: Target sample rate in Hz. None keeps the native rate, which the
            estimator handles directly.

    Returns:
        (y, sr) — mono float32 samples and the sample rate as a Python int.

    Raises:
        FileNotFoundError: File does not exist at the given path.
        ValueError: File extension is not a supported audio format.
        RuntimeError: The file could not be decoded.
    """
    import librosa  # deferred to allow testing without audio backend

    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    if file_path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValueError(
            f"Unsupported audio format {file_path.suffix!r}. "
            f"Supported: {sorted(AUDIO_EXTENSIONS)}"
        )

    try:
        y, loaded_sr = librosa.load(file_path, sr=sr, mono=True, duration=duration)
    except Exception as exc:
        raise RuntimeError(
            f"Failed to decode audio file {file_path.name!r}: {exc}"
        ) from exc

    logger.debug("Loaded %s: %d samples at %d Hz", file_path.name, len(y), int(loaded_sr))
    return np.asarray(y, dtype=np.float32), int(loaded_sr)
