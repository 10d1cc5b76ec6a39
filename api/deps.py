"""
FastAPI dependency providers.

Provides a process-wide HumTranscriber built from the environment once and
reused across requests. The transcriber itself is stateless between calls;
every request gets its own recording session.
"""

from core.config import TranscriptionConfig
from ingestion.settings import load_frame_size, load_transcription_config
from ingestion.transcriber import HumTranscriber

_transcriber: HumTranscriber | None = None


def get_transcription_config() -> TranscriptionConfig:
    """Return the pipeline configuration read from ``HUM_*`` variables."""
    return load_transcription_config()


def get_transcriber() -> HumTranscriber:
    """
    Return a cached ``HumTranscriber`` singleton.

    Created on first call from the environment (and ``.env``) and reused
    thereafter, so env vars are read once per process.
    """
    global _transcriber  # noqa: PLW0603
    if _transcriber is None:
        _transcriber = HumTranscriber(
            get_transcription_config(),
            frame_size=load_frame_size(),
        )
    return _transcriber
