"""
api/schemas/transcribe.py — Pydantic request/response schemas for transcription.

Covers:
    /transcribe/samples  — SamplesTranscribeRequest / TranscriptionResponse
    /transcribe/file     — FileTranscribeRequest / TranscriptionResponse
"""

from pydantic import BaseModel, Field, field_validator

# Ten minutes of 48 kHz audio. Larger bodies belong in /transcribe/file.
MAX_INLINE_SAMPLES: int = 48_000 * 600


class NoteEventOut(BaseModel):
    """A single transcribed note."""

    midi: int
    name: str
    duration_class: str = Field(..., description="EIGHTH, QUARTER or HALF")
    note_value: str = Field(..., description="Note-value denominator: '8', '4' or '2'")
    duration_ms: float = Field(..., ge=0.0)


class PitchIntervalOut(BaseModel):
    """A raw span of constant detected pitch, before merging."""

    start: float = Field(..., ge=0.0)
    end: float = Field(..., ge=0.0)
    midi: int


class SamplesTranscribeRequest(BaseModel):
    """Mono samples posted inline."""

    samples: list[float] = Field(..., min_length=1, max_length=MAX_INLINE_SAMPLES)
    sample_rate: int = Field(..., gt=0, le=384_000)
    frame_size: int = Field(default=1024, ge=64, le=16_384)


class FileTranscribeRequest(BaseModel):
    """A recording on the server filesystem."""

    file_path: str = Field(..., min_length=1)
    duration: float = Field(default=60.0, gt=0.0, le=600.0)

    @field_validator("file_path")
    @classmethod
    def _strip_path(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("file_path cannot be blank")
        return stripped


class TranscriptionResponse(BaseModel):
    """Notes plus the counters a client needs to judge the input quality."""

    notes: list[NoteEventOut]
    intervals: list[PitchIntervalOut]
    note_count: int
    interval_count: int
    frame_count: int
    voiced_frame_count: int
    duration_sec: float
    processing_time_ms: float
