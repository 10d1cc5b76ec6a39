"""
api/routes/transcribe.py — Hum transcription endpoints.

Endpoints:
    POST /transcribe/samples  — transcribe mono samples posted in the body
    POST /transcribe/file     — transcribe a recording on the server filesystem

Both delegate to HumTranscriber in ingestion/transcriber.py, which runs one
recording session per request.
"""

from __future__ import annotations

import logging

import numpy as np
from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_transcriber
from api.schemas.transcribe import (
    FileTranscribeRequest,
    NoteEventOut,
    PitchIntervalOut,
    SamplesTranscribeRequest,
    TranscriptionResponse,
)
from core.transcription.errors import TranscriptionError
from core.transcription.pitch import midi_to_name
from core.transcription.types import TranscriptionResult
from ingestion.transcriber import HumTranscriber

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transcribe", tags=["transcribe"])


def _to_response(result: TranscriptionResult) -> TranscriptionResponse:
    notes_out = [
        NoteEventOut(
            midi=n.midi,
            name=str(midi_to_name(n.midi)),
            duration_class=n.duration_class.name,
            note_value=n.duration_class.value,
            duration_ms=round(n.duration_ms, 3),
        )
        for n in result.notes
    ]
    intervals_out = [
        PitchIntervalOut(start=round(i.start, 4), end=round(i.end, 4), midi=i.midi)
        for i in result.intervals
    ]
    return TranscriptionResponse(
        notes=notes_out,
        intervals=intervals_out,
        note_count=len(notes_out),
        interval_count=len(intervals_out),
        frame_count=result.frame_count,
        voiced_frame_count=result.voiced_frame_count,
        duration_sec=round(result.duration_sec, 3),
        processing_time_ms=round(result.processing_time_ms, 2),
    )


# ---------------------------------------------------------------------------
# POST /transcribe/samples
# ---------------------------------------------------------------------------


@router.post("/samples", response_model=TranscriptionResponse)
def transcribe_samples(
    request: SamplesTranscribeRequest,
    transcriber: HumTranscriber = Depends(get_transcriber),
) -> TranscriptionResponse:
    """Transcribe mono samples sent inline.

    Args:
        request: SamplesTranscribeRequest with samples, sample_rate, frame_size.

    Returns:
        TranscriptionResponse with notes in temporal order. Silence or a
        signal shorter than one frame gives an empty note list.

    Raises:
        422: Invalid parameters.
        500: Unexpected transcription failure.
    """
    y = np.asarray(request.samples, dtype=np.float32)
    try:
        result = transcriber.transcribe_samples(
            y, request.sample_rate, frame_size=request.frame_size
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except TranscriptionError as exc:
        logger.error("Transcription failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Transcription failed: {exc}") from exc
    return _to_response(result)


# ---------------------------------------------------------------------------
# POST /transcribe/file
# ---------------------------------------------------------------------------


@router.post("/file", response_model=TranscriptionResponse)
def transcribe_file(
    request: FileTranscribeRequest,
    transcriber: HumTranscriber = Depends(get_transcriber),
) -> TranscriptionResponse:
    """Transcribe a recording stored on the server.

    Args:
        request: FileTranscribeRequest with file_path and duration.

    Returns:
        TranscriptionResponse with notes in temporal order.

    Raises:
        422: File not found or unsupported format.
        500: Audio decoding or transcription failure.
    """
    try:
        result = transcriber.transcribe_file(request.file_path, duration=request.duration)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (RuntimeError, TranscriptionError) as exc:
        logger.error("Transcription failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Transcription failed: {exc}") from exc
    return _to_response(result)
