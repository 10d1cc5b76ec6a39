"""
Environment-driven configuration for the transcription pipeline.

Lives in ingestion/ because it reads the process environment (and a local
``.env`` file); core/config.py only defines the dataclasses.

Recognised variables (all optional; unset means the dataclass default):

    HUM_SILENCE_ENERGY         estimator energy gate
    HUM_CONFIDENCE_THRESHOLD   estimator minimum peak correlation
    HUM_STRIDE                 estimator correlation stride
    HUM_FRAME_SIZE             samples per frame for in-memory audio
    HUM_VOICE_BAND_LOW_HZ      segmenter voice band, exclusive lower bound
    HUM_VOICE_BAND_HIGH_HZ     segmenter voice band, exclusive upper bound
    HUM_MERGE_GAP_MS           quantizer merge tolerance
    HUM_EIGHTH_BELOW_MS        quantizer eighth/quarter boundary
    HUM_HALF_ABOVE_MS          quantizer quarter/half boundary
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import fields, replace

from dotenv import load_dotenv

from core.config import (
    DEFAULT_CONFIG,
    EstimatorConfig,
    QuantizerConfig,
    SegmenterConfig,
    TranscriptionConfig,
)
from core.transcription.frames import DEFAULT_FRAME_SIZE

_ESTIMATOR_VARS: dict[str, str] = {
    "HUM_SILENCE_ENERGY": "silence_energy",
    "HUM_CONFIDENCE_THRESHOLD": "confidence_threshold",
    "HUM_STRIDE": "stride",
}

_SEGMENTER_VARS: dict[str, str] = {
    "HUM_VOICE_BAND_LOW_HZ": "voice_band_low_hz",
    "HUM_VOICE_BAND_HIGH_HZ": "voice_band_high_hz",
}

_QUANTIZER_VARS: dict[str, str] = {
    "HUM_MERGE_GAP_MS": "merge_gap_ms",
    "HUM_EIGHTH_BELOW_MS": "eighth_below_ms",
    "HUM_HALF_ABOVE_MS": "half_above_ms",
}


def _overrides(env: Mapping[str, str], names: dict[str, str], cls: type) -> dict[str, object]:
    """Parse the variables in ``names`` that are set, typed like ``cls``'s fields."""
    field_types = {f.name: f.type for f in fields(cls)}
    values: dict[str, object] = {}
    for var, attr in names.items():
        raw = env.get(var, "").strip()
        if not raw:
            continue
        as_int = field_types[attr] in (int, "int")
        try:
            values[attr] = int(raw) if as_int else float(raw)
        except ValueError as exc:
            raise ValueError(f"{var} must be a number, got {raw!r}") from exc
    return values


def load_transcription_config(
    env: Mapping[str, str] | None = None,
    *,
    base: TranscriptionConfig = DEFAULT_CONFIG,
) -> TranscriptionConfig:
    """Build a TranscriptionConfig from environment variables.

    Args:
        env: Mapping to read instead of ``os.environ`` (tests). When None,
             a local ``.env`` file is loaded first.
        base: Configuration the set variables are applied to, e.g.
              PRECISE_CONFIG.

    Returns:
        ``base`` with any set variables applied.

    Raises:
        ValueError: A variable is not a number, or the resulting config
            fails validation.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    return replace(
        base,
        estimator=replace(
            base.estimator, **_overrides(env, _ESTIMATOR_VARS, EstimatorConfig)
        ),
        segmenter=replace(
            base.segmenter, **_overrides(env, _SEGMENTER_VARS, SegmenterConfig)
        ),
        quantizer=replace(
            base.quantizer, **_overrides(env, _QUANTIZER_VARS, QuantizerConfig)
        ),
    )


def load_frame_size(env: Mapping[str, str] | None = None) -> int:
    """Frame size for in-memory audio, from ``HUM_FRAME_SIZE``.

    Raises:
        ValueError: The variable is set but not a positive integer.
    """
    if env is None:
        load_dotenv()
        env = os.environ
    raw = env.get("HUM_FRAME_SIZE", "").strip()
    if not raw:
        return DEFAULT_FRAME_SIZE
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"HUM_FRAME_SIZE must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"HUM_FRAME_SIZE must be positive, got {value}")
    return value
