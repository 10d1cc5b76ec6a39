"""
Configuration dataclasses for the transcription pipeline.

These immutable config objects decouple parameter passing from function
signatures, making it easier to define standard configurations and reuse
them across sessions. Every threshold the pipeline uses lives here — none
of them are tempo-adaptive.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EstimatorConfig:
    """
    Configuration for the autocorrelation frequency estimator.

    Attributes:
        silence_energy: Frames whose sum of squared samples is below this
            value are treated as silence without running the correlation.
        min_frequency_hz: Lowest detectable fundamental. Sets the largest
            lag scanned (further capped at half the frame length).
        max_frequency_hz: Highest detectable fundamental. Sets the smallest
            lag scanned. It matches the upper edge of the segmenter's voice
            band, so every in-band fundamental has its period inside the
            scan. 1200 Hz gives a minimum lag of 36 at 44.1 kHz.
        stride: Sum every ``stride``-th product when correlating. The sum is
            always divided by the full overlap length, so with 2 a sine of
            amplitude A peaks near A²/4 (A²/2 with 1). 2 also halves
            the work and the number of summed terms, so the estimate is
            noisier by about sqrt(2). Use 1 for the full sum.
        established_correlation: Running peak above which the scan may stop.
        drop_ratio: The scan stops once the correlation falls below this
            fraction of an established peak.
        confidence_threshold: Best peak correlation below this is rejected
            as unpitched.
        octave_tolerance: The shortest-lag peak within this fraction of the
            best peak wins, so a period is preferred over its multiples.
        frame_size: Expected frame length in samples. ``None`` accepts any
            length; otherwise frames of another length are rejected.

    Example:
        >>> config = EstimatorConfig(stride=1, confidence_threshold=0.2)
        >>> hz = estimate_frequency(frame, config)
    """

    silence_energy: float = 1e-4
    min_frequency_hz: float = 60.0
    max_frequency_hz: float = 1200.0
    stride: int = 2
    established_correlation: float = 0.4
    drop_ratio: float = 0.6
    confidence_threshold: float = 0.15
    octave_tolerance: float = 0.9
    frame_size: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.silence_energy < 0:
            raise ValueError(f"silence_energy must be non-negative, got {self.silence_energy}")
        if self.min_frequency_hz <= 0:
            raise ValueError(f"min_frequency_hz must be positive, got {self.min_frequency_hz}")
        if self.max_frequency_hz <= self.min_frequency_hz:
            raise ValueError(
                f"max_frequency_hz ({self.max_frequency_hz}) must be greater than "
                f"min_frequency_hz ({self.min_frequency_hz})"
            )
        if self.stride < 1:
            raise ValueError(f"stride must be at least 1, got {self.stride}")
        if not 0.0 < self.drop_ratio < 1.0:
            raise ValueError(f"drop_ratio must be in (0, 1), got {self.drop_ratio}")
        if not 0.0 < self.octave_tolerance <= 1.0:
            raise ValueError(f"octave_tolerance must be in (0, 1], got {self.octave_tolerance}")
        if self.frame_size is not None and self.frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {self.frame_size}")


@dataclass(frozen=True)
class SegmenterConfig:
    """
    Configuration for the note segmenter.

    Attributes:
        voice_band_low_hz: Exclusive lower bound of accepted frequencies.
        voice_band_high_hz: Exclusive upper bound of accepted frequencies.
            Anything outside the band counts as silence.
    """

    voice_band_low_hz: float = 60.0
    voice_band_high_hz: float = 1200.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.voice_band_low_hz <= 0:
            raise ValueError(
                f"voice_band_low_hz must be positive, got {self.voice_band_low_hz}"
            )
        if self.voice_band_high_hz <= self.voice_band_low_hz:
            raise ValueError(
                f"voice_band_high_hz ({self.voice_band_high_hz}) must be greater than "
                f"voice_band_low_hz ({self.voice_band_low_hz})"
            )


@dataclass(frozen=True)
class QuantizerConfig:
    """
    Configuration for interval merging and duration classes.

    Durations are in milliseconds. Ranges are half-open on the outside:
    ``< eighth_below_ms`` is an eighth, ``> half_above_ms`` is a half,
    everything in between (both ends inclusive) is a quarter.

    Attributes:
        merge_gap_ms: Same-pitch intervals separated by at most this much
            silence are merged into one note.
        eighth_below_ms: Upper (exclusive) bound of the eighth-note range.
        half_above_ms: Lower (exclusive) bound of the half-note range.
    """

    merge_gap_ms: float = 150.0
    eighth_below_ms: float = 350.0
    half_above_ms: float = 1200.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.merge_gap_ms < 0:
            raise ValueError(f"merge_gap_ms must be non-negative, got {self.merge_gap_ms}")
        if self.eighth_below_ms <= 0:
            raise ValueError(f"eighth_below_ms must be positive, got {self.eighth_below_ms}")
        if self.half_above_ms < self.eighth_below_ms:
            raise ValueError(
                f"half_above_ms ({self.half_above_ms}) must not be less than "
                f"eighth_below_ms ({self.eighth_below_ms})"
            )


@dataclass(frozen=True)
class TranscriptionConfig:
    """Aggregate configuration for one transcription session."""

    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    segmenter: SegmenterConfig = field(default_factory=SegmenterConfig)
    quantizer: QuantizerConfig = field(default_factory=QuantizerConfig)


# Pre-defined configurations

DEFAULT_CONFIG = TranscriptionConfig()
"""Default configuration: 60–1200 Hz voice band, 150 ms merge gap, stride 2."""

PRECISE_CONFIG = TranscriptionConfig(estimator=EstimatorConfig(stride=1))
"""Full correlation sum. Twice the work per frame and less noise-sensitive.
Correlation values roughly double, so quieter tones clear the confidence
threshold and loud ones reach the early-stop level."""
