"""
Tests for core/transcription/estimator.py — autocorrelation pitch estimation.

Tests cover:
    - Accuracy on synthetic sines across the voice band (within a semitone)
    - Harmonic-rich tones resolve to the fundamental, not an octave
    - Voiced/unvoiced decision: silence, energy gate, noise, weak correlation
    - Correlation is normalised by the full overlap length, also when strided
    - Malformed frames are absorbed as None
    - Lag range bounds and early termination of the scan
"""

import math
from unittest.mock import patch

import numpy as np
import pytest
from conftest import SR, sine, sine_frame

from core.config import PRECISE_CONFIG, EstimatorConfig
from core.transcription import estimator as estimator_module
from core.transcription.estimator import estimate_frequency, lag_range
from core.transcription.types import AudioFrame


def _semitones_off(estimate: float, reference: float) -> float:
    return abs(12.0 * math.log2(estimate / reference))


# ---------------------------------------------------------------------------
# Accuracy
# ---------------------------------------------------------------------------


class TestSineAccuracy:
    @pytest.mark.parametrize("hz", [90.0, 110.0, 196.0, 261.63, 440.0, 660.0, 880.0, 1000.0])
    def test_within_one_semitone_at_44100(self, hz):
        """Estimate lands within one semitone of the true frequency."""
        result = estimate_frequency(sine_frame(hz, 2048, sr=44100))
        assert result is not None
        assert _semitones_off(result, hz) < 1.0

    @pytest.mark.parametrize("hz", [110.0, 330.0, 523.25, 987.77])
    def test_within_one_semitone_at_22050(self, hz):
        result = estimate_frequency(sine_frame(hz, 2048, sr=22050))
        assert result is not None
        assert _semitones_off(result, hz) < 1.0

    def test_a4_with_default_1024_frame(self):
        """The default capture buffer size resolves A4."""
        result = estimate_frequency(sine_frame(440.0, 1024))
        assert result is not None
        assert _semitones_off(result, 440.0) < 1.0

    def test_returns_sample_rate_over_integer_lag(self):
        """Result is exactly sample_rate / lag for some integer lag."""
        result = estimate_frequency(sine_frame(440.0))
        lag = SR / result
        assert lag == pytest.approx(round(lag))

    def test_full_stride_also_within_one_semitone(self):
        result = estimate_frequency(sine_frame(330.0), EstimatorConfig(stride=1))
        assert result is not None
        assert _semitones_off(result, 330.0) < 1.0

    def test_harmonic_rich_tone_gives_fundamental(self):
        """A strong second harmonic must not pull the estimate up an octave."""
        n = 2048
        y = sine(220.0, n, amplitude=0.8) + sine(440.0, n, amplitude=0.6)
        result = estimate_frequency(AudioFrame(samples=y, sample_rate=SR))
        assert result is not None
        assert _semitones_off(result, 220.0) < 1.0

    def test_prefers_period_over_its_multiples(self):
        """Every multiple of the period correlates about equally; the shortest wins."""
        result = estimate_frequency(sine_frame(200.0, 2048, amplitude=1.0))
        assert result is not None
        assert _semitones_off(result, 200.0) < 1.0

    def test_highest_frequency_at_min_lag(self):
        """A period at the very start of the scan is still a valid peak."""
        hz = SR / 36.0  # 1225 Hz, exactly the minimum lag
        result = estimate_frequency(sine_frame(hz))
        assert result == pytest.approx(hz)

    @pytest.mark.parametrize("hz", [1110.0, 1150.0, 1180.0, 1199.0])
    def test_top_of_voice_band_not_an_octave_low(self, hz):
        """Fundamentals just under the 1200 Hz voice-band edge keep their octave."""
        result = estimate_frequency(sine_frame(hz, 1024))
        assert result is not None
        assert _semitones_off(result, hz) < 1.0


# ---------------------------------------------------------------------------
# Voiced / unvoiced decision
# ---------------------------------------------------------------------------


class TestUnvoiced:
    def test_all_zero_frame_is_none(self):
        frame = AudioFrame(samples=np.zeros(1024), sample_rate=SR)
        assert estimate_frequency(frame) is None

    def test_energy_gate_skips_correlation(self):
        """Below the silence energy the correlation is never computed."""
        frame = sine_frame(440.0, 2048, amplitude=1e-4)
        with patch.object(estimator_module, "_correlation") as mock_corr:
            assert estimate_frequency(frame) is None
        mock_corr.assert_not_called()

    def test_white_noise_is_none(self):
        rng = np.random.default_rng(0)
        frame = AudioFrame(samples=0.3 * rng.standard_normal(2048), sample_rate=SR)
        assert estimate_frequency(frame) is None

    def test_weak_periodicity_is_rejected(self):
        """A quiet tone correlates below the confidence threshold."""
        assert estimate_frequency(sine_frame(440.0, amplitude=0.5)) is None

    def test_quiet_tone_below_threshold_after_overlap_normalisation(self):
        """Amplitude 0.6 peaks near 0.6²/4 = 0.09 with stride 2: unvoiced."""
        assert estimate_frequency(sine_frame(220.0, 1024, amplitude=0.6)) is None

    def test_full_sum_accepts_same_quiet_tone(self):
        """With stride 1 the same tone peaks near 0.18 and is voiced."""
        frame = sine_frame(220.0, 1024, amplitude=0.6)
        result = estimate_frequency(frame, PRECISE_CONFIG.estimator)
        assert result is not None
        assert _semitones_off(result, 220.0) < 1.0

    def test_lower_threshold_accepts_quiet_tone(self):
        config = EstimatorConfig(confidence_threshold=0.04)
        result = estimate_frequency(sine_frame(440.0, amplitude=0.5), config)
        assert result is not None
        assert _semitones_off(result, 440.0) < 1.0

    def test_dc_offset_is_none(self):
        """A constant 0.5 correlates near 0.5²/2 = 0.125 at every lag, under the threshold."""
        frame = AudioFrame(samples=np.full(1024, 0.5), sample_rate=SR)
        assert estimate_frequency(frame) is None


# ---------------------------------------------------------------------------
# Malformed frames
# ---------------------------------------------------------------------------


class TestMalformedFrames:
    def test_nan_sample_is_none(self):
        y = sine(440.0, 1024)
        y[10] = np.nan
        assert estimate_frequency(AudioFrame(samples=y, sample_rate=SR)) is None

    def test_inf_sample_is_none(self):
        y = sine(440.0, 1024)
        y[0] = np.inf
        assert estimate_frequency(AudioFrame(samples=y, sample_rate=SR)) is None

    def test_empty_frame_is_none(self):
        assert estimate_frequency(AudioFrame(samples=np.zeros(0), sample_rate=SR)) is None

    def test_two_dimensional_frame_is_none(self):
        frame = AudioFrame(samples=np.zeros((2, 1024)), sample_rate=SR)
        assert estimate_frequency(frame) is None

    def test_zero_sample_rate_is_none(self):
        frame = AudioFrame(samples=sine(440.0, 1024), sample_rate=0)
        assert estimate_frequency(frame) is None

    def test_wrong_length_is_none_when_frame_size_fixed(self):
        config = EstimatorConfig(frame_size=1024)
        assert estimate_frequency(sine_frame(440.0, 2048), config) is None
        assert estimate_frequency(sine_frame(440.0, 1024), config) is not None

    def test_frame_shorter_than_min_lag_is_none(self):
        """50 samples allow lags up to 25, below the minimum lag of 36."""
        assert estimate_frequency(sine_frame(1000.0, 50)) is None


# ---------------------------------------------------------------------------
# Lag range and scan
# ---------------------------------------------------------------------------


class TestLagRange:
    def test_default_44100_1024(self):
        """Minimum lag 36 (~1200 Hz); maximum capped at half the frame."""
        assert lag_range(44100, 1024, EstimatorConfig()) == (36, 512)

    def test_long_frame_capped_by_min_frequency(self):
        assert lag_range(44100, 4096, EstimatorConfig()) == (36, 735)

    def test_low_sample_rate(self):
        assert lag_range(8000, 1024, EstimatorConfig()) == (6, 133)

    def test_min_lag_never_below_two(self):
        config = EstimatorConfig(max_frequency_hz=50_000.0, min_frequency_hz=60.0)
        assert lag_range(8000, 1024, config)[0] == 2


class TestEarlyTermination:
    def test_scan_stops_after_established_peak(self):
        """A loud A4 with the full sum peaks near 0.5 and stops well before the end."""
        frame = sine_frame(440.0, 2048, amplitude=1.0)
        with patch.object(
            estimator_module, "_correlation", wraps=estimator_module._correlation
        ) as spy:
            result = estimate_frequency(frame, PRECISE_CONFIG.estimator)
        min_lag, max_lag = lag_range(SR, 2048, EstimatorConfig())
        assert result is not None
        assert spy.call_count < (max_lag - min_lag) // 2

    def test_no_early_stop_below_established(self):
        """With stride 2 a 0.7 sine peaks near 0.12, never established: full scan."""
        frame = sine_frame(440.0, 2048, amplitude=0.7)
        with patch.object(
            estimator_module, "_correlation", wraps=estimator_module._correlation
        ) as spy:
            estimate_frequency(frame)
        min_lag, max_lag = lag_range(SR, 2048, EstimatorConfig())
        assert spy.call_count == max_lag - min_lag + 2

    def test_low_note_not_cut_off_by_zero_lag_lobe(self):
        """The high correlation near zero lag must not trigger the early stop."""
        result = estimate_frequency(
            sine_frame(100.0, 2048, amplitude=1.0), PRECISE_CONFIG.estimator
        )
        assert result is not None
        assert _semitones_off(result, 100.0) < 1.0


# ---------------------------------------------------------------------------
# Correlation normalisation
# ---------------------------------------------------------------------------


class TestCorrelation:
    def test_full_sum_of_unit_sine_at_period_is_half(self):
        x = sine(441.0, 2048, amplitude=1.0).astype(np.float64)
        assert estimator_module._correlation(x, 100, 1) == pytest.approx(0.5, abs=0.01)

    def test_stride_two_divides_by_full_overlap(self):
        """Half the products are summed but the divisor is still len(x) - lag."""
        x = sine(441.0, 2048, amplitude=1.0).astype(np.float64)
        assert estimator_module._correlation(x, 100, 2) == pytest.approx(0.25, abs=0.01)

    def test_divisor_is_overlap_not_products_taken(self):
        x = np.ones(10)
        # lag 3: overlap 7, every other product → 4 products summed
        assert estimator_module._correlation(x, 3, 2) == pytest.approx(4 / 7)
