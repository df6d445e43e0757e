from __future__ import annotations

import numpy as np
import pytest

from podometer.cadence import (
    CadenceBand,
    band_indices,
    count_steps,
    estimate,
    find_dominant_bin,
)
from podometer.errors import ConfigError
from podometer.spectrum import analyze


def test_band_indices_walking_band() -> None:
    assert band_indices(CadenceBand(1.0, 3.0), 1024, 100.0) == (11, 30)


def test_band_indices_unbounded_skips_dc() -> None:
    assert band_indices(CadenceBand(0.0, None), 1024, 100.0) == (1, 511)


def test_band_indices_clipped_to_spectrum() -> None:
    lo, hi = band_indices(CadenceBand(1.0, 500.0), 64, 100.0)
    assert hi == 31
    assert lo == 1


def test_band_validation() -> None:
    with pytest.raises(ConfigError):
        CadenceBand(3.0, 1.0)
    with pytest.raises(ConfigError):
        CadenceBand(-1.0, 3.0)


def test_find_dominant_bin_first_tie_wins() -> None:
    mags = np.array([0.0, 1.0, 3.0, 3.0, 2.0])
    assert find_dominant_bin(mags, 0, 4) == 2
    assert find_dominant_bin(mags, 3, 4) == 3


def test_find_dominant_bin_none_found() -> None:
    mags = np.array([0.0, 1.0, 3.0])
    assert find_dominant_bin(mags, 2, 1) is None
    assert find_dominant_bin(np.zeros(8), 0, 7) is None
    assert find_dominant_bin(mags, 0, 2, min_magnitude=5.0) is None


def test_count_steps() -> None:
    assert count_steps(1.953125, 10.24) == 20
    assert count_steps(2.0, 0.99) == 1
    assert count_steps(None, 10.0) == 0
    assert count_steps(2.0, 0.0) == 0


def test_bin_aligned_sinusoid_recovered_exactly(tone) -> None:
    fs, n, k = 64.0, 256, 8
    f0 = k * fs / n  # 2.0 Hz
    spec = analyze(tone(f0, fs, n, offset=9.81), fs)
    est = estimate(spec, CadenceBand(1.0, 3.0), elapsed_s=30.0)
    assert est.found
    assert est.bin_index == k
    assert est.frequency_hz == f0
    assert est.steps == 60
    assert est.confidence > 0.5


def test_band_excluding_signal_reports_no_frequency(tone) -> None:
    fs, n = 64.0, 256
    spec = analyze(tone(5.0, fs, n), fs)
    est = estimate(spec, CadenceBand(1.0, 3.0), elapsed_s=30.0)
    assert not est.found
    assert est.bin_index is None
    assert est.frequency_hz is None
    assert est.steps == 0


def test_flat_signal_reports_no_frequency() -> None:
    spec = analyze(np.full(128, 9.81), 50.0)
    est = estimate(spec, CadenceBand(0.0, None), elapsed_s=10.0)
    assert est.frequency_hz is None
    assert est.steps == 0


def test_walking_scenario(walking_window: np.ndarray) -> None:
    spec = analyze(walking_window, 100.0)
    est = estimate(spec, CadenceBand(1.0, 3.0), elapsed_s=10.24)
    assert est.bin_index == 20
    assert est.frequency_hz == pytest.approx(1.953125)
    assert est.steps == 20
