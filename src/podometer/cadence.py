"""Dominant-frequency search in the cadence band and step arithmetic."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .errors import ConfigError
from .quality import band_peak_share, band_snr_db
from .spectrum import SpectrumResult

logger = logging.getLogger(__name__)

# Bins below this fraction of the spectrum peak are FFT round-off, not signal.
NOISE_FLOOR_REL = 1e-9


class CadenceStatus(str, Enum):
    FILLING = "filling"  # window not full yet, no FFT run
    READY = "ready"
    NO_SIGNAL = "no_signal"  # window full, nothing qualifying in the band


@dataclass(frozen=True)
class CadenceBand:
    """Walking-cadence search band in Hz. ``max_hz=None`` searches up to Nyquist."""

    min_hz: float = 1.0
    max_hz: Optional[float] = 3.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min_hz) and self.min_hz >= 0):
            raise ConfigError(f"band min must be a finite value >= 0, got {self.min_hz}")
        if self.max_hz is not None and not self.max_hz >= self.min_hz:
            raise ConfigError(
                f"band max ({self.max_hz}) must be >= band min ({self.min_hz})"
            )


@dataclass(frozen=True)
class CadenceEstimate:
    bin_index: Optional[int]  # None: no dominant bin found
    frequency_hz: Optional[float]  # None: no valid frequency, never 0.0
    steps: int
    peak_magnitude: Optional[float] = None
    snr_db: float = 0.0
    confidence: float = 0.0  # peak share of in-band power

    @property
    def found(self) -> bool:
        return self.bin_index is not None


NO_ESTIMATE = CadenceEstimate(bin_index=None, frequency_hz=None, steps=0)


def band_indices(
    band: CadenceBand,
    window_size: int,
    sample_rate: float,
) -> Tuple[int, int]:
    """Inclusive bin bounds ``(lo, hi)`` covering ``band``.

    ``lo = ceil(min_hz * N / fs)``, ``hi = floor(max_hz * N / fs)``. An
    unbounded band ends at N/2 - 1 and never starts at the DC bin. ``hi`` is
    clipped to the last retained bin; ``lo > hi`` means an empty range.
    """
    last = window_size // 2 - 1
    lo = int(math.ceil(band.min_hz * window_size / sample_rate))
    if band.max_hz is None:
        lo = max(lo, 1)
        hi = last
    else:
        hi = min(int(math.floor(band.max_hz * window_size / sample_rate)), last)
    return lo, hi


def find_dominant_bin(
    magnitudes: np.ndarray,
    lo: int,
    hi: int,
    min_magnitude: float = 0.0,
) -> Optional[int]:
    """Index of the strictly largest magnitude in ``lo..hi`` above ``min_magnitude``.

    The first occurrence wins on ties. Returns None for an empty range or when
    no bin holds a finite magnitude above the floor.
    """
    lo = max(int(lo), 0)
    hi = min(int(hi), magnitudes.size - 1)
    best: Optional[int] = None
    best_mag = max(float(min_magnitude), 0.0)
    for i in range(lo, hi + 1):
        m = float(magnitudes[i])
        if math.isfinite(m) and m > best_mag:
            best_mag = m
            best = i
    return best


def count_steps(frequency_hz: Optional[float], elapsed_s: float) -> int:
    """``floor(frequency * elapsed)``; 0 without a valid frequency."""
    if frequency_hz is None:
        return 0
    return max(0, int(math.floor(frequency_hz * elapsed_s)))


def estimate(
    spectrum: SpectrumResult,
    band: CadenceBand,
    elapsed_s: float,
) -> CadenceEstimate:
    """Pick the dominant cadence frequency and convert it to a step count.

    Args:
        spectrum: one-sided magnitude spectrum of the window.
        band: cadence search band.
        elapsed_s: elapsed time the window stands for [s].
    """
    lo, hi = band_indices(band, spectrum.window_size, spectrum.sample_rate)
    mag = spectrum.magnitudes
    floor = NOISE_FLOOR_REL * float(np.max(mag)) if mag.size else 0.0
    idx = find_dominant_bin(mag, lo, hi, min_magnitude=floor)
    if idx is None:
        logger.debug("no dominant bin in [%d, %d]", lo, hi)
        return NO_ESTIMATE
    f_peak = spectrum.bin_frequency(idx)
    steps = count_steps(f_peak, elapsed_s)
    logger.debug(
        "dominant bin %d (magnitude %.4g) -> %.4f Hz, %d steps over %.3f s",
        idx,
        float(mag[idx]),
        f_peak,
        steps,
        elapsed_s,
    )
    return CadenceEstimate(
        bin_index=idx,
        frequency_hz=f_peak,
        steps=steps,
        peak_magnitude=float(mag[idx]),
        snr_db=band_snr_db(mag, idx, lo, hi),
        confidence=band_peak_share(mag, idx, lo, hi),
    )
