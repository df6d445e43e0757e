"""Magnitude spectrum of a DC-removed acceleration window."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import ConfigError


def is_power_of_two(n: int) -> bool:
    try:
        n = int(n)
    except (TypeError, ValueError):
        return False
    return n > 0 and (n & (n - 1)) == 0


@dataclass(frozen=True)
class SpectrumResult:
    magnitudes: np.ndarray  # first N/2 bins
    sample_rate: float  # Hz
    window_size: int  # N

    @property
    def resolution(self) -> float:
        """Bin spacing in Hz."""
        return self.sample_rate / self.window_size

    def bin_frequency(self, index: int) -> float:
        return index * self.sample_rate / self.window_size

    def frequencies(self) -> np.ndarray:
        return np.arange(self.magnitudes.size, dtype=np.float64) * self.resolution


def remove_dc(x: np.ndarray) -> np.ndarray:
    """Subtract the arithmetic mean from ``x`` in place and return it."""
    mean = float(np.mean(x)) if x.size else 0.0
    x -= mean
    return x


def analyze(window: np.ndarray, sample_rate: float) -> SpectrumResult:
    """Compute the one-sided magnitude spectrum of ``window``.

    The mean is removed first, then an unnormalized forward real FFT is taken
    and the modulus of the first N/2 bins is kept (bin 0 is the near-zero DC
    term).

    Args:
        window: 1D array of N samples, N a power of two.
        sample_rate: sampling rate [Hz].

    Raises:
        ConfigError: if N is not a power of two or ``sample_rate`` <= 0.
    """
    x = np.array(window, dtype=np.float64)  # copy; caller's window untouched
    n = x.size
    if x.ndim != 1 or not is_power_of_two(n):
        raise ConfigError(f"window length must be a power of two, got {n}")
    if not sample_rate > 0:
        raise ConfigError(f"sample rate must be > 0, got {sample_rate}")
    remove_dc(x)
    X = np.fft.rfft(x, norm="backward")
    mag = np.abs(X[: n // 2])
    return SpectrumResult(magnitudes=mag, sample_rate=float(sample_rate), window_size=n)
