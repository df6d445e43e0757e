"""How clearly the dominant bin stands out within the cadence band.

Both measures only look at the bins the peak search scanned, so energy from
gravity drift or hand shake outside the walking band does not change them.
They are reported next to the step count and never alter it.
"""

from __future__ import annotations

import numpy as np


def _band(magnitudes: np.ndarray, lo: int, hi: int) -> np.ndarray:
    lo = max(int(lo), 0)
    hi = min(int(hi), magnitudes.size - 1)
    if hi < lo:
        return np.zeros(0, dtype=np.float64)
    return np.asarray(magnitudes[lo : hi + 1], dtype=np.float64)


def band_snr_db(
    magnitudes: np.ndarray,
    peak_index: int,
    lo: int,
    hi: int,
    guard_bins: int = 1,
) -> float:
    """Peak magnitude over the median of the other in-band bins, in dB.

    Bins within ``guard_bins`` of the peak are leakage from the same tone
    and are left out of the noise estimate. Returns 0.0 when the peak lies
    outside ``lo..hi`` or no noise bin is left.
    """
    band = _band(magnitudes, lo, hi)
    k = int(peak_index) - max(int(lo), 0)
    if not 0 <= k < band.size:
        return 0.0
    keep = np.ones(band.size, dtype=bool)
    keep[max(0, k - guard_bins) : k + guard_bins + 1] = False
    if not np.any(keep):
        return 0.0
    noise = float(np.median(band[keep]))
    peak = float(band[k])
    if noise <= 0.0 or peak <= 0.0:
        return 0.0
    return 20.0 * float(np.log10(peak / noise))


def band_peak_share(
    magnitudes: np.ndarray,
    peak_index: int,
    lo: int,
    hi: int,
) -> float:
    """Fraction (0..1) of the band's power held by the peak bin."""
    band = _band(magnitudes, lo, hi)
    k = int(peak_index) - max(int(lo), 0)
    if not 0 <= k < band.size:
        return 0.0
    power = band**2
    total = float(np.sum(power))
    if total <= 0.0:
        return 0.0
    return float(np.clip(power[k] / total, 0.0, 1.0))
