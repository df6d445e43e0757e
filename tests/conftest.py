from __future__ import annotations

from typing import Callable

import numpy as np
import pytest


def _tone(freq_hz: float, fs: float, n: int, offset: float = 0.0) -> np.ndarray:
    i = np.arange(n, dtype=np.float64)
    return offset + np.sin(2 * np.pi * freq_hz * i / fs)


@pytest.fixture
def tone() -> Callable[..., np.ndarray]:
    """Factory for offset + sin(2*pi*f*i/fs), i = 0..n-1."""
    return _tone


@pytest.fixture
def walking_window() -> np.ndarray:
    # 2 Hz gait on top of a constant 5 offset, 100 Hz, 1024 samples
    return _tone(2.0, 100.0, 1024, offset=5.0)
