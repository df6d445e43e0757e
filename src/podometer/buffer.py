"""Fixed-capacity sample window with FIFO eviction."""

from __future__ import annotations

import math
from collections import deque
from enum import Enum
from typing import Deque, Iterable, Optional

import numpy as np

from .errors import ConfigError
from .spectrum import is_power_of_two


class ResetPolicy(str, Enum):
    """How a new batch of samples interacts with the existing window."""

    CONTINUOUS = "continuous"  # slide across batches
    PER_BATCH = "per_batch"  # clear, then fill from the batch alone


class SignalBuffer:
    """Ordered window of the most recent ``capacity`` samples.

    ``capacity`` must be a power of two so the window can be handed to the
    analyzer as-is.
    """

    def __init__(self, capacity: int) -> None:
        if not is_power_of_two(capacity):
            raise ConfigError(f"window size must be a power of two, got {capacity}")
        self._data: Deque[Optional[float]] = deque(maxlen=int(capacity))

    @property
    def capacity(self) -> int:
        return int(self._data.maxlen)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._data)

    @property
    def is_full(self) -> bool:
        return len(self._data) == self.capacity

    def push(self, sample: Optional[float]) -> None:
        # deque(maxlen) drops the oldest item on append when full
        self._data.append(sample)

    def extend(self, samples: Iterable[Optional[float]]) -> None:
        for s in samples:
            self.push(s)

    def clear(self) -> None:
        self._data.clear()

    def fill(self, samples: Iterable[Optional[float]], policy: ResetPolicy) -> None:
        """Apply one batch of samples according to ``policy``."""
        if policy is ResetPolicy.PER_BATCH:
            self.clear()
        self.extend(samples)

    def to_array(self) -> np.ndarray:
        """Return the window in arrival order as a new float64 array.

        Missing or non-finite samples are read as 0.0. The buffer itself is
        left untouched.
        """
        return np.fromiter(
            (_as_sample(v) for v in self._data), dtype=np.float64, count=len(self._data)
        )

    def to_list(self) -> list[float]:
        return [_as_sample(v) for v in self._data]


def _as_sample(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    v = float(value)
    return v if math.isfinite(v) else 0.0
