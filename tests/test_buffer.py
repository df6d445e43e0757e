from __future__ import annotations

import numpy as np
import pytest

from podometer.buffer import ResetPolicy, SignalBuffer
from podometer.errors import ConfigError


def test_capacity_must_be_power_of_two() -> None:
    with pytest.raises(ConfigError):
        SignalBuffer(1000)
    with pytest.raises(ConfigError):
        SignalBuffer(0)
    assert SignalBuffer(8).capacity == 8


def test_push_keeps_most_recent_samples_in_order() -> None:
    buf = SignalBuffer(4)
    for v in range(10):
        buf.push(float(v))
        assert len(buf) <= 4
    assert buf.is_full
    assert buf.to_list() == [6.0, 7.0, 8.0, 9.0]


def test_to_array_is_read_only_and_coerces_missing() -> None:
    buf = SignalBuffer(4)
    buf.extend([1.0, None, float("nan"), 2.5])
    a = buf.to_array()
    b = buf.to_array()
    assert a.dtype == np.float64
    assert np.array_equal(a, [1.0, 0.0, 0.0, 2.5])
    assert np.array_equal(a, b)
    a[:] = 99.0
    assert buf.to_list() == [1.0, 0.0, 0.0, 2.5]
    assert len(buf) == 4


def test_continuous_policy_slides_across_batches() -> None:
    buf = SignalBuffer(4)
    buf.fill([1.0, 2.0, 3.0], ResetPolicy.CONTINUOUS)
    buf.fill([4.0, 5.0], ResetPolicy.CONTINUOUS)
    assert buf.to_list() == [2.0, 3.0, 4.0, 5.0]


def test_per_batch_policy_keeps_tail_of_latest_batch() -> None:
    buf = SignalBuffer(4)
    buf.fill([1.0, 2.0, 3.0], ResetPolicy.PER_BATCH)
    buf.fill([4.0, 5.0], ResetPolicy.PER_BATCH)
    assert buf.to_list() == [4.0, 5.0]
    buf.fill([float(v) for v in range(10)], ResetPolicy.PER_BATCH)
    assert buf.to_list() == [6.0, 7.0, 8.0, 9.0]
