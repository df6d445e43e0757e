"""Per-session analysis state.

A session owns one sample window and the last step estimate derived from it.
Ingest and query both run under the session's lock, so a reader always sees
a buffer and step count that belong together.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from .buffer import ResetPolicy, SignalBuffer
from .cadence import NO_ESTIMATE, CadenceBand, CadenceEstimate, CadenceStatus, estimate
from .errors import ConfigError
from .spectrum import analyze, is_power_of_two

logger = logging.getLogger(__name__)


class TimeSource(str, Enum):
    """Where the elapsed time used for step counting comes from."""

    CALLER = "caller"  # time field of each ingest request
    WINDOW = "window"  # window duration N / fs


@dataclass(frozen=True)
class SessionConfig:
    sample_rate: float = 100  # Hz
    window_size: int = 1024  # samples, power of two
    elapsed_s: float = 0.0  # seconds

    def validate(self) -> None:
        if not (math.isfinite(self.sample_rate) and self.sample_rate > 0):
            raise ConfigError(f"sampling frequency must be > 0, got {self.sample_rate}")
        if not is_power_of_two(self.window_size):
            raise ConfigError(f"window size must be a power of two, got {self.window_size}")
        if not (math.isfinite(self.elapsed_s) and self.elapsed_s >= 0):
            raise ConfigError(f"elapsed time must be >= 0, got {self.elapsed_s}")


@dataclass(frozen=True)
class SessionSnapshot:
    name: str
    sample_rate: float
    window_size: int
    elapsed_s: float  # as supplied by the caller
    steps_elapsed_s: float  # time the step count was computed over
    steps: int
    status: CadenceStatus
    frequency_hz: Optional[float]
    bin_index: Optional[int]
    snr_db: float
    confidence: float
    buffer: Tuple[float, ...] = field(repr=False)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "samplingFrequency": self.sample_rate,
            "fftSize": self.window_size,
            "time": self.elapsed_s,
            "stepsTime": self.steps_elapsed_s,
            "steps": self.steps,
            "status": self.status.value,
            "frequency": self.frequency_hz,
            "binIndex": self.bin_index,
            "snr": self.snr_db,
            "confidence": self.confidence,
            "verticalAccelerationBuffer": list(self.buffer),
        }


class SessionState:
    """Configuration, sample window and step count of one user session."""

    def __init__(
        self,
        name: str,
        config: Optional[SessionConfig] = None,
        band: Optional[CadenceBand] = None,
        policy: ResetPolicy = ResetPolicy.PER_BATCH,
        time_source: TimeSource = TimeSource.CALLER,
    ) -> None:
        cfg = config or SessionConfig()
        cfg.validate()
        self.name = name
        self.band = band or CadenceBand()
        self.policy = ResetPolicy(policy)
        self.time_source = TimeSource(time_source)
        self._lock = threading.Lock()
        self._config = cfg
        self._buffer = SignalBuffer(cfg.window_size)
        self._estimate: CadenceEstimate = NO_ESTIMATE
        self._status = CadenceStatus.FILLING

    @property
    def config(self) -> SessionConfig:
        return self._config

    def ingest(
        self,
        config: SessionConfig,
        samples: Iterable[Optional[float]],
    ) -> SessionSnapshot:
        """Apply a batch: reconfigure, push samples, recompute, report.

        Raises:
            ConfigError: before anything is mutated, if ``config`` is invalid.
        """
        config.validate()
        batch = list(samples)
        with self._lock:
            self._reconfigure(config)
            self._buffer.fill(batch, self.policy)
            self._recompute()
            logger.info(
                "session %s: %d samples in, %d/%d buffered, %s, %d steps",
                self.name,
                len(batch),
                len(self._buffer),
                self._buffer.capacity,
                self._status.value,
                self._estimate.steps,
            )
            return self._snapshot()

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot()

    def reset(self) -> None:
        """Drop buffered samples and the last estimate."""
        with self._lock:
            self._buffer.clear()
            self._estimate = NO_ESTIMATE
            self._status = CadenceStatus.FILLING

    # callers hold self._lock for everything below

    def _elapsed_s(self) -> float:
        cfg = self._config
        if self.time_source is TimeSource.WINDOW:
            return cfg.window_size / cfg.sample_rate
        return cfg.elapsed_s

    def _reconfigure(self, config: SessionConfig) -> None:
        if config.window_size != self._buffer.capacity:
            old = self._buffer.to_list()
            self._buffer = SignalBuffer(config.window_size)
            self._buffer.extend(old)  # keeps the most recent samples that fit
            logger.info(
                "session %s: window size %d -> %d",
                self.name,
                self._config.window_size,
                config.window_size,
            )
        self._config = config

    def _recompute(self) -> None:
        if not self._buffer.is_full:
            self._estimate = NO_ESTIMATE
            self._status = CadenceStatus.FILLING
            return
        spectrum = analyze(self._buffer.to_array(), self._config.sample_rate)
        self._estimate = estimate(spectrum, self.band, self._elapsed_s())
        self._status = (
            CadenceStatus.READY if self._estimate.found else CadenceStatus.NO_SIGNAL
        )

    def _snapshot(self) -> SessionSnapshot:
        cfg = self._config
        est = self._estimate
        return SessionSnapshot(
            name=self.name,
            sample_rate=cfg.sample_rate,
            window_size=cfg.window_size,
            elapsed_s=cfg.elapsed_s,
            steps_elapsed_s=self._elapsed_s(),
            steps=est.steps,
            status=self._status,
            frequency_hz=est.frequency_hz,
            bin_index=est.bin_index,
            snr_db=est.snr_db,
            confidence=est.confidence,
            buffer=tuple(self._buffer.to_list()),
        )
