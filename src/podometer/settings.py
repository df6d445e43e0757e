"""Deployment settings, read from ``PODOMETER_*`` environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .buffer import ResetPolicy
from .cadence import CadenceBand
from .session import SessionConfig, SessionState, TimeSource


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PODOMETER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_parse_none_str="none",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    # One policy per deployment; sessions never mix them.
    reset_policy: ResetPolicy = ResetPolicy.PER_BATCH
    time_source: TimeSource = TimeSource.CALLER
    band_min_hz: float = Field(1.0, ge=0.0)
    band_max_hz: Optional[float] = Field(3.0, gt=0.0)  # None: up to Nyquist

    default_sample_rate: int = Field(100, gt=0)
    default_window_size: int = Field(1024, gt=0)

    @model_validator(mode="after")
    def _check(self) -> "Settings":
        # raises ConfigError (a ValueError) for bad band bounds or window size
        self.band()
        self.default_config().validate()
        return self

    def band(self) -> CadenceBand:
        return CadenceBand(self.band_min_hz, self.band_max_hz)

    def default_config(self) -> SessionConfig:
        return SessionConfig(
            sample_rate=self.default_sample_rate,
            window_size=self.default_window_size,
        )

    def new_session(self, name: str, config: SessionConfig) -> SessionState:
        return SessionState(
            name,
            config,
            band=self.band(),
            policy=self.reset_policy,
            time_source=self.time_source,
        )
