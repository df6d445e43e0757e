"""Exception types raised by the step-counting core."""

from __future__ import annotations


class PodometerError(Exception):
    """Base class for all podometer errors."""


class ConfigError(PodometerError, ValueError):
    """Invalid sampling rate, window size or cadence band."""


class SessionNotFound(PodometerError, KeyError):
    """No session registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown session: {self.name!r}"
