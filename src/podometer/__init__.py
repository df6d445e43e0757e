"""FFT-based step counter for vertical-acceleration streams."""

__all__ = [
    "buffer",
    "spectrum",
    "cadence",
    "quality",
    "session",
    "registry",
    "settings",
    "service",
]

__version__ = "0.1.0"
