"""Core types and enums for wavewatch."""

from .enums import (
    MonitorType,
    WaveState,
)

from .types import (
    MonitorOutput,
    WaveOutput,
)

__all__ = [
    # Enums
    "MonitorType",
    "WaveState",
    # Monitor outputs
    "MonitorOutput",
    "WaveOutput",
]
