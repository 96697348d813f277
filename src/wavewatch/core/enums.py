"""Core enumerations for wavewatch."""

from enum import Enum, auto


class MonitorType(Enum):
    """Types of monitors in the system."""
    WAVE = auto()


class WaveState(Enum):
    """Debounced state reported by the wave monitor."""
    PRIMING = auto()  # waiting for a previous frame
    IDLE = auto()
    WAVING = auto()
