"""Monitor components for wavewatch."""

from .base_monitor import BaseMonitor
from .monitor_bus import MonitorEventBus, MonitorEvent
from .wave_monitor import WaveMonitor

__all__ = [
    # Base
    "BaseMonitor",
    "MonitorEventBus",
    "MonitorEvent",
    # Wave
    "WaveMonitor",
]
