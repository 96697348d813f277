"""Core data types for wavewatch."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict

import numpy as np

from .enums import MonitorType, WaveState


# ============================================================================
# Monitor Outputs
# ============================================================================

@dataclass
class MonitorOutput:
    """Base class for monitor outputs."""
    monitor_type: MonitorType
    timestamp: datetime = field(default_factory=datetime.now)
    is_valid: bool = True
    error: Optional[str] = None


@dataclass
class WaveOutput(MonitorOutput):
    """Output from the wave monitor."""
    monitor_type: MonitorType = field(default=MonitorType.WAVE)
    state: WaveState = WaveState.PRIMING
    is_waving: bool = False
    wave_energy: int = 0
    wave_pixels: int = 0
    active_pixels: int = 0
    max_transition_count: int = 0
    tick: int = 0
    # View name -> RGBA image, only filled when debug rendering is enabled
    debug_frames: Dict[str, np.ndarray] = field(default_factory=dict)
