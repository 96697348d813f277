"""Wave gesture monitor.

Drives the per-pixel wave detection pipeline from a stream of colour
frames. Each update converts the frame to greyscale, pairs it with the
greyscale frame of the previous update and runs one pipeline tick.

The monitor reports one of three states:
- PRIMING: no previous frame yet (first update, or the frame size changed).
  These outputs are marked invalid since no comparison was made.
- IDLE: frames are flowing, nobody is waving
- WAVING: enough neighbouring pixels flip often enough to count as a wave
"""

import logging
from collections import deque
from datetime import datetime
from typing import Optional, Dict, Any

import numpy as np

from wavewatch.core import MonitorType, WaveOutput, WaveState
from wavewatch.monitors.base_monitor import BaseMonitor
from wavewatch.utils.config import WaveMonitorConfig, WaveParameters
from wavewatch.vision import IntensityFrame, WaveDetectionPipeline


logger = logging.getLogger(__name__)


class WaveMonitor(BaseMonitor):
    """Detects a waving hand in front of a low resolution camera.

    Example usage:
        monitor = WaveMonitor(WaveMonitorConfig(render_debug=True))
        output = await monitor.update(frame=rgba_frame)
        if output.is_waving:
            ...
    """

    def __init__(self, config: Optional[WaveMonitorConfig] = None):
        super().__init__(config or WaveMonitorConfig())
        self.wave_config: WaveMonitorConfig = self.config

        self.pipeline = WaveDetectionPipeline(self.wave_config.parameters)
        self._current = IntensityFrame()
        self._previous = IntensityFrame()
        self._primed = False

        self.state = WaveState.PRIMING
        self.tick = 0
        self.wave_history: deque = deque(maxlen=self.wave_config.history_size)

        logger.info(f"WaveMonitor initialized with {self.wave_config.parameters}")

    @property
    def monitor_type(self) -> MonitorType:
        """Return monitor type."""
        return MonitorType.WAVE

    @property
    def parameters(self) -> WaveParameters:
        return self.wave_config.parameters

    def set_parameters(self, parameters: WaveParameters) -> None:
        """Replace the tunables used from the next update on."""
        self.wave_config.parameters = parameters
        self.pipeline.parameters = parameters
        logger.info(f"Wave parameters updated: {parameters}")

    async def _process(
        self,
        frame: np.ndarray = None,
        parameters: Optional[WaveParameters] = None,
        **inputs,
    ) -> WaveOutput:
        """Process one colour frame.

        Args:
            frame: RGB(A) or BGR image, shape (H, W, 3|4)
            parameters: Tunables for this update only
            **inputs: Additional inputs (ignored)

        Returns:
            WaveOutput for this tick
        """
        if frame is None or not isinstance(frame, np.ndarray):
            return WaveOutput(
                is_valid=False,
                error="Invalid frame input",
                state=self.state,
                tick=self.tick,
            )
        return self.process_frame(frame, parameters)

    def process_frame(
        self,
        frame: np.ndarray,
        parameters: Optional[WaveParameters] = None,
    ) -> WaveOutput:
        """Synchronous tick, see :meth:`_process`."""
        # Overwrite the oldest buffer, then swap: this frame becomes current
        # and the last one becomes previous.
        self._previous.load_from_color_frame(frame)
        self._current, self._previous = self._previous, self._current

        if not self._primed or self._previous.shape != self._current.shape:
            if self._primed:
                logger.warning(
                    "Frame size changed from %dx%d to %dx%d, re-priming",
                    self._previous.width, self._previous.height,
                    self._current.width, self._current.height,
                )
                self.pipeline.reset()
            self._primed = True
            self._set_state(WaveState.PRIMING)
            return WaveOutput(
                is_valid=False,
                error="Waiting for previous frame",
                state=self.state,
                tick=self.tick,
            )

        result = self.pipeline.process(
            self._current, self._previous, parameters or self.parameters
        )
        self.tick += 1
        self._set_state(WaveState.WAVING if result.is_waving else WaveState.IDLE)

        self.wave_history.append({
            'timestamp': datetime.now(),
            'tick': self.tick,
            'is_waving': result.is_waving,
            'wave_pixels': result.wave_pixels,
            'max_transition_count': result.max_transition_count,
        })

        debug_frames = self.pipeline.render_debug() if self.wave_config.render_debug else {}

        return WaveOutput(
            state=self.state,
            is_waving=result.is_waving,
            wave_energy=result.wave_energy,
            wave_pixels=result.wave_pixels,
            active_pixels=result.active_pixels,
            max_transition_count=result.max_transition_count,
            tick=self.tick,
            debug_frames=debug_frames,
        )

    def _set_state(self, new_state: WaveState) -> None:
        if new_state == self.state:
            return
        if new_state == WaveState.WAVING:
            logger.info(f"Waving started at tick {self.tick}")
        elif self.state == WaveState.WAVING:
            logger.info(f"Waving stopped at tick {self.tick}")
        self.state = new_state

    def reset(self):
        """Forget all frames and transition history."""
        self.pipeline.reset()
        self._primed = False
        self.state = WaveState.PRIMING
        self.tick = 0
        self.wave_history.clear()
        logger.info("Wave monitor reset")

    def get_wave_statistics(self) -> Dict[str, Any]:
        """Summary of the recent ticks kept in the history window."""
        if not self.wave_history:
            return {}

        waving_ticks = sum(1 for entry in self.wave_history if entry['is_waving'])
        return {
            'total_ticks': len(self.wave_history),
            'waving_ticks': waving_ticks,
            'waving_ratio': waving_ticks / len(self.wave_history),
            'current_state': self.state.name,
            'peak_wave_pixels': max(entry['wave_pixels'] for entry in self.wave_history),
            'peak_transition_count': max(
                entry['max_transition_count'] for entry in self.wave_history
            ),
        }
