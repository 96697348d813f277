"""One tick of the wave detector: frame difference to waving decision."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from wavewatch.utils.config import WaveParameters
from wavewatch.vision.intensity_frame import IntensityFrame, WHITE
from wavewatch.vision.render import render_views
from wavewatch.vision.transition_counter import TransitionCounter


logger = logging.getLogger(__name__)


@dataclass
class WaveDetectionResult:
    """Summary of a single pipeline tick."""
    is_waving: bool
    wave_energy: int  # sum of the filtered wave map
    wave_pixels: int  # pixels left in the filtered wave map
    active_pixels: int  # pixels with a running transition count
    max_transition_count: int


class WaveDetectionPipeline:
    """Turns consecutive greyscale frames into a waving signal.

    Each call to :meth:`process` runs::

        diff      = current - previous (centred on 128)
        contrast  = diff pushed away from 128
        binary    = contrast thresholded at 128
        counter   <- binary
        wave_map  = counts >= transition_count_threshold
        filtered  = wave_map without isolated pixels
        waving    = sum(filtered) > 0

    The input frames are only read. All intermediate buffers belong to the
    pipeline and are overwritten on the next tick; the transition counter
    is the only state carried between ticks.
    """

    def __init__(self, parameters: Optional[WaveParameters] = None):
        self.parameters = parameters or WaveParameters()
        self.grey = IntensityFrame()
        self.diff = IntensityFrame()
        self.contrast = IntensityFrame()
        self.binary = IntensityFrame()
        self.transitions = TransitionCounter()
        self.wave_map = IntensityFrame()
        self.filtered_wave_map = IntensityFrame()
        self._previous_grey = IntensityFrame()
        self.tick_count = 0

    def process(
        self,
        current: IntensityFrame,
        previous: IntensityFrame,
        parameters: Optional[WaveParameters] = None,
    ) -> WaveDetectionResult:
        """Run one tick.

        Args:
            current: Greyscale frame captured at time t.
            previous: Greyscale frame captured at time t-1, same size.
            parameters: Overrides :attr:`parameters` for this tick only.

        Returns:
            WaveDetectionResult for this tick.

        Raises:
            FrameShapeError: If the two frames differ in size.
        """
        params = parameters or self.parameters

        self.grey.copy_from(current)

        self.diff.copy_from(current)
        self.diff.subtract(previous)

        self.contrast.copy_from(self.diff)
        self.contrast.increase_contrast(params.contrast_factor)

        self.binary.copy_from(self.contrast)
        self.binary.binarize()

        self.transitions.update(self.binary, params.max_interval)

        self.wave_map.copy_from(self.transitions.counts)
        self.wave_map.binarize(params.transition_count_threshold)

        self.filtered_wave_map.copy_from(self.wave_map)
        self.filtered_wave_map.suppress_isolated_pixels(params.outlier_threshold)

        wave_energy = self.filtered_wave_map.sum()
        self.tick_count += 1

        result = WaveDetectionResult(
            is_waving=wave_energy > 0,
            wave_energy=wave_energy,
            wave_pixels=wave_energy // WHITE,
            active_pixels=self.transitions.active_pixels(),
            max_transition_count=self.transitions.max_count(),
        )
        logger.debug(
            "tick %d: waving=%s wave_pixels=%d max_count=%d",
            self.tick_count, result.is_waving, result.wave_pixels,
            result.max_transition_count,
        )
        return result

    def process_color_frames(
        self,
        current: np.ndarray,
        previous: np.ndarray,
        parameters: Optional[WaveParameters] = None,
    ) -> WaveDetectionResult:
        """Convert two RGB(A) images to greyscale and run one tick."""
        current_grey = IntensityFrame()
        current_grey.load_from_color_frame(current)
        self._previous_grey.load_from_color_frame(previous)
        return self.process(current_grey, self._previous_grey, parameters)

    def reset(self) -> None:
        """Forget all transition history."""
        self.transitions.reset()
        self.tick_count = 0

    def buffers(self) -> Dict[str, IntensityFrame]:
        """Intermediate frames of the last tick, in pipeline order."""
        return {
            "grey": self.grey,
            "diff": self.diff,
            "contrast": self.contrast,
            "binary": self.binary,
            "transitions": self.transitions.counts,
            "wave_map": self.wave_map,
            "filtered_wave_map": self.filtered_wave_map,
        }

    def render_debug(self) -> Dict[str, np.ndarray]:
        """RGBA image per debug view, see :data:`render.DEBUG_VIEWS`."""
        return render_views(self.buffers())
