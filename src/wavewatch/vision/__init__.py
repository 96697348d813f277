"""Per-pixel wave detection on low resolution greyscale frames.

Quick start::

    from wavewatch.vision import IntensityFrame, WaveDetectionPipeline

    pipeline = WaveDetectionPipeline()
    result = pipeline.process_color_frames(current_rgba, previous_rgba)
    if result.is_waving:
        ...
"""

from wavewatch.vision.intensity_frame import (
    IntensityFrame,
    FrameShapeError,
    allocate_samples,
)
from wavewatch.vision.transition_counter import TransitionCounter
from wavewatch.vision.pipeline import WaveDetectionPipeline, WaveDetectionResult
from wavewatch.vision.render import (
    DEBUG_VIEWS,
    EXTREMES_LEVEL_MAP,
    RAINBOW_LEVEL_MAP,
    DebugView,
    compose_debug_mosaic,
    render_views,
)

__all__ = [
    "IntensityFrame",
    "FrameShapeError",
    "allocate_samples",
    "TransitionCounter",
    "WaveDetectionPipeline",
    "WaveDetectionResult",
    "DEBUG_VIEWS",
    "EXTREMES_LEVEL_MAP",
    "RAINBOW_LEVEL_MAP",
    "DebugView",
    "compose_debug_mosaic",
    "render_views",
]
