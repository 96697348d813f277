"""Frame sources feeding the wave monitor.

Quick start::

    from wavewatch.sources import WebcamSource

    with WebcamSource(0, output_size=(40, 30)) as src:
        for frame in src:
            output = await monitor.update(frame=frame.to_rgba())
"""

from wavewatch.sources.frame import Frame, downscale
from wavewatch.sources.base import FrameSource
from wavewatch.sources.webcam import WebcamSource
from wavewatch.sources.video_file import VideoFileSource
from wavewatch.utils.config import CameraConfig


def open_source(config: CameraConfig) -> FrameSource:
    """Build (but do not open) the source described by ``config``."""
    if config.video_path:
        return VideoFileSource(
            config.video_path,
            loop=config.loop,
            output_size=config.output_size,
        )
    return WebcamSource(
        device=config.device,
        fps=config.fps,
        width=config.capture_width,
        height=config.capture_height,
        output_size=config.output_size,
    )


__all__ = [
    "Frame",
    "FrameSource",
    "WebcamSource",
    "VideoFileSource",
    "downscale",
    "open_source",
]
