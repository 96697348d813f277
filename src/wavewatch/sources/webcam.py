"""Live webcam frames."""

from typing import Optional

import cv2

from wavewatch.sources.base import FrameSource


class WebcamSource(FrameSource):
    """Frames from a webcam / USB camera, shrunk to ``output_size``.

    Args:
        device: Device index or a V4L2 path such as ``"/dev/video0"``.
        fps: Capture rate requested from the driver.
        width: Requested capture width (``None`` = camera default).
        height: Requested capture height (``None`` = camera default).
        output_size: ``(width, height)`` of the delivered frames.
    """

    is_live = True

    def __init__(
        self,
        device: int | str = 0,
        fps: float = 20.0,
        width: Optional[int] = None,
        height: Optional[int] = None,
        output_size: Optional[tuple[int, int]] = (40, 30),
    ):
        super().__init__(f"webcam:{device}", output_size)
        self.device = device
        self.capture_fps = fps
        self.capture_size = (width, height)

    def _open_capture(self) -> cv2.VideoCapture:
        cap = cv2.VideoCapture(self.device)
        if cap.isOpened():
            width, height = self.capture_size
            if width is not None:
                cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            if height is not None:
                cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
            cap.set(cv2.CAP_PROP_FPS, self.capture_fps)
        return cap
