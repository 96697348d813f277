"""Recorded video replayed through the detector."""

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from wavewatch.sources.base import FrameSource

logger = logging.getLogger(__name__)


class VideoFileSource(FrameSource):
    """Frames read sequentially from a video file.

    Args:
        path: Video file (mp4, avi, mkv, ...).
        max_frames: Stop after this many frames (``None`` = whole file).
        loop: Rewind on end of file instead of running dry.
        output_size: ``(width, height)`` of the delivered frames.
    """

    def __init__(
        self,
        path: str | Path,
        max_frames: Optional[int] = None,
        loop: bool = False,
        output_size: Optional[tuple[int, int]] = (40, 30),
    ):
        self.path = Path(path)
        super().__init__(f"file:{self.path.name}", output_size)
        self.max_frames = max_frames
        self.loop = loop

    def open(self) -> None:
        if self._cap is None and not self.path.exists():
            raise FileNotFoundError(f"Video file not found: {self.path}")
        super().open()

    def _open_capture(self) -> cv2.VideoCapture:
        return cv2.VideoCapture(str(self.path))

    def _next_image(self) -> Optional[np.ndarray]:
        if self.max_frames is not None and self._frame_count >= self.max_frames:
            return None
        image = super()._next_image()
        if image is None and self.loop and self._frame_count > 0:
            logger.debug("Rewinding %s", self.path)
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
            image = super()._next_image()
        return image
