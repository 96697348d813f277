"""Frame dataclass for the wavewatch FrameSource abstraction."""

from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np


def downscale(image: np.ndarray, output_size: Optional[tuple[int, int]]) -> np.ndarray:
    """Shrink ``image`` to ``(width, height)`` with area averaging.

    Returns the image untouched when ``output_size`` is ``None`` or
    already matches.
    """
    if output_size is None:
        return image
    width, height = output_size
    if image.shape[1] == width and image.shape[0] == height:
        return image
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)


@dataclass
class Frame:
    """A single video frame with metadata.

    Attributes:
        image: BGR uint8 numpy array of shape (H, W, 3).
        timestamp: Seconds since the source was opened.
        frame_number: Sequential counter starting from 0.
        source_name: Human-readable identifier, e.g. ``"webcam:0"`` or
            ``"file:video.mp4"``.
        width: Frame width in pixels.
        height: Frame height in pixels.
    """

    image: np.ndarray
    timestamp: float
    frame_number: int
    source_name: str
    width: int
    height: int

    def to_rgba(self) -> np.ndarray:
        """The image as R,G,B,A bytes with an opaque alpha channel."""
        return cv2.cvtColor(self.image, cv2.COLOR_BGR2RGBA)
