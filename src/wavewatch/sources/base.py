"""Base class for OpenCV-backed frame sources."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Any, Iterator, Optional

import cv2
import numpy as np

from wavewatch.sources.frame import Frame, downscale

logger = logging.getLogger(__name__)


class FrameSource(ABC):
    """A ``cv2.VideoCapture`` that hands small frames to the wave monitor.

    Subclasses only say how the capture is created (and, for files, how
    the next image is fetched). Every delivered image is shrunk to
    ``output_size`` so the monitor always sees the processing resolution.

    Usage::

        with VideoFileSource("wave.mp4") as src:
            for frame in src:
                output = await monitor.update(frame=frame.to_rgba())
    """

    is_live = False

    def __init__(self, name: str, output_size: Optional[tuple[int, int]] = (40, 30)):
        self.name = name
        self.output_size = output_size
        self._cap: Optional[cv2.VideoCapture] = None
        self._frame_count = 0
        self._opened_at = 0.0

    @abstractmethod
    def _open_capture(self) -> cv2.VideoCapture:
        """Create the underlying capture (it may fail to open)."""

    def _next_image(self) -> Optional[np.ndarray]:
        ret, image = self._cap.read()
        return image if ret else None

    def open(self) -> None:
        if self._cap is not None:
            return
        cap = self._open_capture()
        if not cap.isOpened():
            raise RuntimeError(f"Could not open frame source: {self.name}")
        self._cap = cap
        self._frame_count = 0
        self._opened_at = time.monotonic()
        logger.info("Opened %s (frames scaled to %s)", self.name, self.output_size)

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Closed %s", self.name)

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def read(self) -> Optional[Frame]:
        """Next frame, or ``None`` when closed, exhausted or on a failed read."""
        if self._cap is None:
            return None
        image = self._next_image()
        if image is None:
            logger.debug("No frame from %s", self.name)
            return None

        image = downscale(image, self.output_size)
        frame = Frame(
            image=image,
            timestamp=time.monotonic() - self._opened_at,
            frame_number=self._frame_count,
            source_name=self.name,
            width=image.shape[1],
            height=image.shape[0],
        )
        self._frame_count += 1
        return frame

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.read, None)

    def as_input_provider(self) -> Callable[[], Dict[str, Any]]:
        """Inputs callable for :meth:`BaseMonitor.start_continuous`.

        Each call returns ``{"frame": <RGBA ndarray>}``, or
        ``{"frame": None}`` when no frame could be read.
        """

        def _provider() -> Dict[str, Any]:
            frame = self.read()
            return {"frame": frame.to_rgba() if frame is not None else None}

        return _provider
