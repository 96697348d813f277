"""8-bit greyscale frame with in-place, saturating per-pixel arithmetic."""

import math
from typing import Dict, Optional, Sequence

import numpy as np


# Sample value meaning "no change" in a difference frame
MIDPOINT = 128
WHITE = 255
BLACK = 0
# Sum of a 3x3 neighbourhood that is entirely white
NEIGHBOURHOOD_MAX = 9 * WHITE


class FrameShapeError(ValueError):
    """Raised when two frames combined pixel-wise have different sizes."""


def allocate_samples(width: int, height: int) -> np.ndarray:
    """Return a zero-filled ``(height, width)`` uint8 buffer."""
    return np.zeros((height, width), dtype=np.uint8)


def _saturate(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer and clamp into 0..255."""
    return np.clip(np.rint(values), BLACK, WHITE).astype(np.uint8)


class IntensityFrame:
    """A width x height grid of 8-bit intensity samples.

    Samples live in a ``(height, width)`` uint8 numpy array, so
    ``samples.ravel()`` gives the row-major sequence. Every operation
    mutates the frame in place and clamps its results to 0..255, the way
    a clamped byte array would.

    Example::

        diff = IntensityFrame()
        diff.copy_from(current)
        diff.subtract(previous)
        diff.increase_contrast(3.0)
        diff.binarize()
    """

    def __init__(self, width: int = 0, height: int = 0):
        self.width = 0
        self.height = 0
        self.samples = allocate_samples(0, 0)
        self.resize_if_needed(width, height)

    @classmethod
    def from_array(cls, samples: np.ndarray) -> "IntensityFrame":
        """Build a frame holding a copy of a 2D array of 0..255 values."""
        samples = np.asarray(samples)
        if samples.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {samples.shape}")
        frame = cls(samples.shape[1], samples.shape[0])
        frame.samples[...] = np.clip(samples, BLACK, WHITE)
        return frame

    def __repr__(self) -> str:
        return f"IntensityFrame({self.width}x{self.height})"

    @property
    def shape(self) -> tuple[int, int]:
        """``(height, width)``, matching the sample array."""
        return (self.height, self.width)

    def resize_if_needed(self, width: int, height: int) -> None:
        """Reallocate and zero the samples if the dimensions differ."""
        if width != self.width or height != self.height:
            self.width = width
            self.height = height
            self.samples = allocate_samples(width, height)

    def _require_same_shape(self, other: "IntensityFrame") -> None:
        if other.shape != self.shape:
            raise FrameShapeError(
                f"Frame size mismatch: {self.width}x{self.height} "
                f"vs {other.width}x{other.height}"
            )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_from_color_frame(self, color_frame: np.ndarray) -> None:
        """Average the first three channels of an RGB(A) image.

        Alpha, if present, is ignored. The average is an integer division
        by three, so the channel order does not matter.
        """
        if color_frame.ndim != 3 or color_frame.shape[2] not in (3, 4):
            raise ValueError(
                f"Expected an (H, W, 3) or (H, W, 4) image, got {color_frame.shape}"
            )
        height, width = color_frame.shape[:2]
        self.resize_if_needed(width, height)
        rgb_total = color_frame[:, :, :3].astype(np.uint16).sum(axis=2)
        self.samples[...] = rgb_total // 3

    def copy_from(self, other: "IntensityFrame") -> None:
        self.resize_if_needed(other.width, other.height)
        np.copyto(self.samples, other.samples)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def subtract(self, other: "IntensityFrame") -> None:
        """Signed difference re-centred on 128 (128 = unchanged pixel)."""
        self._require_same_shape(other)
        delta = self.samples.astype(np.int16) - other.samples.astype(np.int16)
        self.samples[...] = np.clip(delta + MIDPOINT, BLACK, WHITE)

    def increase_contrast(self, factor: float) -> None:
        """Push samples away from the 128 midpoint by ``factor``."""
        if not math.isfinite(factor) or factor < 0:
            raise ValueError(f"Contrast factor must be finite and >= 0, got {factor}")
        values = self.samples.astype(np.float64)
        self.samples[...] = _saturate(values + (values - MIDPOINT) * factor)

    def binarize(self, white_threshold: int = MIDPOINT) -> None:
        """Samples >= ``white_threshold`` become 255, all others 0."""
        self.samples[...] = np.where(self.samples >= white_threshold, WHITE, BLACK)

    def sum(self) -> int:
        return int(self.samples.sum(dtype=np.int64))

    def suppress_isolated_pixels(self, neighbour_fraction: float) -> None:
        """3x3 neighbourhood vote removing lone pixels.

        A pixel becomes 255 when the sum over itself and its eight
        neighbours reaches ``neighbour_fraction`` of the largest possible
        sum (9 * 255), otherwise 0. Neighbours outside the frame count as
        0. The vote reads from a snapshot, so the result does not depend
        on visiting order.
        """
        if self.samples.size == 0:
            return
        padded = np.pad(self.samples.astype(np.int32), 1, mode="constant")
        h, w = self.shape
        neighbourhood = np.zeros((h, w), dtype=np.int32)
        for dy in range(3):
            for dx in range(3):
                neighbourhood += padded[dy:dy + h, dx:dx + w]
        self.samples = np.where(
            neighbourhood >= neighbour_fraction * NEIGHBOURHOOD_MAX, WHITE, BLACK
        ).astype(np.uint8)

    # ------------------------------------------------------------------
    # Visualisation
    # ------------------------------------------------------------------

    def render_debug(
        self,
        level_map: Optional[Dict[int, Sequence[int]]] = None,
        default_color: Optional[Sequence[int]] = None,
        target: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """Export the samples as an opaque RGBA image.

        Args:
            level_map: Optional mapping of exact sample value to an RGB
                triple. Without it every sample is drawn as grey.
            default_color: RGB used for values missing from ``level_map``.
                When ``None`` those values are drawn as grey.
            target: Optional ``(H, W, 4)`` uint8 array to draw into.

        Returns:
            The RGBA image (``target`` itself when one was given).
        """
        if target is None:
            target = np.empty((self.height, self.width, 4), dtype=np.uint8)
        elif target.shape != (self.height, self.width, 4):
            raise FrameShapeError(
                f"Render target shape {target.shape} does not match "
                f"{self.width}x{self.height}"
            )

        grey = np.arange(256, dtype=np.uint8)
        lookup = np.stack([grey, grey, grey], axis=1)
        if level_map is not None:
            if default_color is not None:
                lookup[:] = default_color
            for level, color in level_map.items():
                lookup[level] = color

        target[:, :, :3] = lookup[self.samples]
        target[:, :, 3] = WHITE
        return target
