"""Per-pixel state machine counting black/white transitions."""

import numpy as np

from wavewatch.vision.intensity_frame import (
    BLACK,
    WHITE,
    IntensityFrame,
    allocate_samples,
)


class TransitionCounter:
    """Counts how often each pixel flips between the two extremes.

    1. ``counts`` holds the number of transitions seen per pixel (0 = idle).
    2. When an idle pixel reads full black or white its count goes to 1.
    3. Reading the opposite extreme increments the count.
    4. If more than ``max_interval`` ticks pass between transitions the
       pixel goes back to idle.

    ``next_expected`` stores the extreme that will trigger the next
    increment (always 0 or 255 for an active pixel) and ``staleness`` the
    ticks elapsed since the last accepted transition. Both saturate like
    the counts, as 8-bit values.
    """

    def __init__(self):
        self.counts = IntensityFrame()
        self.next_expected = allocate_samples(0, 0)
        self.staleness = allocate_samples(0, 0)

    def __repr__(self) -> str:
        return (
            f"TransitionCounter({self.width}x{self.height}, "
            f"active={self.active_pixels()})"
        )

    @property
    def width(self) -> int:
        return self.counts.width

    @property
    def height(self) -> int:
        return self.counts.height

    def resize_if_needed(self, width: int, height: int) -> None:
        if width != self.width or height != self.height:
            self.counts.resize_if_needed(width, height)
            self.next_expected = allocate_samples(width, height)
            self.staleness = allocate_samples(width, height)

    def update(self, source: IntensityFrame, max_interval: int = 10) -> None:
        """Advance every pixel by one tick using a binarized frame."""
        self.resize_if_needed(source.width, source.height)

        src = source.samples
        count = self.counts.samples

        # All masks come from the state before this tick
        idle = count == 0
        start_black = idle & (src == BLACK)
        start_white = idle & (src == WHITE)
        active = ~idle

        timer = np.minimum(self.staleness.astype(np.int16) + 1, WHITE)
        expired = active & (timer > max_interval)
        advance = active & ~expired & (src == self.next_expected)

        self.staleness[active] = timer[active]

        started = start_black | start_white
        count[started] = 1
        self.next_expected[start_black] = WHITE
        self.next_expected[start_white] = BLACK
        self.staleness[started] = 0

        count[expired] = 0

        count[advance] = np.minimum(count[advance].astype(np.int16) + 1, WHITE)
        self.next_expected[advance] = WHITE - self.next_expected[advance]
        self.staleness[advance] = 0

    def reset(self) -> None:
        """Return every pixel to idle, keeping the current size."""
        self.counts.samples.fill(0)
        self.next_expected.fill(0)
        self.staleness.fill(0)

    def active_pixels(self) -> int:
        return int(np.count_nonzero(self.counts.samples))

    def max_count(self) -> int:
        if self.counts.samples.size == 0:
            return 0
        return int(self.counts.samples.max())
