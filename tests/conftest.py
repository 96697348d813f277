"""Pytest configuration for wavewatch tests."""

import numpy as np
import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "camera: mark test as requiring a real webcam")


@pytest.fixture
def solid_rgba():
    """Factory for a uniformly coloured RGBA frame."""

    def _make(width: int, height: int, value: int, alpha: int = 255) -> np.ndarray:
        frame = np.full((height, width, 4), value, dtype=np.uint8)
        frame[:, :, 3] = alpha
        return frame

    return _make


@pytest.fixture
def flicker_frames(solid_rgba):
    """Bright and dark 6x6 frames; alternating them looks like a wave."""
    return solid_rgba(6, 6, 200), solid_rgba(6, 6, 50)
