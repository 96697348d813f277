"""Tests for IntensityFrame."""

import numpy as np
import pytest

from wavewatch.vision import IntensityFrame, FrameShapeError
from wavewatch.vision.render import RAINBOW_LEVEL_MAP


def frame_of(rows):
    return IntensityFrame.from_array(np.array(rows, dtype=np.int32))


class TestSizing:
    def test_new_frame_is_empty(self):
        frame = IntensityFrame()
        assert frame.width == 0
        assert frame.height == 0
        assert frame.samples.size == 0
        assert frame.sum() == 0

    def test_resize_zero_fills(self):
        frame = frame_of([[1, 2], [3, 4]])
        frame.resize_if_needed(3, 2)
        assert frame.shape == (2, 3)
        assert frame.samples.size == 6
        assert frame.sum() == 0

    def test_resize_same_size_keeps_samples(self):
        frame = frame_of([[1, 2], [3, 4]])
        frame.resize_if_needed(2, 2)
        assert frame.samples.tolist() == [[1, 2], [3, 4]]

    def test_samples_are_row_major(self):
        frame = frame_of([[1, 2, 3], [4, 5, 6]])
        assert frame.width == 3
        assert frame.height == 2
        assert frame.samples.ravel().tolist() == [1, 2, 3, 4, 5, 6]


class TestLoadFromColorFrame:
    def test_unweighted_average(self):
        rgba = np.array([[[10, 20, 30, 255], [255, 255, 254, 0]]], dtype=np.uint8)
        frame = IntensityFrame()
        frame.load_from_color_frame(rgba)
        assert frame.shape == (1, 2)
        # 60 // 3 and 764 // 3
        assert frame.samples.tolist() == [[20, 254]]

    def test_alpha_ignored(self, solid_rgba):
        opaque = IntensityFrame()
        opaque.load_from_color_frame(solid_rgba(4, 3, 90, alpha=255))
        clear = IntensityFrame()
        clear.load_from_color_frame(solid_rgba(4, 3, 90, alpha=0))
        assert np.array_equal(opaque.samples, clear.samples)

    def test_three_channel_input(self):
        rgb = np.full((3, 4, 3), 77, dtype=np.uint8)
        frame = IntensityFrame()
        frame.load_from_color_frame(rgb)
        assert frame.shape == (3, 4)
        assert (frame.samples == 77).all()

    def test_rejects_greyscale_input(self):
        with pytest.raises(ValueError):
            IntensityFrame().load_from_color_frame(np.zeros((3, 4), dtype=np.uint8))


class TestCopyFrom:
    def test_copy_resizes_and_copies(self):
        source = frame_of([[5, 6, 7]])
        target = IntensityFrame(10, 10)
        target.copy_from(source)
        assert target.shape == source.shape
        assert np.array_equal(target.samples, source.samples)

    def test_copy_is_idempotent(self):
        source = frame_of([[0, 128], [255, 9]])
        target = IntensityFrame()
        target.copy_from(source)
        once = target.samples.copy()
        target.copy_from(source)
        assert np.array_equal(target.samples, once)

    def test_copy_does_not_alias(self):
        source = frame_of([[1, 2]])
        target = IntensityFrame()
        target.copy_from(source)
        source.samples[0, 0] = 99
        assert target.samples[0, 0] == 1


class TestSubtract:
    def test_centred_on_128(self):
        frame = frame_of([[100, 90, 128]])
        frame.subtract(frame_of([[90, 100, 128]]))
        assert frame.samples.tolist() == [[138, 118, 128]]

    def test_saturates(self):
        frame = frame_of([[200, 50]])
        frame.subtract(frame_of([[50, 200]]))
        assert frame.samples.tolist() == [[255, 0]]

    def test_neutral_frame_leaves_difference_unchanged(self):
        diff = frame_of([[0, 37, 128, 200, 255]])
        before = diff.samples.copy()
        diff.subtract(frame_of([[128] * 5]))
        assert np.array_equal(diff.samples, before)

    def test_zero_frame_adds_midpoint(self):
        diff = frame_of([[0, 100, 200]])
        diff.subtract(frame_of([[0, 0, 0]]))
        assert diff.samples.tolist() == [[128, 228, 255]]

    def test_size_mismatch_raises(self):
        with pytest.raises(FrameShapeError):
            IntensityFrame(4, 3).subtract(IntensityFrame(3, 4))

    def test_does_not_modify_other(self):
        other = frame_of([[10, 20]])
        frame_of([[30, 40]]).subtract(other)
        assert other.samples.tolist() == [[10, 20]]


class TestIncreaseContrast:
    def test_zero_factor_is_identity(self):
        frame = IntensityFrame.from_array(np.arange(256).reshape(16, 16))
        frame.increase_contrast(0)
        assert np.array_equal(frame.samples, np.arange(256).reshape(16, 16))

    def test_pushes_away_from_midpoint(self):
        frame = frame_of([[138, 100, 128, 250, 10]])
        frame.increase_contrast(1.0)
        assert frame.samples.tolist() == [[148, 72, 128, 255, 0]]

    def test_fractional_factor_rounds(self):
        frame = frame_of([[130, 126]])
        frame.increase_contrast(0.5)
        assert frame.samples.tolist() == [[131, 125]]

    def test_negative_factor_rejected(self):
        with pytest.raises(ValueError):
            frame_of([[1]]).increase_contrast(-1.0)

    @pytest.mark.parametrize("factor", [float("inf"), float("nan")])
    def test_non_finite_factor_rejected(self, factor):
        frame = frame_of([[128, 200, 20]])
        with pytest.raises(ValueError):
            frame.increase_contrast(factor)
        assert frame.samples.tolist() == [[128, 200, 20]]


class TestBinarize:
    def test_default_threshold_boundary(self):
        frame = frame_of([[0, 127, 128, 255]])
        frame.binarize()
        assert frame.samples.tolist() == [[0, 0, 255, 255]]

    def test_binarize_is_idempotent(self):
        frame = IntensityFrame.from_array(np.arange(256).reshape(16, 16))
        frame.binarize(128)
        once = frame.samples.copy()
        frame.binarize(128)
        assert np.array_equal(frame.samples, once)
        assert set(np.unique(frame.samples)) <= {0, 255}

    def test_count_threshold(self):
        frame = frame_of([[0, 3, 4, 9]])
        frame.binarize(4)
        assert frame.samples.tolist() == [[0, 0, 255, 255]]

    def test_zero_threshold_whitens_everything(self):
        frame = frame_of([[0, 1, 200]])
        frame.binarize(0)
        assert frame.samples.tolist() == [[255, 255, 255]]


class TestSum:
    def test_sum_is_not_clamped(self):
        frame = IntensityFrame.from_array(np.full((30, 40), 255))
        assert frame.sum() == 40 * 30 * 255
        assert isinstance(frame.sum(), int)


class TestSuppressIsolatedPixels:
    def test_isolated_pixel_removed(self):
        samples = np.zeros((5, 5))
        samples[2, 2] = 255
        frame = IntensityFrame.from_array(samples)
        frame.suppress_isolated_pixels(0.5)
        assert frame.sum() == 0

    def test_solid_block_survives(self):
        samples = np.zeros((7, 7))
        samples[2:5, 2:5] = 255
        frame = IntensityFrame.from_array(samples)
        frame.suppress_isolated_pixels(0.5)
        assert frame.samples[3, 3] == 255
        # Edge centres see 6 of 9 white, corners only 4
        assert frame.samples[2, 3] == 255
        assert frame.samples[2, 2] == 0
        assert frame.samples[0, 0] == 0

    def test_zero_fraction_whitens_everything(self):
        frame = IntensityFrame(4, 3)
        frame.suppress_isolated_pixels(0.0)
        assert (frame.samples == 255).all()

    def test_border_treats_outside_as_black(self):
        frame = IntensityFrame.from_array(np.full((4, 4), 255))
        frame.suppress_isolated_pixels(0.5)
        # Corners have 4 white neighbours inside the frame, edges 6
        assert frame.samples[0, 0] == 0
        assert frame.samples[0, 1] == 255
        assert frame.samples[1, 1] == 255

    def test_result_independent_of_visit_order(self):
        samples = np.zeros((1, 6))
        samples[0, :3] = 255
        frame = IntensityFrame.from_array(samples)
        frame.suppress_isolated_pixels(0.1)
        # An in-place pass would let the newly whitened pixel 3 whiten pixel 4
        assert frame.samples.tolist() == [[255, 255, 255, 255, 0, 0]]

    def test_empty_frame(self):
        frame = IntensityFrame()
        frame.suppress_isolated_pixels(0.5)
        assert frame.samples.size == 0


class TestRenderDebug:
    def test_greyscale(self):
        rgba = frame_of([[0, 128], [255, 7]]).render_debug()
        assert rgba.shape == (2, 2, 4)
        assert rgba[0, 1].tolist() == [128, 128, 128, 255]
        assert (rgba[:, :, 3] == 255).all()

    def test_level_map_with_default(self):
        rgba = frame_of([[2, 9]]).render_debug(RAINBOW_LEVEL_MAP, (255, 255, 255))
        assert rgba[0, 0, :3].tolist() == [0, 255, 0]
        assert rgba[0, 1, :3].tolist() == [255, 255, 255]

    def test_level_map_without_default_falls_back_to_grey(self):
        rgba = frame_of([[0, 90]]).render_debug({0: (10, 20, 30)})
        assert rgba[0, 0, :3].tolist() == [10, 20, 30]
        assert rgba[0, 1, :3].tolist() == [90, 90, 90]

    def test_renders_into_target(self):
        target = np.zeros((1, 2, 4), dtype=np.uint8)
        result = frame_of([[50, 60]]).render_debug(target=target)
        assert result is target
        assert target[0, 1].tolist() == [60, 60, 60, 255]

    def test_target_shape_mismatch(self):
        with pytest.raises(FrameShapeError):
            frame_of([[1, 2]]).render_debug(target=np.zeros((2, 2, 4), dtype=np.uint8))

    def test_render_does_not_modify_samples(self):
        frame = frame_of([[3, 4]])
        frame.render_debug(RAINBOW_LEVEL_MAP, (1, 1, 1))
        assert frame.samples.tolist() == [[3, 4]]
