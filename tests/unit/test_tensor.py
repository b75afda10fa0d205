"""Unit tests for raster -> tensor encoding."""

import unittest

import numpy as np
from PIL import Image

from ink_lib.domain.session import SessionSnapshot
from ink_lib.errors import InvalidInputError
from ink_lib.utils.rendering import capture
from ink_lib.utils.tensor import encode_raster, luminance


class TestEncodeRaster(unittest.TestCase):
    """Tests for encode_raster."""

    def test_shape_and_dtype(self):
        tensor = encode_raster(Image.new('RGB', (300, 300), (255, 255, 255)), 64)
        self.assertEqual(tensor.shape, (1, 64, 64, 1))
        self.assertEqual(tensor.dtype, np.float32)

    def test_white_paper_maps_to_zero(self):
        tensor = encode_raster(Image.new('RGB', (300, 300), (255, 255, 255)), 64)
        np.testing.assert_allclose(tensor, 0.0, atol=1e-5)

    def test_black_ink_maps_to_one(self):
        tensor = encode_raster(Image.new('RGB', (300, 300), (0, 0, 0)), 64)
        np.testing.assert_allclose(tensor, 1.0, atol=1e-5)

    def test_luma_weighting(self):
        """Pure red keeps only the red weight: 1 - 0.299."""
        tensor = encode_raster(Image.new('RGB', (100, 100), (255, 0, 0)), 32)
        np.testing.assert_allclose(tensor, 1.0 - 0.299, atol=1e-5)

    def test_custom_luma_weights(self):
        tensor = encode_raster(Image.new('RGB', (100, 100), (255, 0, 0)), 32,
                               luma_weights=(1.0, 0.0, 0.0))
        np.testing.assert_allclose(tensor, 0.0, atol=1e-5)

    def test_grayscale_image_accepted(self):
        tensor = encode_raster(Image.new('L', (120, 120), 0), 28)
        self.assertEqual(tensor.shape, (1, 28, 28, 1))
        np.testing.assert_allclose(tensor, 1.0, atol=1e-5)

    def test_rgba_alpha_ignored(self):
        tensor = encode_raster(Image.new('RGBA', (50, 50), (255, 255, 255, 0)), 16)
        np.testing.assert_allclose(tensor, 0.0, atol=1e-5)

    def test_out_of_range_values_clamped(self):
        """Values above 255 behave like 255, below 0 like 0."""
        bright = np.full((40, 40, 3), 400.0)
        dark = np.full((40, 40, 3), -50.0)
        np.testing.assert_allclose(encode_raster(bright, 16), 0.0, atol=1e-5)
        np.testing.assert_allclose(encode_raster(dark, 16), 1.0, atol=1e-5)

    def test_values_in_unit_interval_for_sharp_edges(self):
        """Bicubic overshoot at hard edges stays inside [0, 1]."""
        arr = np.full((300, 300, 3), 255, dtype=np.uint8)
        arr[:, 140:160] = 0
        tensor = encode_raster(arr, 64)
        self.assertGreaterEqual(tensor.min(), 0.0)
        self.assertLessEqual(tensor.max(), 1.0)

    def test_zero_size_raster_fails(self):
        with self.assertRaises(InvalidInputError):
            encode_raster(np.zeros((0, 0, 3)), 64)

    def test_malformed_raster_fails(self):
        with self.assertRaises(InvalidInputError):
            encode_raster(np.zeros((10, 10, 2)), 64)
        with self.assertRaises(InvalidInputError):
            encode_raster([[1, 2], [3, 4]], 64)

    def test_captured_ink_is_bright_at_center(self):
        snap = SessionSnapshot.from_list([[(10, 10), (50, 10), (90, 10)]])
        tensor = encode_raster(capture(snap), 64)
        # Canvas y=150 -> row 32; corners are paper
        self.assertGreater(tensor[0, 32, 32, 0], 0.5)
        self.assertLess(tensor[0, 0, 0, 0], 0.01)


class TestLuminance(unittest.TestCase):
    """Tests for the luminance helper."""

    def test_weights_sum_preserves_gray(self):
        rgb = np.full((2, 2, 3), 100.0)
        np.testing.assert_allclose(luminance(rgb), 100.0)

    def test_clamps_before_weighting(self):
        rgb = np.array([[[300.0, -20.0, 255.0]]])
        expected = 0.299 * 255 + 0.587 * 0 + 0.114 * 255
        np.testing.assert_allclose(luminance(rgb), expected)


if __name__ == '__main__':
    unittest.main()
