"""
Unit tests for dominant color extraction.

Tests the sampling stride, background filtering and averaging, including
the neutral fallback when nothing survives filtering.
"""

import numpy as np
from PIL import Image

from huematch.services.colors.extraction import (
    extract_dominant_color, filter_background_pixels,
    sample_dominant_color, sample_image_pixels
)


def solid(color, size=(200, 200), mode="RGBA"):
    return Image.new(mode, size, color)


class TestSampling:
    """Test pixel sampling at a fixed stride."""

    def test_sample_count_is_bounded(self):
        """Any source size is reduced to 100x100 / 16 = 625 samples."""
        for size in [(10, 10), (100, 100), (1920, 1080), (7, 300)]:
            samples = sample_image_pixels(solid((1, 2, 3, 255), size))
            assert samples.shape == (625, 4)

    def test_stride_walks_flattened_pixels(self):
        """Sample n is flattened pixel 16*n (row-major)."""
        cols, rows = np.meshgrid(np.arange(100), np.arange(100))
        arr = np.zeros((100, 100, 4), dtype=np.uint8)
        arr[..., 0] = cols
        arr[..., 1] = rows
        arr[..., 3] = 255
        image = Image.fromarray(arr)

        samples = sample_image_pixels(image)

        assert list(samples[0][:2]) == [0, 0]
        assert list(samples[1][:2]) == [16, 0]
        # Pixel 112 -> row 1, column 12
        assert list(samples[7][:2]) == [12, 1]

    def test_rgb_image_gets_opaque_alpha(self):
        samples = sample_image_pixels(solid((10, 20, 30), mode="RGB"))
        assert np.all(samples[:, 3] == 255)


class TestBackgroundFilter:
    """Test rejection of transparent, white and black samples."""

    def test_filters_each_background_class(self):
        pixels = np.array([
            [255, 255, 255, 255],  # near-white
            [10, 10, 10, 255],     # near-black
            [100, 50, 25, 10],     # near-transparent
            [90, 60, 30, 255],
            [110, 40, 20, 255],
        ], dtype=np.uint8)

        kept = filter_background_pixels(pixels)

        assert kept.shape == (2, 3)
        assert kept.tolist() == [[90, 60, 30], [110, 40, 20]]

    def test_thresholds_are_strict(self):
        """alpha == 50, all channels == 240 and all channels == 15 are kept."""
        pixels = np.array([
            [100, 100, 100, 50],
            [240, 240, 240, 255],
            [15, 15, 15, 255],
            [100, 100, 100, 49],
            [241, 241, 241, 255],
            [14, 14, 14, 255],
        ], dtype=np.uint8)

        kept = filter_background_pixels(pixels)
        assert kept.tolist() == [[100, 100, 100], [240, 240, 240], [15, 15, 15]]

    def test_only_all_channel_extremes_are_rejected(self):
        """A saturated color with one channel above 240 is not white."""
        pixels = np.array([
            [250, 10, 10, 255],
            [5, 5, 200, 255],
        ], dtype=np.uint8)

        assert filter_background_pixels(pixels).shape == (2, 3)


class TestDominantColor:
    """Test the full extraction."""

    def test_uniform_color_is_exact(self):
        assert extract_dominant_color(solid((100, 150, 200, 255))) == (100, 150, 200)

    def test_uniform_rgb_mode_image(self):
        assert extract_dominant_color(solid((200, 80, 80), mode="RGB")) == (200, 80, 80)

    def test_transparent_image_falls_back_to_gray(self):
        assert extract_dominant_color(solid((0, 0, 0, 0))) == (128, 128, 128)
        assert extract_dominant_color(solid((100, 150, 200, 0))) == (128, 128, 128)

    def test_white_image_falls_back_to_gray(self):
        assert extract_dominant_color(solid((255, 255, 255, 255))) == (128, 128, 128)

    def test_black_image_falls_back_to_gray(self):
        assert extract_dominant_color(solid((0, 0, 0), mode="RGB")) == (128, 128, 128)

    def test_fallback_is_distinguishable_from_real_gray(self):
        empty = sample_dominant_color(solid((255, 255, 255, 255)))
        assert empty.rgb is None
        assert empty.fallback_used
        assert empty.kept == 0
        assert empty.sampled == 625

        gray = sample_dominant_color(solid((128, 128, 128, 255)))
        assert gray.rgb == (128, 128, 128)
        assert not gray.fallback_used
        assert gray.kept == 625

    def test_white_background_is_ignored(self):
        """Top half white, bottom half colored: only the color counts."""
        arr = np.zeros((100, 100, 4), dtype=np.uint8)
        arr[:50] = (255, 255, 255, 255)
        arr[50:] = (200, 80, 80, 255)

        assert extract_dominant_color(Image.fromarray(arr)) == (200, 80, 80)

    def test_average_is_rounded(self):
        """313 samples of one color and 312 of another average and round."""
        arr = np.zeros((100, 100, 4), dtype=np.uint8)
        arr[:50] = (60, 120, 180, 255)
        arr[50:] = (100, 160, 220, 255)

        sample = sample_dominant_color(Image.fromarray(arr))

        assert sample.kept == 625
        assert sample.rgb == (80, 140, 200)

    def test_palette_mode_image(self):
        image = solid((30, 90, 150), mode="RGB").convert("P", palette=Image.Palette.ADAPTIVE)
        assert image.mode == "P"
        assert extract_dominant_color(image) == (30, 90, 150)
