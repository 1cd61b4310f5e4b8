"""
Dominant color extraction for uploaded images.

The image is scaled to a small square, a fixed stride of pixels is sampled,
and background-like pixels (near-transparent, near-white, near-black) are
rejected before averaging. No clustering is involved.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

from huematch.config import config
from huematch.utils.logging import get_logger
from .conversions import RGB, round_half_up

logger = get_logger()


@dataclass(frozen=True)
class DominantColorSample:
    """Outcome of dominant color sampling."""
    rgb: Optional[RGB]  # None when every sample was filtered out
    sampled: int        # Pixels visited at the stride
    kept: int           # Pixels that survived filtering

    @property
    def fallback_used(self) -> bool:
        return self.rgb is None


def sample_image_pixels(image: Image.Image, sample_size: int = None, stride: int = None) -> np.ndarray:
    """
    Scale an image to a square and take every `stride`-th pixel.

    Args:
        image: Decoded Pillow image of any mode and size
        sample_size: Edge of the square the image is resampled to
        stride: Step through the flattened pixel list

    Returns:
        Array of shape (N, 4) uint8 RGBA samples
    """
    if sample_size is None:
        sample_size = config.SAMPLE_SIZE
    if stride is None:
        stride = config.SAMPLE_STRIDE

    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    scaled = rgba.resize((sample_size, sample_size), Image.BILINEAR)

    pixels = np.asarray(scaled, dtype=np.uint8).reshape(-1, 4)
    return pixels[::stride]


def filter_background_pixels(
    pixels_rgba: np.ndarray,
    alpha_min: int = None,
    white_cutoff: int = None,
    black_cutoff: int = None
) -> np.ndarray:
    """
    Drop near-transparent, near-white and near-black samples.

    Args:
        pixels_rgba: (N, 4) uint8 RGBA samples
        alpha_min: Samples with alpha below this are skipped
        white_cutoff: Samples with all channels above this are skipped
        black_cutoff: Samples with all channels below this are skipped

    Returns:
        (M, 3) array of surviving RGB samples
    """
    if alpha_min is None:
        alpha_min = config.ALPHA_MIN
    if white_cutoff is None:
        white_cutoff = config.WHITE_CUTOFF
    if black_cutoff is None:
        black_cutoff = config.BLACK_CUTOFF

    rgb = pixels_rgba[:, :3]
    alpha = pixels_rgba[:, 3]

    keep_mask = alpha >= alpha_min
    keep_mask &= ~np.all(rgb > white_cutoff, axis=1)
    keep_mask &= ~np.all(rgb < black_cutoff, axis=1)

    return rgb[keep_mask]


def sample_dominant_color(image: Image.Image) -> DominantColorSample:
    """
    Compute the average color of the non-background samples of an image.

    Args:
        image: Decoded Pillow image

    Returns:
        DominantColorSample; `rgb` is None if nothing survived filtering
    """
    samples = sample_image_pixels(image)
    kept = filter_background_pixels(samples)

    sampled_count = int(samples.shape[0])
    kept_count = int(kept.shape[0])

    logger.debug("Sampled image pixels", extra={
        "sampled": sampled_count,
        "kept": kept_count
    })

    if kept_count == 0:
        return DominantColorSample(rgb=None, sampled=sampled_count, kept=0)

    totals = kept.astype(np.int64).sum(axis=0)
    rgb = tuple(round_half_up(float(total) / kept_count) for total in totals)
    return DominantColorSample(rgb=rgb, sampled=sampled_count, kept=kept_count)


def extract_dominant_color(image: Image.Image) -> RGB:
    """
    Extract the dominant color of an image.

    Returns the neutral fallback gray when no sample survives filtering.
    Use sample_dominant_color() to tell that case apart from a real gray.
    """
    sample = sample_dominant_color(image)
    if sample.rgb is None:
        logger.info("No usable pixels after filtering, using fallback color", extra={
            "sampled": sample.sampled,
            "fallback": list(config.FALLBACK_RGB)
        })
        return tuple(config.FALLBACK_RGB)
    return sample.rgb
