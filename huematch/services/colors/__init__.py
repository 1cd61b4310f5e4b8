"""
HueMatch Colors Module

Provides color space conversion, dominant color extraction and
theory-based palette suggestions for uploaded images.
"""

from .conversions import rgb_to_hex, rgb_to_hsv, hsv_to_rgb
from .extraction import extract_dominant_color, sample_dominant_color
from .harmony import suggest_pairings

__all__ = [
    "rgb_to_hex",
    "rgb_to_hsv",
    "hsv_to_rgb",
    "extract_dominant_color",
    "sample_dominant_color",
    "suggest_pairings",
]
