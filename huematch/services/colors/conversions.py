"""
HueMatch Color Space Conversions

RGB <-> HSV conversion, hex formatting and the storage encoding for RGB
triples. Every function here is total over numeric input: out-of-range
saturation/value are clamped, hue is wrapped, nothing raises.
"""

import json
import math
import re
from typing import Any, List, Tuple

RGB = Tuple[int, int, int]
HSV = Tuple[float, float, float]

HEX_DIGITS = re.compile(r"[0-9A-Fa-f]{6}")


def round_half_up(x: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's)."""
    return int(math.floor(x + 0.5))


def clamp_unit(x: float) -> float:
    """Clamp a float into [0, 1]; NaN collapses to 0."""
    if x != x:  # NaN
        return 0.0
    return max(0.0, min(1.0, x))


def clamp_channel(x: float) -> int:
    """Clamp a number into an 8-bit channel value."""
    if x != x:
        return 0
    return max(0, min(255, round_half_up(x)))


def rgb_to_hsv(r: int, g: int, b: int) -> HSV:
    """
    Convert 8-bit RGB to HSV.

    Args:
        r, g, b: Channel values in [0, 255]

    Returns:
        Tuple of (H, S, V) where H ∈ [0, 360), S ∈ [0, 1], V ∈ [0, 1]
    """
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    mx = max(r, g, b)
    mn = min(r, g, b)
    d = mx - mn

    v = mx
    s = 0.0 if mx == 0 else d / mx

    if mx == mn:
        h = 0.0
    else:
        if mx == r:
            h = (g - b) / d + (6 if g < b else 0)
        elif mx == g:
            h = (b - r) / d + 2
        else:
            h = (r - g) / d + 4
        h /= 6

    return (h * 360.0) % 360.0, s, v


def hsv_to_rgb(h: float, s: float, v: float) -> RGB:
    """
    Convert HSV to 8-bit RGB.

    Hue may be any finite number and is wrapped modulo 360. Saturation and
    value are clamped into [0, 1] before use.

    Args:
        h: Hue in degrees
        s: Saturation
        v: Value

    Returns:
        RGB tuple with values 0-255
    """
    if not math.isfinite(h):
        h = 0.0
    h = h % 360.0
    s = clamp_unit(s)
    v = clamp_unit(v)

    i = int(math.floor(h / 60.0))
    f = h / 60.0 - i
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)

    sector = i % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return clamp_channel(r * 255), clamp_channel(g * 255), clamp_channel(b * 255)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB to an upper-case, zero-padded #RRGGBB string."""
    return f"#{clamp_channel(r):02X}{clamp_channel(g):02X}{clamp_channel(b):02X}"


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Convert hex color to RGB tuple.

    Args:
        hex_color: Color in format #RRGGBB (the # is optional)

    Returns:
        RGB tuple (r, g, b) with values 0-255

    Raises:
        ValueError: If the string is not six hex digits
    """
    hex_clean = hex_color.strip().lstrip('#')
    if not HEX_DIGITS.fullmatch(hex_clean):
        raise ValueError(f"Invalid hex color format: {hex_color}")

    return tuple(int(hex_clean[i:i + 2], 16) for i in (0, 2, 4))


def encode_rgb(rgb: RGB) -> List[int]:
    """Encode an RGB triple for storage as a plain three-integer array."""
    r, g, b = rgb
    return [int(r), int(g), int(b)]


def decode_rgb(value: Any) -> RGB:
    """
    Decode a stored RGB triple.

    Accepts the canonical three-integer array as well as the legacy
    JSON-string form ("[r,g,b]").

    Raises:
        ValueError: If the value is not exactly three integer channels in range
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValueError(f"Invalid RGB encoding: {value!r}")

    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"RGB must have exactly three channels: {value!r}")

    channels = []
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, int):
            raise ValueError(f"RGB channels must be integers: {value!r}")
        if not 0 <= channel <= 255:
            raise ValueError(f"RGB channel out of range: {channel}")
        channels.append(channel)

    return tuple(channels)
