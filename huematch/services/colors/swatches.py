"""
HueMatch Swatch Generation

Creates PNG swatch artifacts for UI preview: the dominant color on the first
row, then one row of chips per pairing group in display order.
"""

import base64
import io
from typing import Any, Dict, List

from PIL import Image, ImageDraw

from huematch.config import config
from .conversions import RGB, rgb_to_hex
from .harmony import ToneVariant
from .palette import Palette


def swatch_entry(variant: ToneVariant) -> Dict[str, Any]:
    """
    Display payload for one swatch card.

    The card label is the first word of the tone label ("Primary", "Lighter",
    "Muted").
    """
    r, g, b = variant.rgb
    return {
        "label": variant.label.value.split(" ")[0],
        "type": variant.label.value,
        "hex": rgb_to_hex(r, g, b),
        "rgb": [r, g, b],
    }


def create_chip_row(colors: List[RGB], chip_size: int, spacing: int) -> Image.Image:
    """
    Create a horizontal row of color chips.

    Args:
        colors: Chip colors in display order
        chip_size: Size of each square chip in pixels
        spacing: Spacing between chips in pixels

    Returns:
        PIL Image of the row
    """
    if not colors:
        return Image.new('RGB', (chip_size, chip_size), (255, 255, 255))

    row_width = len(colors) * chip_size + (len(colors) - 1) * spacing
    row = Image.new('RGB', (row_width, chip_size), (255, 255, 255))

    x_pos = 0
    for rgb in colors:
        row.paste(Image.new('RGB', (chip_size, chip_size), tuple(rgb)), (x_pos, 0))
        x_pos += chip_size + spacing

    return row


def create_palette_swatch(
    palette: Palette,
    chip_size: int = None,
    spacing: int = None,
    row_spacing: int = 4,
    include_labels: bool = True
) -> Image.Image:
    """
    Create a swatch image with one labeled row per pairing group.

    Returns:
        PIL Image of the complete swatch
    """
    if chip_size is None:
        chip_size = config.SWATCH_CHIP_SIZE
    if spacing is None:
        spacing = config.SWATCH_SPACING

    rows = [("Dominant", create_chip_row([palette.dominant], chip_size, spacing))]
    for theory, group in palette.suggestions.items():
        colors = [variant.rgb for variant in group.colors]
        rows.append((theory, create_chip_row(colors, chip_size, spacing)))

    label_height = 16 if include_labels else 0
    swatch_width = max(row.width for _, row in rows)
    swatch_height = sum(label_height + row.height + row_spacing for _, row in rows) - row_spacing

    swatch = Image.new('RGB', (swatch_width, swatch_height), (255, 255, 255))
    draw = ImageDraw.Draw(swatch)

    y_pos = 0
    for name, row in rows:
        if include_labels:
            draw.text((2, y_pos), name, fill=(0, 0, 0))
            y_pos += label_height
        swatch.paste(row, (0, y_pos))
        y_pos += row.height + row_spacing

    return swatch


def render_palette_swatch(palette: Palette, include_labels: bool = True) -> str:
    """Render a palette swatch to a base64-encoded PNG."""
    swatch = create_palette_swatch(palette, include_labels=include_labels)
    buffer = io.BytesIO()
    swatch.save(buffer, format='PNG', optimize=True)
    return base64.b64encode(buffer.getvalue()).decode('ascii')
