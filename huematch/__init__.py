"""
HueMatch

Dominant color extraction and color-theory palette suggestions for
uploaded images.
"""

__version__ = "1.0.0"
