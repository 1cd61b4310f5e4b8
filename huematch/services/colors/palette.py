"""
Palette aggregate and its document encoding.

A Palette is the dominant color plus its pairing groups. It is built once per
analysis and never mutated; persistence wraps the document form with an id
and timestamp.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from PIL import Image

from huematch.config import config
from .conversions import RGB, decode_rgb, encode_rgb, rgb_to_hex
from .extraction import sample_dominant_color
from .harmony import PairingGroup, Theory, ToneLabel, ToneVariant, suggest_pairings


@dataclass(frozen=True)
class Palette:
    """Dominant color with its theory-based pairing groups."""
    dominant: RGB
    suggestions: Mapping[str, PairingGroup]

    @property
    def dominant_hex(self) -> str:
        return rgb_to_hex(*self.dominant)


@dataclass(frozen=True)
class AnalysisResult:
    """Palette plus how the dominant color was obtained."""
    palette: Palette
    fallback_used: bool
    sampled_pixels: int
    kept_pixels: int


def build_palette(dominant: RGB) -> Palette:
    """Build a palette for a known dominant color."""
    return Palette(dominant=tuple(dominant), suggestions=suggest_pairings(dominant))


def analyze_image(image: Image.Image) -> AnalysisResult:
    """
    Run dominant color extraction and pairing generation on an image.

    When no pixel survives filtering, the palette is built from the fallback
    gray and `fallback_used` is set.
    """
    sample = sample_dominant_color(image)
    dominant = sample.rgb if sample.rgb is not None else tuple(config.FALLBACK_RGB)

    return AnalysisResult(
        palette=build_palette(dominant),
        fallback_used=sample.fallback_used,
        sampled_pixels=sample.sampled,
        kept_pixels=sample.kept,
    )


def palette_to_document(palette: Palette) -> Dict[str, Any]:
    """
    Serialize a palette to the stored record shape.

    The store adds `timestamp` (and an id) when the document is put.
    """
    return {
        "dominant": encode_rgb(palette.dominant),
        "dominantHex": palette.dominant_hex,
        "suggestions": {
            theory: {
                "explanation": group.explanation,
                "colors": [
                    {"type": variant.label.value, "rgb": encode_rgb(variant.rgb)}
                    for variant in group.colors
                ],
            }
            for theory, group in palette.suggestions.items()
        },
    }


def palette_from_document(document: Mapping[str, Any]) -> Palette:
    """
    Restore a palette from its stored record.

    Raises:
        ValueError: If the document is missing fields or carries invalid
            colors, theory names or tone labels
    """
    try:
        dominant = decode_rgb(document["dominant"])
        raw_suggestions = document["suggestions"]
    except KeyError as e:
        raise ValueError(f"Palette document missing field: {e.args[0]}")

    if not isinstance(raw_suggestions, Mapping):
        raise ValueError("Palette document 'suggestions' must be an object")

    suggestions: Dict[str, PairingGroup] = {}
    for theory_name, group in raw_suggestions.items():
        try:
            theory = Theory(theory_name)
            colors = tuple(
                ToneVariant(ToneLabel(color["type"]), decode_rgb(color["rgb"]))
                for color in group["colors"]
            )
            explanation = group["explanation"]
        except KeyError as e:
            raise ValueError(f"Pairing group '{theory_name}' missing field: {e.args[0]}")
        except TypeError:
            raise ValueError(f"Pairing group '{theory_name}' is malformed")

        suggestions[theory.value] = PairingGroup(
            theory=theory,
            explanation=explanation,
            colors=colors,
        )

    return Palette(dominant=dominant, suggestions=suggestions)
