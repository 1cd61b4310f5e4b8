"""
HueMatch Color Harmony Engine

Implements color theory rules for generating complementary, analogous and
triadic pairings from a dominant color. Each rotated hue is expanded into
labeled tone variants, and each theory keeps a curated subset of them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from .conversions import RGB, hsv_to_rgb, rgb_to_hsv


class ToneLabel(str, Enum):
    """Labels of the tone variants derived from one hue."""
    PRIMARY = "Primary Tone"
    LIGHTER = "Lighter Tone (Tint)"
    MUTED = "Muted Tone (Tone)"


class Theory(str, Enum):
    """Supported color theory relationships."""
    COMPLEMENTARY = "Complementary"
    ANALOGOUS = "Analogous"
    TRIADIC = "Triadic"


@dataclass(frozen=True)
class ToneVariant:
    """A labeled color derived from a base hue."""
    label: ToneLabel
    rgb: RGB


@dataclass(frozen=True)
class PairingGroup:
    """Tone variants associated with one color theory relationship."""
    theory: Theory
    explanation: str
    colors: Tuple[ToneVariant, ...]


@dataclass(frozen=True)
class HueRule:
    """One rotated hue and the variants kept from it, in display order."""
    degrees: float
    labels: Tuple[ToneLabel, ...]


@dataclass(frozen=True)
class TheoryRule:
    theory: Theory
    explanation: str
    hues: Tuple[HueRule, ...]


ALL_TONES = (ToneLabel.PRIMARY, ToneLabel.LIGHTER, ToneLabel.MUTED)

# Curated selection: analogous and triadic drop a different extreme per side.
THEORY_RULES: Tuple[TheoryRule, ...] = (
    TheoryRule(
        theory=Theory.COMPLEMENTARY,
        explanation=(
            "Provides the highest contrast and most vibrant pairing. "
            "Use the tones for varying boldness in secondary pieces."
        ),
        hues=(HueRule(180, ALL_TONES),),
    ),
    TheoryRule(
        theory=Theory.ANALOGOUS,
        explanation=(
            "Creates a harmonious, low-contrast, and pleasing look. "
            "Mix these tones for a rich, subtle effect."
        ),
        hues=(
            HueRule(30, (ToneLabel.PRIMARY, ToneLabel.LIGHTER)),
            HueRule(-30, (ToneLabel.PRIMARY, ToneLabel.MUTED)),
        ),
    ),
    TheoryRule(
        theory=Theory.TRIADIC,
        explanation=(
            "Uses three evenly spaced hues for a balanced and colorful outfit. "
            "Focus on the Primary or Muted tones for balance."
        ),
        hues=(
            HueRule(120, (ToneLabel.PRIMARY, ToneLabel.MUTED)),
            HueRule(-120, (ToneLabel.PRIMARY, ToneLabel.LIGHTER)),
        ),
    ),
)


def rotate_hue(h: float, degrees: float) -> float:
    """
    Rotate hue by specified degrees.

    Args:
        h: Original hue in degrees
        degrees: Rotation in degrees (can be negative)

    Returns:
        Rotated hue in [0, 360)
    """
    return (h + degrees) % 360.0


def hue_separation(h1: float, h2: float) -> float:
    """
    Calculate the minimum angular separation between two hues.

    Returns:
        Separation in degrees [0, 180]
    """
    diff = abs(h1 - h2) % 360.0
    return min(diff, 360.0 - diff)


def generate_variants(h: float, s: float, v: float) -> Tuple[ToneVariant, ToneVariant, ToneVariant]:
    """
    Expand one hue into Primary, Lighter and Muted tone variants.

    Args:
        h: Hue in degrees
        s: Base saturation [0, 1]
        v: Base value [0, 1]

    Returns:
        Ordered triple (primary, lighter, muted)
    """
    primary = hsv_to_rgb(h, min(1.0, s * 1.1), min(1.0, v * 1.05))

    # Tint: lighter, slightly desaturated
    lighter_v = v * 1.4 if v < 0.8 else 1.0
    lighter = hsv_to_rgb(h, min(1.0, s * 0.8), lighter_v)

    # Tone: desaturated, similar brightness
    muted = hsv_to_rgb(h, min(1.0, s * 0.4), min(1.0, v * 1.1))

    return (
        ToneVariant(ToneLabel.PRIMARY, primary),
        ToneVariant(ToneLabel.LIGHTER, lighter),
        ToneVariant(ToneLabel.MUTED, muted),
    )


def select_variants(variants: Tuple[ToneVariant, ...], labels: Tuple[ToneLabel, ...]) -> List[ToneVariant]:
    """Pick variants by label, in the order the labels are given."""
    by_label = {variant.label: variant for variant in variants}
    return [by_label[label] for label in labels]


def build_pairing_group(rule: TheoryRule, h: float, s: float, v: float) -> PairingGroup:
    """Apply one theory rule to a base HSV color."""
    colors: List[ToneVariant] = []
    for hue_rule in rule.hues:
        variants = generate_variants(rotate_hue(h, hue_rule.degrees), s, v)
        colors.extend(select_variants(variants, hue_rule.labels))

    return PairingGroup(
        theory=rule.theory,
        explanation=rule.explanation,
        colors=tuple(colors),
    )


def suggest_pairings(dominant_rgb: RGB) -> Dict[str, PairingGroup]:
    """
    Generate all pairing groups for a dominant color.

    Args:
        dominant_rgb: Dominant color (r, g, b)

    Returns:
        Mapping of theory name to pairing group, ordered
        Complementary, Analogous, Triadic
    """
    r, g, b = dominant_rgb
    h, s, v = rgb_to_hsv(r, g, b)

    return {
        rule.theory.value: build_pairing_group(rule, h, s, v)
        for rule in THEORY_RULES
    }
