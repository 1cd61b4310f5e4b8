"""
HueMatch API Schemas
Pydantic models for palette analysis and persistence request/response validation.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("huematch", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# PALETTE SCHEMAS
# ============================================================================

class ToneSwatch(BaseModel):
    """Single tone variant card."""
    label: str = Field(..., description="Short card label: Primary, Lighter or Muted")
    type: str = Field(..., description="Full tone label, e.g. 'Lighter Tone (Tint)'")
    hex: str = Field(..., pattern=r"^#[0-9A-F]{6}$", description="Color in format #RRGGBB")
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="Color as [r, g, b]")


class PairingGroupOut(BaseModel):
    """One color theory pairing with its tone variants in display order."""
    theory: str = Field(..., description="Complementary, Analogous or Triadic")
    explanation: str = Field(..., description="Why this pairing works")
    colors: List[ToneSwatch] = Field(..., description="Tone variants in display order")


class DominantColorOut(BaseModel):
    """Dominant color of the analyzed image."""
    hex: str = Field(..., pattern=r"^#[0-9A-F]{6}$", description="Dominant color in format #RRGGBB")
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="Dominant color as [r, g, b]")
    hsv: Dict[str, float] = Field(..., description="Dominant color in HSV (h degrees, s and v in [0,1])")


class AnalysisDebug(BaseModel):
    """Sampling details for an analysis."""
    request_id: str = Field(..., description="Request ID for tracing")
    fallback_used: bool = Field(
        ...,
        description="True when no pixel survived filtering and the neutral gray was used"
    )
    sampled_pixels: int = Field(..., description="Pixels visited at the sampling stride")
    kept_pixels: int = Field(..., description="Pixels that survived background filtering")
    timing_ms: Dict[str, float] = Field(..., description="Timing breakdown in milliseconds")


class AnalyzeResponse(BaseModel):
    """Palette analysis response."""
    dominant: DominantColorOut = Field(..., description="Dominant color")
    suggestions: Dict[str, PairingGroupOut] = Field(
        ...,
        description="Pairing groups keyed by theory name"
    )
    swatch_png_b64: Optional[str] = Field(None, description="Base64-encoded PNG swatch")
    saved_id: Optional[str] = Field(None, description="Document ID when the palette was saved")
    debug: Optional[AnalysisDebug] = Field(None, description="Sampling details")


class SuggestRequest(BaseModel):
    """Direct mode request with a known dominant color."""
    base_hex: Optional[str] = Field(
        None,
        pattern=r"^#?[0-9A-Fa-f]{6}$",
        description="Dominant color in format #RRGGBB"
    )
    rgb: Optional[List[int]] = Field(
        None,
        min_length=3,
        max_length=3,
        description="Dominant color as [r, g, b]"
    )

    @model_validator(mode="after")
    def exactly_one_color(self):
        if (self.base_hex is None) == (self.rgb is None):
            raise ValueError("Provide exactly one of base_hex or rgb")
        if self.rgb is not None and any(not 0 <= c <= 255 for c in self.rgb):
            raise ValueError("rgb channels must be in [0, 255]")
        return self


# ============================================================================
# PERSISTENCE SCHEMAS
# ============================================================================

class StoredToneVariant(BaseModel):
    """Tone variant in the stored document shape."""
    type: str
    rgb: List[int] = Field(..., min_length=3, max_length=3)


class StoredPairingGroup(BaseModel):
    """Pairing group in the stored document shape."""
    explanation: str
    colors: List[StoredToneVariant]


class SavePaletteRequest(BaseModel):
    """Palette document to save."""
    dominant: List[int] = Field(..., min_length=3, max_length=3)
    suggestions: Dict[str, StoredPairingGroup]


class SavedPaletteOut(BaseModel):
    """Saved palette with store identity."""
    id: str
    timestamp: datetime
    dominantHex: str
    dominant: List[int]
    suggestions: Dict[str, StoredPairingGroup]


class PaletteListResponse(BaseModel):
    """A user's saved palettes, newest first."""
    palettes: List[SavedPaletteOut]
    count: int
