"""
HueMatch Analysis Session

Carries the uploaded image and the latest analysis for one user, so the
color functions themselves stay pure and nothing lives in module globals.
"""
import time
from typing import Optional

from PIL import Image

from huematch.services.colors.palette import AnalysisResult, analyze_image, palette_to_document
from huematch.services.imaging import decode_image
from huematch.services.palette_store import PaletteStore, SavedPalette
from huematch.utils.logging import get_logger

logger = get_logger()


class SessionStateError(RuntimeError):
    """Raised when a session step runs before its prerequisite."""


class AnalysisSession:
    """Upload → analyze → save flow for a single user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        self.image: Optional[Image.Image] = None
        self.result: Optional[AnalysisResult] = None

    def load_image(self, file_bytes: bytes) -> "AnalysisSession":
        """
        Decode an upload and make it the current image.

        Any previous analysis is discarded.

        Raises:
            ImageDecodeError: If the bytes cannot be decoded
        """
        self.image = decode_image(file_bytes)
        self.result = None
        logger.debug("Image loaded", extra={
            "user_id": self.user_id,
            "width": self.image.width,
            "height": self.image.height,
            "mode": self.image.mode
        })
        return self

    def analyze(self) -> AnalysisResult:
        """Analyze the current image and keep the result."""
        if self.image is None:
            raise SessionStateError("Please upload an image first.")

        start_time = time.time()
        self.result = analyze_image(self.image)

        logger.info("Image analyzed", extra={
            "user_id": self.user_id,
            "dominant_hex": self.result.palette.dominant_hex,
            "fallback_used": self.result.fallback_used,
            "kept_pixels": self.result.kept_pixels,
            "duration_ms": round((time.time() - start_time) * 1000, 2)
        })
        return self.result

    def save(self, store: PaletteStore) -> SavedPalette:
        """Persist the current analysis to a palette store."""
        if self.result is None:
            raise SessionStateError("No palette analyzed yet.")
        return store.put(self.user_id, palette_to_document(self.result.palette))
