"""
HueMatch Configuration
Manages environment variables and defaults for the palette services.
"""
import os
from typing import Literal, Optional, Tuple


class Config:
    """Configuration class for HueMatch services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("HUEMATCH_MAX_FILE_MB", "10"))
    MAX_IMAGE_PIXELS: int = int(os.environ.get("HUEMATCH_MAX_IMAGE_PIXELS", "40000000"))

    # Dominant color sampling
    SAMPLE_SIZE: int = int(os.environ.get("HUEMATCH_SAMPLE_SIZE", "100"))
    SAMPLE_STRIDE: int = int(os.environ.get("HUEMATCH_SAMPLE_STRIDE", "16"))
    ALPHA_MIN: int = int(os.environ.get("HUEMATCH_ALPHA_MIN", "50"))
    WHITE_CUTOFF: int = int(os.environ.get("HUEMATCH_WHITE_CUTOFF", "240"))
    BLACK_CUTOFF: int = int(os.environ.get("HUEMATCH_BLACK_CUTOFF", "15"))
    FALLBACK_RGB: Tuple[int, int, int] = (128, 128, 128)

    # Logging
    LOG_LEVEL: str = os.environ.get("HUEMATCH_LOG_LEVEL", "INFO")
    LOG_SERIALIZE: bool = bool(int(os.environ.get("HUEMATCH_LOG_SERIALIZE", "0")))

    # Persistence
    STORE_BACKEND: Literal["memory", "supabase"] = os.environ.get("HUEMATCH_STORE_BACKEND", "memory")
    APP_ID: str = os.environ.get("HUEMATCH_APP_ID", "default-app-id")
    PALETTE_TABLE: str = os.environ.get("HUEMATCH_PALETTE_TABLE", "saved_palettes")
    SUPABASE_URL: Optional[str] = os.environ.get("SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    # Swatch rendering
    SWATCH_CHIP_SIZE: int = int(os.environ.get("HUEMATCH_SWATCH_CHIP_SIZE", "40"))
    SWATCH_SPACING: int = int(os.environ.get("HUEMATCH_SWATCH_SPACING", "2"))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("HUEMATCH_ALLOWED_ORIGINS", "http://localhost:3000")

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

    @classmethod
    def validate_store_backend(cls, backend: str) -> bool:
        """Validate store backend parameter."""
        return backend in ["memory", "supabase"]

    @classmethod
    def allowed_origins(cls) -> list:
        """Split the comma separated CORS origin list."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
