"""
HueMatch Imaging Utilities
Handles image upload validation and decoding.
"""
import io
from typing import Optional

from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from huematch.config import config


class ImageDecodeError(ValueError):
    """Raised when an upload cannot be turned into an analyzable image."""


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file metadata before reading it.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    # Check file size (file.size might be None for some clients)
    if getattr(file, 'size', None) and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if file.filename and '.' in file.filename:
        ext = file.filename.lower().rsplit('.', 1)[-1]
        if f".{ext}" not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def detect_image_type(file_bytes: bytes) -> Optional[str]:
    """
    Detect the image MIME type from magic bytes.

    Returns:
        MIME type string, or None if the bytes match no supported format
    """
    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    if file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    if file_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if file_bytes[:4] == b'RIFF' and file_bytes[8:12] == b'WEBP':
        return "image/webp"
    return None


def decode_image(file_bytes: bytes) -> Image.Image:
    """
    Decode raw upload bytes into a fully loaded Pillow image.

    Args:
        file_bytes: Raw file bytes

    Returns:
        Decoded image in its native mode

    Raises:
        ImageDecodeError: If the bytes are empty, too large (in bytes or pixels), of an
            unsupported type, or corrupt
    """
    if not file_bytes:
        raise ImageDecodeError("Empty image data")

    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise ImageDecodeError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")

    if detect_image_type(file_bytes) is None:
        raise ImageDecodeError("Invalid image file. Magic bytes don't match supported formats.")

    try:
        image = Image.open(io.BytesIO(file_bytes))
        # Header dimensions are known before any pixel data is decoded
        if image.width * image.height > config.MAX_IMAGE_PIXELS:
            raise ImageDecodeError(
                f"Image too large: {image.width}x{image.height} exceeds "
                f"{config.MAX_IMAGE_PIXELS} pixels"
            )
        image.load()
    except ImageDecodeError:
        raise
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Could not load image file: {e}")

    if image.width == 0 or image.height == 0:
        raise ImageDecodeError("Image has no pixels")

    return image
