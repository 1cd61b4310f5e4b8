"""
HueMatch ID Utilities
Generate request IDs for tracing and document IDs for saved palettes.
"""
import time
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "req") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag naming the operation (e.g. "analyze")

    Returns:
        Unique request ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"


def generate_palette_id() -> str:
    """
    Generate a saved palette document ID.

    IDs start with the creation time in epoch milliseconds so they sort
    chronologically; the suffix keeps two saves in the same millisecond apart.
    """
    millis = int(time.time() * 1000)
    return f"{millis}-{uuid.uuid4().hex[:6]}"


def extract_millis_from_palette_id(palette_id: str) -> int:
    """
    Extract the epoch-millisecond prefix from a palette ID.

    Returns:
        Milliseconds, or 0 if the ID carries no numeric prefix
    """
    head = palette_id.split("-", 1)[0]
    return int(head) if head.isdigit() else 0
