"""
Test configuration and fixtures for HueMatch tests.
"""
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from huematch.api.v1 import get_store
from huematch.services.palette_store import InMemoryPaletteStore
from main import app


@pytest.fixture
def store():
    """Fresh in-memory palette store."""
    return InMemoryPaletteStore()


@pytest.fixture
def test_client(store):
    """Create test client for the FastAPI app with an isolated store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from huematch.utils.metrics import reset_metrics
    reset_metrics()


def make_image(color, size=(200, 200), mode="RGBA"):
    """Solid color image."""
    return Image.new(mode, size, color)


def image_bytes(image, fmt="PNG"):
    """Encode an image to file bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_factory():
    """Build PNG bytes for a solid color image."""
    def _factory(color, size=(200, 200), mode="RGBA"):
        return image_bytes(make_image(color, size, mode))
    return _factory
