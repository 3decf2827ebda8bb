# tests/conftest.py
from __future__ import annotations
from io import BytesIO
from types import SimpleNamespace

import numpy as np
import pytest
from PIL import Image as PILImage

from image_plotter.config import PlotterConfig
from image_plotter.models.font_engine import FontEngine

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


# ---- helpers ----
def encode_pil(pixels: np.ndarray, fmt: str) -> bytes:
    """Encode a (H, W, C) uint8 array with Pillow."""
    buf = BytesIO()
    PILImage.fromarray(pixels).save(buf, format=fmt)
    return buf.getvalue()


def decode_pil(data: bytes):
    img = PILImage.open(BytesIO(data))
    img.load()
    return img


@pytest.fixture(autouse=True)
def _reset_fonts():
    # Font engines are per-process singletons; keep tests independent
    FontEngine._instances.clear()
    yield
    FontEngine._instances.clear()


@pytest.fixture
def config():
    return PlotterConfig(max_workers=4, chunk_size=64)


@pytest.fixture
def random_rgb():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(40, 60, 3), dtype=np.uint8)


@pytest.fixture
def png_bytes(random_rgb):
    return encode_pil(random_rgb, "PNG")


@pytest.fixture
def jpeg_bytes():
    return encode_pil(np.full((48, 64, 3), 128, dtype=np.uint8), "JPEG")


@pytest.fixture
def black_png():
    """Factory for all-black PNG bytes of a given size."""
    def _make(width: int, height: int) -> bytes:
        return encode_pil(np.zeros((height, width, 3), dtype=np.uint8), "PNG")
    return _make


@pytest.fixture
def fake_response():
    """Factory for a minimal stand-in of requests.Response."""
    def _make(content: bytes = b"", error: Exception | None = None):
        def raise_for_status():
            if error is not None:
                raise error
        return SimpleNamespace(content=content, raise_for_status=raise_for_status)
    return _make
