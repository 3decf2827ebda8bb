from __future__ import annotations
from enum import Enum


class ImageFormat(Enum):
    """Raster encoding detected at decode time and reused at encode time."""
    JPEG = "jpeg"
    PNG = "png"
    UNKNOWN = "unknown"

    @classmethod
    def from_pil(cls, name: str | None) -> "ImageFormat":
        # Pillow reports "JPEG", "PNG", "GIF", ... or None for in-memory images
        if name == "JPEG":
            return cls.JPEG
        if name == "PNG":
            return cls.PNG
        return cls.UNKNOWN

