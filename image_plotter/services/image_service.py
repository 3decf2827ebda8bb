from __future__ import annotations
from pathlib import Path
from typing import Union
import logging

from ..config import PlotterConfig, load_config
from ..models.image import Image
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers. Resolves a source into a mutable Image and encodes it back."""

    def __init__(self, config: PlotterConfig | None = None):
        self.config = config or load_config()
        self.image_repository = ImageRepository()

    def load_bytes(self, data: bytes, source: str | None = None) -> Image:
        """Decode raw bytes into a fresh RGBA Image."""
        pil_img, fmt = self.image_repository.decode(data, source)
        image = self.image_repository.normalize(pil_img, fmt, source)
        logger.debug(f"Decoded {source or '<bytes>'}: {image.width}x{image.height} {fmt.value}")
        return image

    def load_path(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk."""
        data = self.image_repository.fetch_path(path)
        return self.load_bytes(data, str(path))

    def load_url(self, url: str) -> Image:
        """Download and decode an image. No retry."""
        data = self.image_repository.fetch_url(url, timeout=self.config.http_timeout)
        return self.load_bytes(data, url)

    def encode(self, image: Image) -> bytes:
        """
        Business-level method to serialize the image in the format it was read in.
        """
        return self.image_repository.encode(
            image,
            jpeg_quality=self.config.jpeg_quality,
            png_compression=self.config.png_compression,
        )
