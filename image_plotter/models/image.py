from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .image_format import ImageFormat


@dataclass
class Image:
    """
    Simple data object: RGBA pixels plus the format they were decoded from.
    No codec logic outside the repository.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order. Mutated in place.
    format: ImageFormat = ImageFormat.UNKNOWN
    has_alpha: bool = False  # Source carried transparency
    source: str | None = None  # Path or URL, for bookkeeping.

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]
