from __future__ import annotations
import logging
import math

import numpy as np
from PIL import Image as PILImage
from PIL import ImageDraw

from ..config import PlotterConfig, load_config
from ..exceptions import FontLoadFailed
from ..models.font_engine import FontEngine
from ..models.geometry import Annotation, Rectangle
from ..models.image import Image
from ..repositories.border_repository import BorderRepository

logger = logging.getLogger(__name__)


class AnnotationService:
    """
    Draws one labeled rectangle at a time into an Image's pixel buffer.
    Borders go through BorderRepository; labels use the shared FontEngine.
    """

    def __init__(self, config: PlotterConfig | None = None):
        self.config = config or load_config()
        self.border_repository = BorderRepository()

    @staticmethod
    def compute_thickness(rect: Rectangle, ratio: float = 0.01) -> int:
        """
        Border width in pixels: scales with the smaller side, never below 1.

        Args:
            rect (Rectangle): The box being drawn.
            ratio (float): Fraction of the smaller side used as thickness.

        Returns:
            int: max(1, floor(min(width, height) * ratio))
        """
        rect = rect.normalized()
        return max(1, math.floor(min(rect.width, rect.height) * ratio))

    def draw_border(self, image: Image, rect: Rectangle, thickness: int, color=None) -> int:
        coords = self.border_repository.border_coordinates(rect, thickness, image.width, image.height)
        return self.border_repository.draw(
            image.pixels,
            coords,
            color or self.config.color,
            max_workers=self.config.max_workers,
            chunk_size=self.config.chunk_size,
        )

    def draw_label(self, image: Image, rect: Rectangle, thickness: int, label: str, color=None) -> bool:
        """
        Render `label` with its baseline starting at (min.x, min.y - thickness).

        Returns:
            True if the label was drawn, False if the font could not be loaded.
        """
        size = thickness * self.config.font_scale
        try:
            font = FontEngine(self.config.font_path).face(size)
        except FontLoadFailed as err:
            logger.warning(f"Skipping label {label!r}, keeping border only: {err}")
            return False

        canvas = PILImage.fromarray(image.pixels)
        draw = ImageDraw.Draw(canvas)
        draw.text(
            (rect.min.x, rect.min.y - thickness),
            label,
            fill=tuple(color or self.config.color),
            font=font,
            anchor="ls",
        )
        image.pixels[...] = np.asarray(canvas)
        return True

    def annotate(self, image: Image, annotation: Annotation) -> Image:
        """
        Draw one annotation into `image` in place and return it.
        Border tasks all finish before the label is rendered.
        """
        rect = annotation.rectangle.normalized()
        if rect.is_degenerate:
            logger.warning(f"Skipping degenerate rectangle {annotation.rectangle}")
            return image

        thickness = self.compute_thickness(rect, self.config.thickness_ratio)
        written = self.draw_border(image, rect, thickness, annotation.color)
        logger.debug(f"Rectangle {rect}: thickness={thickness}, border pixels={written}")

        if annotation.label:
            self.draw_label(image, rect, thickness, annotation.label, annotation.color)

        return image
