from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_COLOR = (255, 0, 0, 255)  # opaque red


def _parse_color(raw: str) -> Tuple[int, int, int, int]:
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if len(parts) not in (3, 4):
        raise ValueError(f"Annotation color must have 3 or 4 components, got: {raw!r}")
    values = [int(p) for p in parts]
    if len(values) == 3:
        values.append(255)
    if any(v < 0 or v > 255 for v in values):
        raise ValueError(f"Annotation color components must be in [0, 255], got: {raw!r}")
    return tuple(values)


@dataclass(frozen=True)
class PlotterConfig:
    """
    Tunables for a plot request. Every field can be overridden through a
    PLOT_* environment variable (or a .env file).
    """
    color: Tuple[int, int, int, int] = DEFAULT_COLOR
    thickness_ratio: float = 0.01
    font_scale: int = 8           # font size per pixel of border thickness
    font_path: Path | None = None  # None = Pillow's bundled face
    http_timeout: float = 10.0
    max_workers: int = 4
    chunk_size: int = 4096        # pixels per border task
    jpeg_quality: int = 75
    png_compression: int = 3

    def __post_init__(self):
        if self.thickness_ratio <= 0:
            raise ValueError(f"thickness_ratio must be positive, got {self.thickness_ratio}")
        if self.font_scale <= 0:
            raise ValueError(f"font_scale must be positive, got {self.font_scale}")
        if self.max_workers < 1 or self.chunk_size < 1:
            raise ValueError("max_workers and chunk_size must be at least 1")
        if not 0 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be in [0, 100], got {self.jpeg_quality}")
        if not 0 <= self.png_compression <= 9:
            raise ValueError(f"png_compression must be in [0, 9], got {self.png_compression}")


def load_config() -> PlotterConfig:
    """Build a PlotterConfig from the environment, falling back to defaults."""
    cfg = PlotterConfig()
    color = os.getenv("PLOT_ANNOTATION_COLOR")
    font_path = os.getenv("PLOT_FONT_PATH")
    return PlotterConfig(
        color=_parse_color(color) if color else cfg.color,
        thickness_ratio=float(os.getenv("PLOT_THICKNESS_RATIO", cfg.thickness_ratio)),
        font_scale=int(os.getenv("PLOT_FONT_SCALE", cfg.font_scale)),
        font_path=Path(font_path) if font_path else None,
        http_timeout=float(os.getenv("PLOT_HTTP_TIMEOUT", cfg.http_timeout)),
        max_workers=int(os.getenv("PLOT_MAX_WORKERS", cfg.max_workers)),
        chunk_size=int(os.getenv("PLOT_CHUNK_SIZE", cfg.chunk_size)),
        jpeg_quality=int(os.getenv("PLOT_JPEG_QUALITY", cfg.jpeg_quality)),
        png_compression=int(os.getenv("PLOT_PNG_COMPRESSION", cfg.png_compression)),
    )
