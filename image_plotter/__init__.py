"""
Draw labeled bounding boxes onto JPEG/PNG images read from a path, a URL or raw bytes.
"""
from .config import PlotterConfig, load_config
from .exceptions import (
    PlotError,
    SourceUnavailable,
    DecodeFailed,
    UnsupportedFormat,
    FontLoadFailed,
)
from .models.geometry import Point, Rectangle, Annotation
from .models.image import Image
from .models.image_format import ImageFormat
from .pipeline.plot_annotations import plot, plot_from_path, plot_from_url, plot_from_bytes

__all__ = [
    'PlotterConfig',
    'load_config',
    'PlotError',
    'SourceUnavailable',
    'DecodeFailed',
    'UnsupportedFormat',
    'FontLoadFailed',
    'Point',
    'Rectangle',
    'Annotation',
    'Image',
    'ImageFormat',
    'plot',
    'plot_from_path',
    'plot_from_url',
    'plot_from_bytes',
]
