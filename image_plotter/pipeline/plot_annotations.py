# pipeline/plot_annotations.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Union
import logging

from ..models.geometry import Annotation
from ..models.image import Image
from ..services.annotation_service import AnnotationService
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)

AnnotationLike = Union[Annotation, Mapping[str, Any]]


def _as_annotations(annotations: Iterable[AnnotationLike]) -> List[Annotation]:
    return [a if isinstance(a, Annotation) else Annotation.from_dict(a) for a in annotations]


def plot(
    image: Image,
    annotations: Iterable[AnnotationLike],
    *,
    annotation_service: AnnotationService | None = None,
    image_service: ImageService | None = None,
) -> bytes:
    """
    Apply every annotation to *image* in list order, then encode once.
    Later annotations draw over earlier ones where they overlap.
    """
    annotation_service = annotation_service or AnnotationService()
    image_service = image_service or ImageService(annotation_service.config)

    items = _as_annotations(annotations)
    for annotation in items:
        annotation_service.annotate(image, annotation)

    data = image_service.encode(image)
    logger.info(
        f"Plotted {len(items)} annotation(s) on {image.source or '<bytes>'} "
        f"({image.width}x{image.height} {image.format.value}, {len(data)} bytes)"
    )
    return data


def plot_from_path(
    path: Union[str, Path],
    annotations: Iterable[AnnotationLike],
    *,
    annotation_service: AnnotationService | None = None,
    image_service: ImageService | None = None,
) -> bytes:
    image_service = image_service or ImageService(annotation_service.config if annotation_service else None)
    image = image_service.load_path(path)
    return plot(image, annotations, annotation_service=annotation_service, image_service=image_service)


def plot_from_url(
    url: str,
    annotations: Iterable[AnnotationLike],
    *,
    annotation_service: AnnotationService | None = None,
    image_service: ImageService | None = None,
) -> bytes:
    image_service = image_service or ImageService(annotation_service.config if annotation_service else None)
    image = image_service.load_url(url)
    return plot(image, annotations, annotation_service=annotation_service, image_service=image_service)


def plot_from_bytes(
    data: bytes,
    annotations: Iterable[AnnotationLike],
    *,
    annotation_service: AnnotationService | None = None,
    image_service: ImageService | None = None,
) -> bytes:
    image_service = image_service or ImageService(annotation_service.config if annotation_service else None)
    image = image_service.load_bytes(data)
    return plot(image, annotations, annotation_service=annotation_service, image_service=image_service)
