from __future__ import annotations
from io import BytesIO
from pathlib import Path
from typing import Tuple, Union
import logging

import cv2
import numpy as np
import requests
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..exceptions import DecodeFailed, SourceUnavailable, UnsupportedFormat
from ..models.image import Image
from ..models.image_format import ImageFormat

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles byte retrieval, decoding and encoding for Image entities.
    """

    @staticmethod
    def fetch_path(path: Union[str, Path]) -> bytes:
        path = Path(path)
        try:
            with path.open("rb") as fh:
                return fh.read()
        except OSError as err:
            raise SourceUnavailable(f"Image not found or unreadable: {path} ({err})") from err

    @staticmethod
    def fetch_url(url: str, timeout: float = 10.0) -> bytes:
        """
        Single blocking GET, no retry. Any transport error, non-2xx status
        or empty body is terminal.
        """
        try:
            resp = requests.get(url, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as err:
            raise SourceUnavailable(f"Failed to download {url}: {err}") from err

        data = resp.content
        if not data:
            raise SourceUnavailable(f"Empty response body from {url}")
        return data

    @staticmethod
    def decode(data: bytes, source: str | None = None) -> Tuple[PILImage.Image, ImageFormat]:
        """
        Parse `data` into a Pillow image and its detected format.
        Forces a full load so truncated or corrupt data fails here.
        """
        label = source or "<bytes>"
        if not data:
            raise DecodeFailed(f"No image data in {label}")
        try:
            pil_img = PILImage.open(BytesIO(data))
            pil_img.load()
        except (UnidentifiedImageError, PILImage.DecompressionBombError) as err:
            raise DecodeFailed(f"Cannot decode image from {label}: {err}") from err
        except (OSError, SyntaxError, ValueError) as err:
            raise DecodeFailed(f"Corrupt image data in {label}: {err}") from err

        return pil_img, ImageFormat.from_pil(pil_img.format)

    @staticmethod
    def normalize(pil_img: PILImage.Image, fmt: ImageFormat, source: str | None = None) -> Image:
        """
        Copy the decoded image into a fresh RGBA buffer with its origin at (0, 0).
        """
        # P, RGB and L images can carry a tRNS transparency key instead of an alpha band
        has_alpha = pil_img.mode in ("RGBA", "LA", "PA") or "transparency" in pil_img.info
        rgba = pil_img.convert("RGBA")
        # np.array copies, so the buffer never aliases the decoded image
        pixels = np.array(rgba, dtype=np.uint8)
        if not pixels.flags["C_CONTIGUOUS"]:
            pixels = np.ascontiguousarray(pixels)
        return Image(pixels=pixels, format=fmt, has_alpha=has_alpha, source=source)

    @staticmethod
    def encode(image: Image, jpeg_quality: int = 75, png_compression: int = 3) -> bytes:
        """
        Serialize the buffer back to bytes in its detected format.

        Raises:
            UnsupportedFormat: the format is neither JPEG nor PNG.
        """
        if image.format is ImageFormat.JPEG:
            bgr = cv2.cvtColor(image.pixels, cv2.COLOR_RGBA2BGR)
            ok, buf = cv2.imencode(".jpg", bgr, [cv2.IMWRITE_JPEG_QUALITY, int(jpeg_quality)])
        elif image.format is ImageFormat.PNG:
            code = cv2.COLOR_RGBA2BGRA if image.has_alpha else cv2.COLOR_RGBA2BGR
            bgr = cv2.cvtColor(image.pixels, code)
            ok, buf = cv2.imencode(".png", bgr, [cv2.IMWRITE_PNG_COMPRESSION, int(png_compression)])
        else:
            raise UnsupportedFormat(
                f"Cannot encode {image.source or 'image'}: format {image.format.value!r} is not JPEG or PNG"
            )

        if not ok:
            raise UnsupportedFormat(f"OpenCV failed to encode {image.format.value} output")
        return buf.tobytes()
