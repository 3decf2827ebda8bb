from __future__ import annotations
from io import BytesIO
from pathlib import Path
from typing import Dict
import logging
import threading

from PIL import ImageFont

from ..exceptions import FontLoadFailed

logger = logging.getLogger(__name__)


class FontEngine:
    """
    Per-font singleton around a Pillow TrueType face.

    The font file is read once per process and kept as immutable bytes; sized
    faces are derived from those bytes on demand and cached. Without a path,
    Pillow's bundled default face is used.
    """

    _instances: Dict[str, FontEngine] = {}  # Class-level cache, keyed by font path
    _lock = threading.Lock()

    def __new__(cls, font_path: str | Path | None = None):
        key = str(font_path) if font_path else ""
        with cls._lock:
            if key not in cls._instances:
                instance = super().__new__(cls)
                instance._init_engine(font_path)
                cls._instances[key] = instance
            return cls._instances[key]

    def _init_engine(self, font_path: str | Path | None) -> None:
        """
        Read the font file (if any) and check that it parses.

        Raises:
            FontLoadFailed: the file is missing or is not a usable font.
        """
        self.font_path = Path(font_path) if font_path else None
        self._font_bytes: bytes | None = None
        self._faces: Dict[int, ImageFont.FreeTypeFont] = {}  # size -> face

        if self.font_path is not None:
            try:
                self._font_bytes = self.font_path.read_bytes()
            except OSError as err:
                raise FontLoadFailed(f"Cannot read font file {self.font_path}: {err}") from err

        # Parse once up front so a broken font fails at load, not mid-request
        self._load_face(12)
        logger.info(f"Font engine ready: {self.font_path or 'bundled default'}")

    def _load_face(self, size: int) -> ImageFont.FreeTypeFont:
        try:
            if self._font_bytes is None:
                face = ImageFont.load_default(size=size)
            else:
                face = ImageFont.truetype(BytesIO(self._font_bytes), size=size)
        except (OSError, ValueError, ImportError) as err:
            raise FontLoadFailed(f"Cannot load font {self.font_path or 'bundled default'}: {err}") from err

        # The bitmap fallback Pillow uses without FreeType cannot be sized or anchored
        if not isinstance(face, ImageFont.FreeTypeFont):
            raise FontLoadFailed("Pillow was built without FreeType support; no scalable font available")
        return face

    def face(self, size: int) -> ImageFont.FreeTypeFont:
        """Return a face rendered at `size` pixels."""
        size = max(1, int(size))
        if size not in self._faces:
            self._faces[size] = self._load_face(size)
        return self._faces[size]
