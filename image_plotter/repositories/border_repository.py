from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Sequence, Tuple
import numpy as np

from ..models.geometry import Rectangle

Coords = Tuple[np.ndarray, np.ndarray]  # (ys, xs)


class BorderRepository:
    """
    Pixel-level border drawing.

    • Builds the set of border coordinates for a rectangle.
    • Splits it into disjoint chunks and writes them from a worker pool.
    """

    # ---------- private helpers ----------
    @staticmethod
    def _paint(pixels: np.ndarray, ys: np.ndarray, xs: np.ndarray, color: np.ndarray) -> int:
        pixels[ys, xs] = color
        return len(ys)

    @staticmethod
    def _chunks(coords: Coords, chunk_size: int) -> List[Coords]:
        ys, xs = coords
        return [(ys[i:i + chunk_size], xs[i:i + chunk_size]) for i in range(0, len(ys), chunk_size)]

    # ---------- public API ----------
    @staticmethod
    def border_coordinates(rect: Rectangle, thickness: int, width: int, height: int) -> Coords:
        """
        Coordinates of every border pixel, clipped to a width x height image.

        Layer t (0 <= t < thickness) covers:
            top    y = min.y + t,  x in [min.x, max.x)
            bottom y = max.y - t,  x in [min.x, max.x)
            left   x = min.x + t,  y in [min.y, max.y]
            right  x = max.x - t,  y in [min.y, max.y]

        Each coordinate appears exactly once in the result.
        """
        x1, y1, x2, y2 = rect.min.x, rect.min.y, rect.max.x, rect.max.y
        # Edge spans are clamped to the image before anything is allocated
        horiz = np.arange(max(x1, 0), min(x2, width), dtype=np.int64)
        vert = np.arange(max(y1, 0), min(y2 + 1, height), dtype=np.int64)

        ys_parts, xs_parts = [], []
        for t in range(thickness):
            if horiz.size:
                for row in (y1 + t, y2 - t):
                    if 0 <= row < height:
                        ys_parts.append(np.full_like(horiz, row))
                        xs_parts.append(horiz)
            if vert.size:
                for col in (x1 + t, x2 - t):
                    if 0 <= col < width:
                        ys_parts.append(vert)
                        xs_parts.append(np.full_like(vert, col))

        if not ys_parts:
            return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64)

        ys = np.concatenate(ys_parts)
        xs = np.concatenate(xs_parts)

        linear = np.unique(ys * width + xs)
        return linear // width, linear % width

    def draw(
        self,
        pixels: np.ndarray,
        coords: Coords,
        color: Sequence[int],
        *,
        max_workers: int = 4,
        chunk_size: int = 4096,
    ) -> int:
        """
        Write `color` at every coordinate, one task per disjoint chunk.
        Blocks until every task is done; the first task error is re-raised.
        Returns the number of pixels written.
        """
        chunks = self._chunks(coords, chunk_size)
        if not chunks:
            return 0

        rgba = np.asarray(color, dtype=np.uint8)
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self._paint, pixels, ys, xs, rgba) for ys, xs in chunks]
            wait(futures)

        return sum(f.result() for f in futures)
