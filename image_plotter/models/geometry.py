from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Point":
        try:
            return cls(x=int(raw["x"]), y=int(raw["y"]))
        except (KeyError, TypeError) as err:
            raise ValueError(f"Point needs integer 'x' and 'y', got: {raw!r}") from err


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned box. `min` is the top-left corner, `max` the bottom-right.
    """
    min: Point
    max: Point

    @classmethod
    def from_xyxy(cls, x1: int, y1: int, x2: int, y2: int) -> "Rectangle":
        return cls(min=Point(int(x1), int(y1)), max=Point(int(x2), int(y2)))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Rectangle":
        try:
            return cls(min=Point.from_dict(raw["min"]), max=Point.from_dict(raw["max"]))
        except (KeyError, TypeError) as err:
            raise ValueError(f"Rectangle needs 'min' and 'max' points, got: {raw!r}") from err

    @property
    def width(self) -> int:
        return self.max.x - self.min.x

    @property
    def height(self) -> int:
        return self.max.y - self.min.y

    @property
    def is_degenerate(self) -> bool:
        norm = self.normalized()
        return norm.width == 0 or norm.height == 0

    def normalized(self) -> "Rectangle":
        """Return the same box with corners ordered so that min <= max."""
        return Rectangle(
            min=Point(min(self.min.x, self.max.x), min(self.min.y, self.max.y)),
            max=Point(max(self.min.x, self.max.x), max(self.min.y, self.max.y)),
        )


@dataclass(frozen=True)
class Annotation:
    rectangle: Rectangle
    label: str = ""
    color: Optional[Tuple[int, int, int, int]] = None  # None = configured default

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Annotation":
        """
        Build from the wire shape {"rectangle": {"min": {x, y}, "max": {x, y}}, "label": str}.
        An optional "color" holds 3 or 4 RGBA components.
        """
        if "rectangle" not in raw:
            raise ValueError(f"Annotation needs a 'rectangle', got: {raw!r}")
        label = raw.get("label") or ""
        color = raw.get("color")
        if color is not None:
            color = tuple(int(c) for c in color)
            if len(color) == 3:
                color += (255,)
            if len(color) != 4 or any(c < 0 or c > 255 for c in color):
                raise ValueError(f"Annotation color must be 3 or 4 values in [0, 255], got: {raw['color']!r}")
        return cls(rectangle=Rectangle.from_dict(raw["rectangle"]), label=str(label), color=color)
