"""Point, size, rectangle and scale/translate transform primitives."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

Point = Tuple[float, float]


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_tuple(self) -> tuple[float, float]:
        return (self.width, self.height)


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class Transform:
    """Uniform scale followed by a translation.

    A content point ``(x, y)`` lands at
    ``(x * scale + translate_x, y * scale + translate_y)`` in the viewport.
    """

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    def map_point(self, point: Point) -> Point:
        x, y = point
        return (x * self.scale + self.translate_x, y * self.scale + self.translate_y)

    def map_rect(self, size: Size) -> Rect:
        """Return the viewport bounds of content of ``size``."""
        left, top = self.map_point((0.0, 0.0))
        right, bottom = self.map_point((size.width, size.height))
        return Rect(left, top, right, bottom)

    def post_translate(self, dx: float, dy: float) -> "Transform":
        return Transform(self.scale, self.translate_x + dx, self.translate_y + dy)

    def post_scale(self, factor: float, pivot: Point) -> "Transform":
        """Scale about ``pivot`` so the pivot keeps its viewport location."""
        px, py = pivot
        return Transform(
            self.scale * factor,
            (self.translate_x - px) * factor + px,
            (self.translate_y - py) * factor + py,
        )

    def to_matrix(self) -> np.ndarray:
        return np.array(
            [
                [self.scale, 0.0, self.translate_x],
                [0.0, self.scale, self.translate_y],
                [0.0, 0.0, 1.0],
            ],
            dtype=float,
        )

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "Transform":
        values = np.asarray(matrix, dtype=float)
        return cls(float(values[0, 0]), float(values[0, 2]), float(values[1, 2]))
