"""Voxels: the unit cubes a model is built from before it becomes bricks."""

from __future__ import annotations

from enum import IntEnum

from legoland.palette import AVAILABLE_COLORS, Color, quantize_color


class Coordinate(IntEnum):
    X = 0
    Y = 1
    Z = 2


class Direction(IntEnum):
    PREVIOUS = 0
    NEXT = 1


def _scale(component: int, alpha: int) -> int:
    """Multiply by alpha/255, truncating toward zero."""
    product = component * alpha
    quotient = abs(product) // 255
    return -quotient if product < 0 else quotient


class Voxel:
    """A cube at integer coordinates, linked to its neighbours along each axis.

    ``neighbors[direction][axis]`` is the nearest voxel in that direction along
    that axis within the same line, or None.
    """

    def __init__(
        self,
        x: int,
        y: int,
        z: int,
        red: int = -1,
        green: int = -1,
        blue: int = -1,
        alpha: int = 255,
    ) -> None:
        self.coordinates: list[int] = [x, y, z]
        self.color = Color(_scale(red, alpha), _scale(green, alpha), _scale(blue, alpha))
        self.color_brick_number: int | None = None
        self.neighbors: list[list[Voxel | None]] = [[None, None, None], [None, None, None]]
        self.color_histogram: list[int] = [0] * len(AVAILABLE_COLORS)

    def __repr__(self) -> str:
        x, y, z = self.coordinates
        return f"Voxel({x}, {y}, {z}, color={self.color!r})"

    def record_color(self, color: Color) -> int | None:
        """Count a colour sample in the histogram and return its palette index."""
        index = quantize_color(color)
        if index is not None:
            self.color_histogram[index] += 1
        return index

    def majority_color(self) -> int:
        """Return the palette index seen most often (0 when nothing was seen)."""
        best_index = 0
        best_count = 0
        for index, count in enumerate(self.color_histogram):
            if count > best_count:
                best_count = count
                best_index = index
        return best_index