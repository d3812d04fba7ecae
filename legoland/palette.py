"""Brick catalogue and colour palette used when building brick models."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Color:
    """An RGB colour; a component of -1 marks a "don't care" colour."""

    red: int
    green: int
    blue: int

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def is_dont_care(self) -> bool:
        return -1 in self.rgb


DONT_CARE = Color(-1, -1, -1)


@dataclass(frozen=True)
class BrickType:
    """A catalogue brick: its footprint in studs and its part file name."""

    length: int
    width: int
    filename: str

    @property
    def size(self) -> tuple[int, int]:
        return (self.length, self.width)


# The basic eleven bricks, largest first.
AVAILABLE_BRICKS: tuple[BrickType, ...] = (
    BrickType(8, 2, "3007.DAT"),
    BrickType(6, 2, "2456.DAT"),
    BrickType(4, 2, "3001.DAT"),
    BrickType(3, 2, "3002.DAT"),
    BrickType(2, 2, "3003.DAT"),
    BrickType(8, 1, "3008.DAT"),
    BrickType(6, 1, "3009.DAT"),
    BrickType(4, 1, "3010.DAT"),
    BrickType(3, 1, "3622.DAT"),
    BrickType(2, 1, "3004.DAT"),
    BrickType(1, 1, "3005.DAT"),
)

# The basic sixteen brick colours; the index is the colour number.
AVAILABLE_COLORS: tuple[Color, ...] = (
    Color(51, 51, 51),
    Color(0, 51, 178),
    Color(0, 127, 51),
    Color(0, 181, 166),
    Color(204, 0, 0),
    Color(255, 51, 153),
    Color(102, 51, 0),
    Color(153, 153, 153),
    Color(102, 102, 88),
    Color(0, 128, 255),
    Color(51, 255, 102),
    Color(171, 253, 249),
    Color(255, 0, 0),
    Color(255, 176, 204),
    Color(255, 229, 0),
    Color(255, 255, 255),
)


def quantize_color(color: Color) -> int | None:
    """Return the index of the nearest palette colour, or None for "don't care"."""
    if color.is_dont_care:
        return None
    best_index = 0
    best_distance = 255.0 * 3
    for index, candidate in enumerate(AVAILABLE_COLORS):
        distance = math.dist(color.rgb, candidate.rgb)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index