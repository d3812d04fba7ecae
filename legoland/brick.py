"""Division of a voxel image into catalogue bricks, and export as an LDraw model."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from typing import TextIO

from legoland.palette import AVAILABLE_BRICKS
from legoland.plane import Plane
from legoland.voxel import Coordinate
from legoland.voxel_image import VoxelImage

logger = logging.getLogger(__name__)

# Model units per stud and per brick height in the exported file.
_STUD_UNITS = 20
_HEIGHT_UNITS = 24


@dataclass
class Brick:
    """A placed brick: its lowest corner, footprint in studs, part and colour."""

    x: int
    y: int
    z: int
    size_x: int
    size_y: int
    filename: str
    color_number: int = 0

    @property
    def coordinates(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    @property
    def size(self) -> tuple[int, int]:
        return (self.size_x, self.size_y)

    def cells(self) -> list[tuple[int, int, int]]:
        """Return the voxel positions the brick covers."""
        return [
            (self.x + dx, self.y + dy, self.z)
            for dx in range(self.size_x)
            for dy in range(self.size_y)
        ]


def _fit_bricks(
    slice_plane: Plane,
    secondary: Coordinate,
    line: int,
    z: int,
    main_size: int,
    secondary_size: int,
    filename: str,
) -> list[Brick]:
    """Place bricks of one orientation along one line of a slice, clearing the cells used."""
    x_is_primary = secondary == Coordinate.Y
    main = Coordinate.X if x_is_primary else Coordinate.Y
    if line + secondary_size > slice_plane.max_val[secondary]:
        return []

    def cell(along: int, across: int) -> tuple[int, int]:
        return (along, across) if x_is_primary else (across, along)

    limit = slice_plane.max_val[main]
    bricks: list[Brick] = []
    counter = 0
    current_color: int | None = None
    for i in range(limit + 1):
        if counter == 0:
            first = slice_plane.voxel_at(*cell(i, line))
            if first is not None:
                current_color = first.color_brick_number
        if limit - i < main_size - counter:
            break
        fits = True
        for offset in range(secondary_size):
            voxel = slice_plane.voxel_at(*cell(i, line + offset))
            if current_color is None and voxel is not None:
                current_color = voxel.color_brick_number
            fits = (
                fits
                and voxel is not None
                and voxel.color_brick_number in (current_color, None)
            )
        counter = counter + 1 if fits else 0
        if counter != main_size:
            continue

        start = i - counter + 1
        color_number = 0 if current_color is None else current_color
        if x_is_primary:
            brick = Brick(start, line, z, main_size, secondary_size, filename, color_number)
        else:
            brick = Brick(line, start, z, secondary_size, main_size, filename, color_number)
        for k in range(main_size):
            for offset in range(secondary_size):
                cx, cy = cell(start + k, line + offset)
                slice_plane.matrix[cx][cy] = None
        bricks.append(brick)
        counter = 0
    return bricks


def brickify_plane(image: VoxelImage, z: int) -> list[Brick]:
    """Cover the voxels of the slice at height ``z`` with bricks, largest first.

    Even layers run bricks along x and odd layers along y, so layers interlock.
    """
    slice_plane = image.get_slice(z)
    if z % 2 == 0:
        secondary = Coordinate.Y
        perpendicular = image.yz_plane
    else:
        secondary = Coordinate.X
        perpendicular = image.xz_plane

    bricks: list[Brick] = []
    for brick_type in AVAILABLE_BRICKS:
        long_side = max(brick_type.size)
        short_side = min(brick_type.size)
        for line in range(slice_plane.max_val[secondary] + 1):
            if perpendicular.voxel_at(line, z) is None:
                continue
            bricks += _fit_bricks(
                slice_plane, secondary, line, z, long_side, short_side, brick_type.filename
            )
            bricks += _fit_bricks(
                slice_plane, secondary, line, z, short_side, long_side, brick_type.filename
            )
    return bricks


def brickify_voxel_image(image: VoxelImage) -> list[Brick]:
    """Convert the whole voxel image to bricks, layer by layer from the bottom."""
    logger.info("Converting voxel model to bricks...")
    bricks: list[Brick] = []
    for z in range(image.max_z + 1):
        if (z > 0 and z % 10 == 0) or z == image.max_z:
            logger.info("Converted plane z = %d", z)
        bricks += brickify_plane(image, z)
    return bricks


def sort_bricks(bricks: Iterable[Brick]) -> list[Brick]:
    """Return the bricks ordered by layer, then row, then column."""
    return sorted(bricks, key=lambda brick: (brick.z, brick.y, brick.x))


def write_brick_model(
    bricks: Iterable[Brick],
    stream: TextIO,
    filename: str,
    bricks_per_step: int = 0,
) -> None:
    """Write bricks as an LDraw model.

    A build step starts with every new layer when ``bricks_per_step`` is 0,
    and every ``bricks_per_step`` bricks otherwise.
    """
    ordered = sort_bricks(bricks)
    stream.write("0 LegoLand Model Generator\n")
    stream.write(f"0 Filename: {filename}\n")

    brick_counter = 0
    previous_height = 0
    first = True
    total = len(ordered)
    for index, brick in enumerate(ordered):
        x = int((brick.y + brick.size_y / 2) * _STUD_UNITS)
        y = -int(brick.z * _HEIGHT_UNITS)
        z = int((brick.x + brick.size_x / 2) * _STUD_UNITS)
        if brick.size_x < brick.size_y:
            a, c, g, i = 1, 0, 0, 1
        else:
            a, c, g, i = 0, 1, -1, 0

        if (
            first
            or (bricks_per_step == 0 and y != previous_height)
            or (bricks_per_step > 0 and brick_counter == bricks_per_step - 1)
        ):
            first = False
            brick_counter = 0
            stream.write("0 STEP\n")
        elif bricks_per_step > 0:
            brick_counter += 1

        stream.write(
            f"1 {brick.color_number} {x} {y} {z} {a} 0 {c} 0 1 0 {g} 0 {i} {brick.filename}\n"
        )
        if (index > 0 and index % 1000 == 0) or index == total - 1:
            logger.info("Exported brick %d out of %d", index, total)
        previous_height = y


def export_brick_model(
    bricks: Iterable[Brick],
    out_filename: str | PathLike[str],
    bricks_per_step: int = 0,
) -> None:
    """Write the brick model to a file."""
    logger.info("Exporting model to file %s...", out_filename)
    with open(out_filename, "w", encoding="ascii") as stream:
        write_brick_model(bricks, stream, str(out_filename), bricks_per_step)
    logger.info("Model exported successfully")