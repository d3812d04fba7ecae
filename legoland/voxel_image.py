"""The voxel store of a model, indexed by three orthogonal planes, plus thickening."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from enum import IntEnum

from legoland.plane import Plane
from legoland.voxel import Coordinate, Direction, Voxel

logger = logging.getLogger(__name__)

_PREV = Direction.PREVIOUS
_NEXT = Direction.NEXT


class InsideState(IntEnum):
    UNKNOWN = 0
    INSIDE = 1
    OUTSIDE = 2
    MODEL = 3


class ThickeningDirection(IntEnum):
    POSITIVE = 1
    NEGATIVE = -1
    NONE = 0


class InsideMatrix:
    """3D grid telling, for every cell of the scene, whether it is inside the model."""

    def __init__(self, max_x: int, max_y: int, max_z: int) -> None:
        self.max_x = max_x
        self.max_y = max_y
        self.max_z = max_z
        self.reset()

    def reset(self) -> None:
        """Mark every cell as unknown."""
        self.cells: list[list[list[InsideState]]] = [
            [[InsideState.UNKNOWN] * self.max_z for _ in range(self.max_y)]
            for _ in range(self.max_x)
        ]

    def _contains(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.max_x and 0 <= y < self.max_y and 0 <= z < self.max_z

    def get(self, x: int, y: int, z: int) -> InsideState:
        """Return the state of a cell; cells outside the grid are OUTSIDE."""
        if not self._contains(x, y, z):
            return InsideState.OUTSIDE
        return self.cells[x][y][z]

    def set(self, x: int, y: int, z: int, state: InsideState) -> None:
        """Set the state of a cell inside the grid."""
        if not self._contains(x, y, z):
            raise IndexError(f"cell ({x}, {y}, {z}) is outside the grid")
        self.cells[x][y][z] = InsideState(state)


class VoxelImage:
    """All voxels of a model, linked into XY, XZ and YZ planes."""

    def __init__(self, max_x: int, max_y: int, max_z: int, is_colored: bool = False) -> None:
        self.max_x = max_x
        self.max_y = max_y
        self.max_z = max_z
        self.is_colored = is_colored
        self.xy_plane = Plane(Coordinate.X, Coordinate.Y, max_x, max_y)
        self.yz_plane = Plane(Coordinate.Y, Coordinate.Z, max_y, max_z)
        self.xz_plane = Plane(Coordinate.X, Coordinate.Z, max_x, max_z)
        self.inside = InsideMatrix(max_x, max_y, max_z)

    @property
    def _planes(self) -> tuple[Plane, Plane, Plane]:
        return (self.xy_plane, self.yz_plane, self.xz_plane)

    def _in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.max_x and 0 <= y < self.max_y and 0 <= z < self.max_z

    # --- storage -----------------------------------------------------------

    def add_voxel(self, voxel: Voxel | None) -> Voxel | None:
        """Store a voxel and return the voxel now held at its position.

        If a voxel already occupies the position, the new one only adds its
        colour sample to the existing voxel's histogram.
        """
        if voxel is None:
            return None
        x, y, z = voxel.coordinates
        if not self._in_bounds(x, y, z):
            raise ValueError(f"voxel at ({x}, {y}, {z}) lies outside the image")
        existing = self.find_voxel(x, y, z)
        if existing is not None:
            existing.record_color(voxel.color)
            return existing
        for plane in self._planes:
            plane.insert_voxel(voxel)
        voxel.record_color(voxel.color)
        return voxel

    def remove_voxel(self, voxel: Voxel | None) -> None:
        """Unlink a voxel from all three planes."""
        if voxel is None:
            raise ValueError("no voxel to remove")
        for plane in self._planes:
            plane.remove_voxel(voxel)

    def find_voxel(self, x: int, y: int, z: int) -> Voxel | None:
        """Return the voxel at a position, or None."""
        current = self.xy_plane.voxel_at(x, y)
        while current is not None and current.coordinates[Coordinate.Z] != z:
            current = current.neighbors[_NEXT][Coordinate.Z]
        return current

    def has_voxel(self, x: int, y: int, z: int) -> bool:
        """Tell whether a voxel occupies a position."""
        return self.find_voxel(x, y, z) is not None

    def voxels(self) -> Iterator[Voxel]:
        """Yield every voxel, column by column of the XY plane."""
        for row in self.xy_plane.matrix:
            for head in row:
                current = head
                while current is not None:
                    yield current
                    current = current.neighbors[_NEXT][Coordinate.Z]

    # --- colours and slices -------------------------------------------------

    def update_voxel_colors(self) -> None:
        """Give every voxel the palette colour seen most often within it."""
        for voxel in self.voxels():
            voxel.color_brick_number = voxel.majority_color()

    def get_slice(self, z: int) -> Plane:
        """Return an XY plane holding the voxels whose z coordinate is ``z``."""
        if z < 0 or z > self.max_z:
            raise IndexError(f"slice z={z} is outside 0..{self.max_z}")
        slice_plane = Plane(Coordinate.X, Coordinate.Y, self.max_x, self.max_y)
        for y in range(self.max_y):
            current = self.yz_plane.voxel_at(y, z)
            while current is not None:
                cx, cy, _ = current.coordinates
                slice_plane.matrix[cx][cy] = current
                current = current.neighbors[_NEXT][Coordinate.X]
        return slice_plane

    # --- thickening ---------------------------------------------------------

    def thicken(self, user_thickness: int) -> None:
        """Thicken thin walls toward the model's inside for a stable build.

        A thickness of 1 leaves the model alone; 0 picks one from the model size.
        """
        if user_thickness == 1:
            return
        if user_thickness == 0:
            thickness = math.ceil(max(self.max_x, self.max_y, self.max_z) / 100)
        else:
            thickness = user_thickness
        logger.info("Thickening, model thickness: %d", thickness)

        self._build_inside_matrix()
        for plane in (self.xy_plane, self.xz_plane, self.yz_plane):
            self._thicken_plane(plane, thickness)
        self._build_inside_matrix()
        for plane in (self.yz_plane, self.xz_plane, self.xy_plane):
            self._thicken_plane(plane, thickness)

    def _build_inside_matrix(self) -> None:
        inside = self.inside
        inside.reset()
        occupied = {tuple(v.coordinates) for v in self.voxels()}

        for x in range(self.max_x):
            for y in range(self.max_y):
                for z in range(self.max_z):
                    if x == 0 or y == 0 or z == 0:
                        state = InsideState.MODEL if (x, y, z) in occupied else InsideState.OUTSIDE
                        inside.cells[x][y][z] = state

        finished = False
        iteration = 0
        while not finished:
            finished = True
            iteration += 1
            for x in range(1, self.max_x):
                for y in range(1, self.max_y):
                    for z in range(1, self.max_z):
                        if inside.cells[x][y][z] is not InsideState.UNKNOWN:
                            continue
                        if (x, y, z) in occupied:
                            inside.cells[x][y][z] = InsideState.MODEL
                            finished = False
                        elif self._is_next_to_outside(x, y, z):
                            inside.cells[x][y][z] = InsideState.OUTSIDE
                            finished = False
            logger.debug("Inside matrix iteration %d done", iteration)

        for plane_cells in inside.cells:
            for line in plane_cells:
                for z, state in enumerate(line):
                    if state is InsideState.UNKNOWN:
                        line[z] = InsideState.INSIDE

    def _is_next_to_outside(self, x: int, y: int, z: int) -> bool:
        get = self.inside.get
        outside = InsideState.OUTSIDE
        return (
            get(x + 1, y, z) is outside
            or get(x, y + 1, z) is outside
            or get(x, y, z + 1) is outside
            or get(x - 1, y, z) is outside
            or get(x, y - 1, z) is outside
            or get(x, y, z - 1) is outside
        )

    @staticmethod
    def _step(
        coordinates: list[int] | tuple[int, int, int],
        axis: Coordinate,
        direction: ThickeningDirection,
    ) -> tuple[int, int, int]:
        moved = list(coordinates)
        moved[axis] += int(direction)
        return (moved[0], moved[1], moved[2])

    def _thicken_plane(self, plane: Plane, thickness: int) -> None:
        axis = plane.perp_coor
        for i in range(plane.max_val[0]):
            for j in range(plane.max_val[1]):
                current = plane.matrix[i][j]
                while current is not None:
                    if self._should_be_thickened(current, thickness, axis):
                        direction = self._find_thickening_direction(current, axis)
                        if direction is not ThickeningDirection.NONE:
                            self._thicken_single_voxel(current, axis, direction, thickness)
                    current = self._next_distant_voxel(current, axis)

    @staticmethod
    def _should_be_thickened(voxel: Voxel, required: int, axis: Coordinate) -> bool:
        run = 1
        current = voxel
        following = voxel.neighbors[_NEXT][axis]
        while following is not None and current.coordinates[axis] + 1 == following.coordinates[axis]:
            run += 1
            current = following
            following = current.neighbors[_NEXT][axis]
        return run < required

    def _find_thickening_direction(self, voxel: Voxel, axis: Coordinate) -> ThickeningDirection:
        pos = ThickeningDirection.POSITIVE
        neg = ThickeningDirection.NEGATIVE
        nxt = self._step(voxel.coordinates, axis, pos)
        while self.has_voxel(*nxt):
            nxt = self._step(nxt, axis, pos)
        prev = self._step(voxel.coordinates, axis, neg)
        while self.has_voxel(*prev):
            prev = self._step(prev, axis, neg)

        prev_inside = self.inside.get(*prev) is InsideState.INSIDE
        next_inside = self.inside.get(*nxt) is InsideState.INSIDE

        if prev_inside and not next_inside:
            return neg
        if next_inside and not prev_inside:
            return pos
        if next_inside and prev_inside:
            next_voxel = self._next_distant_voxel(voxel, axis)
            prev_voxel = self._prev_distant_voxel(voxel, axis)
            own = voxel.coordinates[axis]
            to_next = abs(own - next_voxel.coordinates[axis]) if next_voxel else math.inf
            to_prev = abs(own - prev_voxel.coordinates[axis]) if prev_voxel else math.inf
            return pos if to_next < to_prev else neg
        return ThickeningDirection.NONE

    def _thicken_single_voxel(
        self,
        voxel: Voxel,
        axis: Coordinate,
        direction: ThickeningDirection,
        thickness: int,
    ) -> None:
        link = _NEXT if direction is ThickeningDirection.POSITIVE else _PREV
        current: Voxel | None = voxel
        reached_edge = False
        out_of_object = False
        for _ in range(1, thickness):
            if current is None:
                return
            location = self._step(current.coordinates, axis, direction)
            if self.has_voxel(*location):
                reached_edge = True
            else:
                if reached_edge:
                    if self.inside.get(*location) is InsideState.OUTSIDE:
                        out_of_object = True
                    else:
                        reached_edge = False
                if not out_of_object:
                    if not self._in_bounds(*location):
                        return
                    self.add_voxel(Voxel(*location))
                    self.inside.set(*location, InsideState.MODEL)
            if out_of_object:
                break
            current = current.neighbors[link][axis]

    def _next_distant_voxel(self, voxel: Voxel, axis: Coordinate) -> Voxel | None:
        current = voxel
        location = self._step(current.coordinates, axis, ThickeningDirection.POSITIVE)
        while self.has_voxel(*location):
            current = current.neighbors[_NEXT][axis]
            location = self._step(current.coordinates, axis, ThickeningDirection.POSITIVE)
        return current.neighbors[_NEXT][axis]

    def _prev_distant_voxel(self, voxel: Voxel, axis: Coordinate) -> Voxel | None:
        current = voxel
        location = self._step(current.coordinates, axis, ThickeningDirection.NEGATIVE)
        while self.has_voxel(*location):
            current = current.neighbors[_PREV][axis]
            location = self._step(current.coordinates, axis, ThickeningDirection.NEGATIVE)
        return current.neighbors[_PREV][axis]