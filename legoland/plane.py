"""A 2D grid of voxel columns, each kept as a sorted linked list along the third axis."""

from __future__ import annotations

from legoland.voxel import Coordinate, Direction, Voxel

_PREV = Direction.PREVIOUS
_NEXT = Direction.NEXT


def _perpendicular(c1: Coordinate, c2: Coordinate) -> Coordinate:
    pair = {c1, c2}
    if pair == {Coordinate.X, Coordinate.Y}:
        return Coordinate.Z
    if pair == {Coordinate.X, Coordinate.Z}:
        return Coordinate.Y
    return Coordinate.X


class Plane:
    """Grid parallel to (par_coor1, par_coor2); each cell heads a column of voxels.

    The column at a cell lists the voxels with those two coordinates in
    ascending order of the perpendicular coordinate, linked through the
    voxels' neighbour slots for that axis.
    """

    def __init__(
        self,
        par_coor1: Coordinate,
        par_coor2: Coordinate,
        max_val1: int,
        max_val2: int,
    ) -> None:
        self.par_coor1 = Coordinate(par_coor1)
        self.par_coor2 = Coordinate(par_coor2)
        self.perp_coor = _perpendicular(self.par_coor1, self.par_coor2)
        self.max_val: tuple[int, int] = (max_val1, max_val2)
        self.matrix: list[list[Voxel | None]] = [[None] * max_val2 for _ in range(max_val1)]

    def insert_voxel(self, voxel: Voxel | None) -> None:
        """Link a voxel into its column, keeping the column sorted."""
        if voxel is None:
            return
        perp = self.perp_coor
        coor1 = voxel.coordinates[self.par_coor1]
        coor2 = voxel.coordinates[self.par_coor2]
        coor3 = voxel.coordinates[perp]
        current = self.matrix[coor1][coor2]

        if current is None or coor3 < current.coordinates[perp]:
            self.matrix[coor1][coor2] = voxel
            voxel.neighbors[_PREV][perp] = None
            voxel.neighbors[_NEXT][perp] = current
            if current is not None:
                current.neighbors[_PREV][perp] = voxel
            return

        while current.neighbors[_NEXT][perp] is not None and coor3 > current.coordinates[perp]:
            current = current.neighbors[_NEXT][perp]

        if current.neighbors[_NEXT][perp] is None and coor3 > current.coordinates[perp]:
            voxel.neighbors[_NEXT][perp] = None
            current.neighbors[_NEXT][perp] = voxel
            voxel.neighbors[_PREV][perp] = current
        else:
            before = current.neighbors[_PREV][perp]
            if before is not None:
                before.neighbors[_NEXT][perp] = voxel
            voxel.neighbors[_PREV][perp] = before
            voxel.neighbors[_NEXT][perp] = current
            current.neighbors[_PREV][perp] = voxel

    def remove_voxel(self, voxel: Voxel | None) -> None:
        """Unlink a voxel from its column."""
        if voxel is None:
            return
        perp = self.perp_coor
        coor1 = voxel.coordinates[self.par_coor1]
        coor2 = voxel.coordinates[self.par_coor2]
        before = voxel.neighbors[_PREV][perp]
        after = voxel.neighbors[_NEXT][perp]

        if self.matrix[coor1][coor2] is voxel:
            self.matrix[coor1][coor2] = after
        if before is not None:
            before.neighbors[_NEXT][perp] = after
        if after is not None:
            after.neighbors[_PREV][perp] = before
        voxel.neighbors[_PREV][perp] = None
        voxel.neighbors[_NEXT][perp] = None

    def voxel_at(self, coor1: int, coor2: int) -> Voxel | None:
        """Return the first voxel of the column at a cell, None if empty or outside."""
        if not (0 <= coor1 < self.max_val[0] and 0 <= coor2 < self.max_val[1]):
            return None
        return self.matrix[coor1][coor2]