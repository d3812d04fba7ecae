"""Triangle-mesh models read from ASCII PLY files, and their voxelization."""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from os import PathLike

from legoland.voxel import Voxel
from legoland.voxel_image import VoxelImage

logger = logging.getLogger(__name__)

# Size of one brick unit (one stud square, one brick high).
VOXEL_DIM_X = 8.0
VOXEL_DIM_Y = 8.0
VOXEL_DIM_Z = 9.6


class PlyFormatError(ValueError):
    """Raised when a file is not a readable ASCII PLY model."""


@dataclass
class Point:
    """A vertex of the model with its colour."""

    x: float
    y: float
    z: float
    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 255

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass
class Triangle:
    """A face of the model, referring to three shared points."""

    point1: Point
    point2: Point
    point3: Point


@dataclass
class Model:
    """A 3D model held as points and the triangles built from them."""

    points: list[Point] = field(default_factory=list)
    triangles: list[Triangle] = field(default_factory=list)
    model_height: float = 500.0
    is_colored: bool = False
    max_x: float = 0.0
    max_y: float = 0.0
    max_z: float = 0.0

    def supersample(self) -> None:
        """Scale the model to its height, then split triangles until every edge is short."""
        if not self.points:
            raise ValueError("model has no points")
        zs = [point.z for point in self.points]
        height = max(zs) - min(zs)
        if height == 0:
            raise ValueError("model has no height to scale")
        scale = self.model_height / height
        for point in self.points:
            point.x *= scale
            point.y *= scale
            point.z *= scale
        logger.info("Model scale: %g", scale)

        threshold = min(VOXEL_DIM_X, VOXEL_DIM_Y, VOXEL_DIM_Z)
        pending = deque(self.triangles)
        finished: list[Triangle] = []
        while pending:
            triangle = pending.popleft()
            split = self._split(triangle, threshold)
            if split is None:
                finished.append(triangle)
                continue
            new_point, first, second = split
            self.points.append(new_point)
            pending.append(first)
            pending.append(second)
        self.triangles = finished
        logger.info("Supersampling done, number of triangles: %d", len(self.triangles))

    @staticmethod
    def _split(
        triangle: Triangle, threshold: float
    ) -> tuple[Point, Triangle, Triangle] | None:
        p1, p2, p3 = triangle.point1, triangle.point2, triangle.point3
        l1 = math.dist(p3.position, p1.position)
        l2 = math.dist(p1.position, p2.position)
        l3 = math.dist(p2.position, p3.position)
        if max(l1, l2, l3) < threshold:
            return None
        if l1 > max(l2, l3):
            a, b, c = p1, p3, p2
        elif l2 > l3:
            a, b, c = p1, p2, p3
        else:
            a, b, c = p2, p3, p1
        middle = Point(
            (a.x + b.x) / 2,
            (a.y + b.y) / 2,
            (a.z + b.z) / 2,
            (a.red + b.red) // 2,
            (a.green + b.green) // 2,
            (a.blue + b.blue) // 2,
            (a.alpha + b.alpha) // 2,
        )
        return middle, Triangle(a, c, middle), Triangle(middle, b, c)

    def normalize(self) -> None:
        """Shift the model so that every coordinate is non-negative, starting at 0."""
        if not self.points:
            raise ValueError("model has no points")
        x_min = min(point.x for point in self.points)
        y_min = min(point.y for point in self.points)
        z_min = min(point.z for point in self.points)
        for point in self.points:
            point.x -= x_min
            point.y -= y_min
            point.z -= z_min
        self.max_x = max(0.0, max(point.x for point in self.points))
        self.max_y = max(0.0, max(point.y for point in self.points))
        self.max_z = max(0.0, max(point.z for point in self.points))

    def voxelize(self) -> VoxelImage:
        """Place every point in its voxel and return the resulting voxel image."""
        image = VoxelImage(
            _cell(self.max_x, VOXEL_DIM_X) + 1,
            _cell(self.max_y, VOXEL_DIM_Y) + 1,
            _cell(self.max_z, VOXEL_DIM_Z) + 1,
            self.is_colored,
        )
        total = len(self.points)
        for index, point in enumerate(self.points):
            image.add_voxel(
                Voxel(
                    _cell(point.x, VOXEL_DIM_X),
                    _cell(point.y, VOXEL_DIM_Y),
                    _cell(point.z, VOXEL_DIM_Z),
                    point.red,
                    point.green,
                    point.blue,
                    point.alpha,
                )
            )
            if (index > 0 and index % 10000 == 0) or index == total - 1:
                logger.info("Point %d out of %d voxelized", index, total)
        if image.is_colored:
            image.update_voxel_colors()
        return image


def _cell(value: float, dimension: float) -> int:
    return int(math.ceil(value / dimension - 0.5))


class _Tokens:
    def __init__(self, text: str) -> None:
        self._iter: Iterator[str] = iter(text.split())

    def word(self, what: str) -> str:
        try:
            return next(self._iter)
        except StopIteration:
            raise PlyFormatError(f"unexpected end of file while reading {what}") from None

    def integer(self, what: str) -> int:
        token = self.word(what)
        try:
            return int(token)
        except ValueError:
            raise PlyFormatError(f"expected an integer for {what}, got {token!r}") from None

    def number(self, what: str) -> float:
        token = self.word(what)
        try:
            return float(token)
        except ValueError:
            raise PlyFormatError(f"expected a number for {what}, got {token!r}") from None


def read_ply(path: str | PathLike[str], model_height: float = 500.0) -> Model:
    """Load an ASCII PLY file; the file's second and third coordinates become z and y."""
    with open(path, encoding="ascii", errors="replace") as handle:
        tokens = _Tokens(handle.read())

    if tokens.word("magic") != "ply":
        raise PlyFormatError("incorrect format: file does not start with 'ply'")

    num_points = 0
    num_triangles = 0
    is_colored = False
    word = tokens.word("header")
    while word != "end_header":
        if word == "vertex":
            num_points = tokens.integer("vertex count")
        elif word == "face":
            num_triangles = tokens.integer("face count")
        elif word == "red":
            is_colored = True
        word = tokens.word("header")
    logger.info("%d vertices, %d triangles, colored: %s", num_points, num_triangles, is_colored)

    points: list[Point] = []
    for _ in range(num_points):
        x = tokens.number("vertex")
        z = tokens.number("vertex")
        y = tokens.number("vertex")
        if is_colored:
            red = tokens.integer("vertex colour")
            green = tokens.integer("vertex colour")
            blue = tokens.integer("vertex colour")
            alpha = tokens.integer("vertex colour")
            points.append(Point(x, y, z, red, green, blue, alpha))
        else:
            points.append(Point(x, y, z))

    triangles: list[Triangle] = []
    for _ in range(num_triangles):
        tokens.integer("face vertex count")
        indices = [tokens.integer("face index") for _ in range(3)]
        for index in indices:
            if not 0 <= index < len(points):
                raise PlyFormatError(f"face refers to missing vertex {index}")
        triangles.append(Triangle(*(points[index] for index in indices)))

    return Model(
        points=points,
        triangles=triangles,
        model_height=model_height,
        is_colored=is_colored,
    )