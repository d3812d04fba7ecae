import math

import pytest

from legoland.model import (
    VOXEL_DIM_X,
    VOXEL_DIM_Y,
    VOXEL_DIM_Z,
    Model,
    PlyFormatError,
    Point,
    Triangle,
    read_ply,
)
from legoland.palette import AVAILABLE_COLORS, Color


def write_ply(path, vertices, faces, colored=False):
    lines = [
        "ply",
        "format ascii 1.0",
        f"element vertex {len(vertices)}",
        "property float x",
        "property float y",
        "property float z",
    ]
    if colored:
        lines += [
            "property uchar red",
            "property uchar green",
            "property uchar blue",
            "property uchar alpha",
        ]
    lines += [
        f"element face {len(faces)}",
        "property list uchar int vertex_indices",
        "end_header",
    ]
    lines += [" ".join(str(v) for v in vertex) for vertex in vertices]
    lines += [f"3 {a} {b} {c}" for a, b, c in faces]
    path.write_text("\n".join(lines) + "\n")
    return path


TRIANGLE = [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0)]
RED_TRIANGLE = [(*v, 255, 0, 0, 255) for v in TRIANGLE]


def test_read_ply_swaps_y_and_z(tmp_path):
    path = write_ply(tmp_path / "m.ply", [(1.5, 2.5, 3.5)], [])
    model = read_ply(path, 100)
    point = model.points[0]
    assert (point.x, point.y, point.z) == (1.5, 3.5, 2.5)
    assert model.model_height == 100


def test_read_ply_uncolored_defaults(tmp_path):
    path = write_ply(tmp_path / "m.ply", TRIANGLE, [(0, 1, 2)])
    model = read_ply(path, 10)
    assert model.is_colored is False
    assert all((p.red, p.green, p.blue, p.alpha) == (0, 0, 0, 255) for p in model.points)


def test_read_ply_colored(tmp_path):
    vertices = [(0, 0, 0, 10, 20, 30, 40)]
    path = write_ply(tmp_path / "m.ply", vertices, [], colored=True)
    model = read_ply(path, 10)
    assert model.is_colored is True
    point = model.points[0]
    assert (point.red, point.green, point.blue, point.alpha) == (10, 20, 30, 40)


def test_read_ply_faces_share_points(tmp_path):
    path = write_ply(tmp_path / "m.ply", TRIANGLE, [(2, 0, 1)])
    model = read_ply(path, 10)
    triangle = model.triangles[0]
    assert triangle.point1 is model.points[2]
    assert triangle.point2 is model.points[0]
    assert triangle.point3 is model.points[1]


def test_read_ply_rejects_other_format(tmp_path):
    path = tmp_path / "m.obj"
    path.write_text("v 0 0 0\n")
    with pytest.raises(PlyFormatError):
        read_ply(path, 10)


def test_read_ply_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_ply(tmp_path / "absent.ply", 10)


def test_read_ply_truncated_vertices(tmp_path):
    path = tmp_path / "m.ply"
    path.write_text("ply\nelement vertex 2\nend_header\n0 0 0\n1 1\n")
    with pytest.raises(PlyFormatError):
        read_ply(path, 10)


def test_read_ply_missing_end_header(tmp_path):
    path = tmp_path / "m.ply"
    path.write_text("ply\nelement vertex 2\n")
    with pytest.raises(PlyFormatError):
        read_ply(path, 10)


def test_read_ply_bad_face_index(tmp_path):
    path = write_ply(tmp_path / "m.ply", TRIANGLE, [(0, 1, 7)])
    with pytest.raises(PlyFormatError):
        read_ply(path, 10)


def _edges(triangle):
    p1, p2, p3 = triangle.point1, triangle.point2, triangle.point3
    return [
        math.dist(p1.position, p2.position),
        math.dist(p2.position, p3.position),
        math.dist(p3.position, p1.position),
    ]


def test_supersample_scales_to_height(tmp_path):
    model = read_ply(write_ply(tmp_path / "m.ply", TRIANGLE, [(0, 1, 2)]), 50)
    model.supersample()
    zs = [p.z for p in model.points]
    assert max(zs) - min(zs) == pytest.approx(50)


def test_supersample_splits_long_edges(tmp_path):
    model = read_ply(write_ply(tmp_path / "m.ply", TRIANGLE, [(0, 1, 2)]), 50)
    model.supersample()
    threshold = min(VOXEL_DIM_X, VOXEL_DIM_Y, VOXEL_DIM_Z)
    assert len(model.triangles) > 1
    assert len(model.points) > 3
    for triangle in model.triangles:
        assert max(_edges(triangle)) < threshold


def test_supersample_keeps_small_triangle(tmp_path):
    model = read_ply(write_ply(tmp_path / "m.ply", TRIANGLE, [(0, 1, 2)]), 1)
    model.supersample()
    assert len(model.triangles) == 1
    assert len(model.points) == 3


def test_supersample_interpolates_colour(tmp_path):
    model = read_ply(write_ply(tmp_path / "m.ply", RED_TRIANGLE, [(0, 1, 2)], colored=True), 40)
    model.supersample()
    assert all((p.red, p.green, p.blue, p.alpha) == (255, 0, 0, 255) for p in model.points)


def test_supersample_flat_model_raises():
    points = [Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0)]
    model = Model(points=points, triangles=[Triangle(*points)], model_height=10)
    with pytest.raises(ValueError):
        model.supersample()


def test_normalize_moves_to_origin():
    points = [Point(-3, 5, 2), Point(4, -1, 7), Point(0, 2, -6)]
    model = Model(points=points, triangles=[Triangle(*points)])
    model.normalize()
    assert min(p.x for p in points) == 0
    assert min(p.y for p in points) == 0
    assert min(p.z for p in points) == 0
    assert model.max_x == max(p.x for p in points)
    assert model.max_y == max(p.y for p in points)
    assert model.max_z == max(p.z for p in points)


def test_voxelize_uncolored(tmp_path):
    model = read_ply(write_ply(tmp_path / "m.ply", TRIANGLE, [(0, 1, 2)]), 40)
    model.supersample()
    model.normalize()
    image = model.voxelize()
    voxels = list(image.voxels())
    assert image.has_voxel(0, 0, 0)
    assert 0 < len(voxels) <= len(model.points)
    for voxel in voxels:
        x, y, z = voxel.coordinates
        assert 0 <= x < image.max_x and 0 <= y < image.max_y and 0 <= z < image.max_z
        assert voxel.color_brick_number is None
    assert image.is_colored is False


def test_voxelize_colored_picks_majority(tmp_path):
    model = read_ply(write_ply(tmp_path / "m.ply", RED_TRIANGLE, [(0, 1, 2)], colored=True), 40)
    model.supersample()
    model.normalize()
    image = model.voxelize()
    red_index = AVAILABLE_COLORS.index(Color(255, 0, 0))
    assert image.is_colored is True
    assert all(v.color_brick_number == red_index for v in image.voxels())