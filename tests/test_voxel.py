from legoland.palette import AVAILABLE_COLORS, DONT_CARE, Color
from legoland.voxel import Coordinate, Direction, Voxel


def test_default_voxel_is_dont_care():
    voxel = Voxel(1, 2, 3)
    assert voxel.coordinates == [1, 2, 3]
    assert voxel.color == DONT_CARE
    assert voxel.color_brick_number is None


def test_opaque_colour_is_kept():
    voxel = Voxel(0, 0, 0, 10, 20, 30, 255)
    assert voxel.color == Color(10, 20, 30)


def test_transparent_colour_goes_black():
    voxel = Voxel(0, 0, 0, 200, 100, 50, 0)
    assert voxel.color == Color(0, 0, 0)


def test_neighbors_start_empty():
    voxel = Voxel(4, 5, 6)
    for direction in Direction:
        for axis in Coordinate:
            assert voxel.neighbors[direction][axis] is None


def test_histogram_matches_palette():
    voxel = Voxel(0, 0, 0)
    assert len(voxel.color_histogram) == len(AVAILABLE_COLORS)
    assert sum(voxel.color_histogram) == 0


def test_record_color_counts_palette_index():
    voxel = Voxel(0, 0, 0)
    colour = AVAILABLE_COLORS[5]
    assert voxel.record_color(colour) == 5
    assert voxel.record_color(colour) == 5
    assert voxel.color_histogram[5] == 2
    assert sum(voxel.color_histogram) == 2


def test_record_dont_care_is_not_counted():
    voxel = Voxel(0, 0, 0)
    assert voxel.record_color(DONT_CARE) is None
    assert sum(voxel.color_histogram) == 0


def test_majority_color_picks_most_frequent():
    voxel = Voxel(0, 0, 0)
    voxel.record_color(AVAILABLE_COLORS[3])
    for _ in range(3):
        voxel.record_color(AVAILABLE_COLORS[9])
    voxel.record_color(AVAILABLE_COLORS[12])
    assert voxel.majority_color() == 9


def test_majority_color_tie_prefers_lower_index():
    voxel = Voxel(0, 0, 0)
    voxel.record_color(AVAILABLE_COLORS[11])
    voxel.record_color(AVAILABLE_COLORS[4])
    assert voxel.majority_color() == 4


def test_majority_color_of_empty_histogram_is_first():
    assert Voxel(0, 0, 0).majority_color() == 0