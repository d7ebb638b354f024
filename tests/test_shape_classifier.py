"""
Testy klasyfikacji konturów i pierścieni.
"""

import pytest

from core.dxf.entities import BoundingBox, Contour
from core.dxf.polygon import calculate_signed_area
from core.dxf.shape_classifier import (
    separate_exterior_and_holes, group_contours_by_proximity, detect_shape,
    bounding_box_distance,
)


def box_contour(min_x, min_y, max_x, max_y):
    return Contour(closed=True, bounding_box=BoundingBox(min_x, min_y, max_x, max_y))


def test_single_contour_is_exterior():
    contour = box_contour(0, 0, 10, 10)
    shape = separate_exterior_and_holes([contour])
    assert shape.exterior is contour
    assert shape.holes == []


def test_contained_contour_is_hole():
    plate = box_contour(0, 0, 100, 100)
    hole = box_contour(40, 40, 60, 60)

    shape = separate_exterior_and_holes([hole, plate])

    assert shape.exterior is plate
    assert shape.holes == [hole]


def test_uncontained_contour_is_dropped(caplog):
    plate = box_contour(0, 0, 100, 100)
    outside = box_contour(200, 0, 220, 20)

    shape = separate_exterior_and_holes([plate, outside])

    assert shape.exterior is plate
    assert shape.holes == []
    assert "outside the exterior bounding box" in caplog.text


def test_empty_input():
    assert separate_exterior_and_holes([]) is None


def test_group_by_proximity():
    a = box_contour(0, 0, 10, 10)
    a_hole = box_contour(2, 2, 4, 4)
    b = box_contour(500, 0, 510, 10)

    groups = group_contours_by_proximity([a, b, a_hole], max_distance=100)

    assert groups == [[a, a_hole], [b]]


def test_bounding_box_distance():
    assert bounding_box_distance(BoundingBox(0, 0, 10, 10), BoundingBox(5, 5, 20, 20)) == 0.0
    assert bounding_box_distance(BoundingBox(0, 0, 10, 10), BoundingBox(13, 0, 20, 10)) == pytest.approx(3)


def test_detect_shape_by_winding():
    exterior = [(0, 0), (100, 0), (100, 100), (0, 100), (0, 0)]
    hole_cw = [(40, 40), (40, 60), (60, 60), (60, 40), (40, 40)]
    small_ccw = [(0, 0), (1, 0), (1, 1), (0, 0)]

    shape = detect_shape([hole_cw, small_ccw, exterior])

    assert shape.exterior == exterior
    assert len(shape.holes) == 1
    assert shape.holes[0] == list(reversed(hole_cw))
    assert calculate_signed_area(shape.holes[0]) > 0


def test_detect_shape_without_ccw_ring():
    assert detect_shape([[(0, 0), (0, 1), (1, 1), (0, 0)]]) is None
