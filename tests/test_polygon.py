"""
Testy składania i walidacji wielokątów.
"""

import math

import pytest

from core.dxf.entities import Point2D, LineEntity, CircleEntity, Contour
from core.dxf.contour_builder import build_contours
from core.dxf.polygon import (
    calculate_signed_area, ensure_counter_clockwise, close_contour,
    remove_duplicate_points, subdivide_long_edges, contour_to_polygon, validate_polygon,
)

SQUARE_CW = [(0, 0), (0, 10), (10, 10), (10, 0)]


def line(x1, y1, x2, y2):
    return LineEntity(vertices=(Point2D(x1, y1), Point2D(x2, y2)))


def max_edge(points):
    return max(math.dist(a, b) for a, b in zip(points, points[1:]))


def test_signed_area_sign_follows_winding():
    assert calculate_signed_area(SQUARE_CW) == pytest.approx(-100)
    assert calculate_signed_area(list(reversed(SQUARE_CW))) == pytest.approx(100)
    assert calculate_signed_area([(0, 0), (1, 1)]) == 0.0


def test_ensure_counter_clockwise():
    ccw = ensure_counter_clockwise(SQUARE_CW)
    assert calculate_signed_area(ccw) > 0
    assert ensure_counter_clockwise(ccw) == ccw


def test_close_and_dedup():
    assert close_contour([(0, 0), (1, 0), (1, 1)]) == [(0, 0), (1, 0), (1, 1), (0, 0)]
    assert close_contour([(0, 0), (1, 0), (0.001, 0)]) == [(0, 0), (1, 0), (0.001, 0)]
    assert remove_duplicate_points([(0, 0), (0.001, 0), (1, 0)]) == [(0, 0), (1, 0)]


def test_subdivide_long_edges():
    points = subdivide_long_edges([(0, 0), (50, 0)], 20)
    assert [x for x, _ in points] == pytest.approx([0, 50 / 3, 100 / 3, 50])
    assert all(y == 0 for _, y in points)
    assert subdivide_long_edges([(0, 0), (20, 0)], 20) == [(0, 0), (20, 0)]


def test_triangle_polygon_has_four_points():
    contour = build_contours([line(0, 0, 10, 0), line(10, 0, 5, 8), line(5, 8, 0, 0)])[0]
    polygon = contour_to_polygon(contour)

    assert len(polygon) == 4
    assert polygon[0] == polygon[-1]


def test_circle_polygon_point_count():
    contour = build_contours([CircleEntity(center=Point2D(0, 0), radius=10)])[0]
    polygon = contour_to_polygon(contour, arc_segments=32)

    assert len(polygon) == 33
    assert math.dist(polygon[0], polygon[-1]) < 0.01


def test_open_contour_is_force_closed_and_subdivided():
    contour = build_contours([line(0, 0, 100, 0), line(100, 0, 100, 60)])[0]
    polygon = contour_to_polygon(contour, max_edge_length=20)

    assert polygon[0] == polygon[-1]
    assert max_edge(polygon) <= 20 + 1e-6


def test_empty_contour_gives_empty_polygon():
    assert contour_to_polygon(Contour()) == []


def test_validate_polygon_errors():
    result = validate_polygon([(0, 0), (1, 1)])
    assert not result.valid
    assert "minimum 3" in result.errors[0]

    result = validate_polygon([(0, 0), (5, 5), (0.001, 0), (0, 0)])
    assert not result.valid
    assert "distinct" in result.errors[0]


def test_validate_polygon_warnings():
    result = validate_polygon([(0, 0), (10, 0), (10.0001, 0), (10, 10), (0, 0)])
    assert result.valid
    assert "Found 1 duplicate consecutive point(s)" in result.warnings

    result = validate_polygon([(0, 0), (0.001, 0), (10, 0), (10, 10), (0, 0)])
    assert any("near origin" in w for w in result.warnings)

    result = validate_polygon([(0, 0), (10, 0), (10, 0.05), (0, 0)])
    assert any("very small" in w for w in result.warnings)
