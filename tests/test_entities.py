"""
Testy modelu entities - punkty końcowe, zamknięcie, odwracanie, bounding box.
"""

import math

import pytest

from core.dxf.entities import (
    Point2D, BoundingBox, LineEntity, CircleEntity, ArcEntity, PolylineVertex,
    PolylineEntity, EllipseEntity, SplineEntity, UnsupportedEntity, EntityType,
    get_start_point, get_end_point, is_closed_entity, reverse_entity, entity_type_name,
)


def approx_point(p: Point2D, x: float, y: float, tol: float = 1e-9):
    return math.isclose(p.x, x, abs_tol=tol) and math.isclose(p.y, y, abs_tol=tol)


def test_line_endpoints():
    line = LineEntity(vertices=(Point2D(1, 2), Point2D(3, 4)))
    assert get_start_point(line) == Point2D(1, 2)
    assert get_end_point(line) == Point2D(3, 4)
    assert not is_closed_entity(line)


def test_arc_endpoints_use_absolute_degrees():
    arc = ArcEntity(center=Point2D(0, 0), radius=10, start_angle=0, end_angle=90)
    assert approx_point(get_start_point(arc), 10, 0)
    assert approx_point(get_end_point(arc), 0, 10)


def test_circle_starts_at_top_and_is_closed():
    circle = CircleEntity(center=Point2D(5, 5), radius=2)
    assert get_start_point(circle) == Point2D(5, 7)
    assert get_end_point(circle) == get_start_point(circle)
    assert is_closed_entity(circle)


def test_ellipse_is_closed():
    ellipse = EllipseEntity(center=Point2D(0, 0), major_axis=Point2D(10, 0), ratio=0.5)
    assert is_closed_entity(ellipse)
    assert approx_point(get_start_point(ellipse), 0, 5)


def test_polyline_closed_by_flag_or_coincident_ends():
    verts = (PolylineVertex(0, 0), PolylineVertex(10, 0), PolylineVertex(10, 10))
    assert is_closed_entity(PolylineEntity(vertices=verts, closed=True))
    assert not is_closed_entity(PolylineEntity(vertices=verts))

    loop = verts + (PolylineVertex(0.001, 0),)
    assert is_closed_entity(PolylineEntity(vertices=loop))


def test_spline_endpoints_skip_origin_artifacts():
    spline = SplineEntity(control_points=(
        Point2D(0, 0), Point2D(1, 1), Point2D(2, 0), Point2D(3, 1), Point2D(0, 0),
    ))
    assert get_start_point(spline) == Point2D(1, 1)
    assert get_end_point(spline) == Point2D(3, 1)


def test_spline_without_control_points_returns_origin():
    assert get_start_point(SplineEntity()) == Point2D(0, 0)


def test_unknown_entity_is_handled_without_raising(caplog):
    text = UnsupportedEntity("TEXT")
    assert get_start_point(text) == Point2D(0, 0)
    assert get_end_point(text) == Point2D(0, 0)
    assert is_closed_entity(text) is False
    assert reverse_entity(text) is text
    assert entity_type_name(text) == "TEXT"
    assert "Unknown entity type TEXT" in caplog.text


def test_reverse_line_returns_new_value():
    line = LineEntity(vertices=(Point2D(0, 0), Point2D(1, 0)))
    reversed_line = reverse_entity(line)
    assert reversed_line is not line
    assert get_start_point(reversed_line) == Point2D(1, 0)
    assert line.vertices[0] == Point2D(0, 0)


def test_reverse_arc_keeps_geometry():
    arc = ArcEntity(center=Point2D(0, 0), radius=10, start_angle=0, end_angle=90)
    rev = reverse_entity(arc)
    assert rev.clockwise
    assert rev.sweep_angle == pytest.approx(arc.sweep_angle)
    assert approx_point(get_start_point(rev), 0, 10)
    assert approx_point(get_end_point(rev), 10, 0)
    assert reverse_entity(rev) == arc


def test_reverse_polyline_moves_bulges():
    poly = PolylineEntity(vertices=(
        PolylineVertex(0, 0, 0.5),
        PolylineVertex(10, 0, 0.0),
        PolylineVertex(10, 10, 0.0),
    ))
    rev = reverse_entity(poly)
    assert [(v.x, v.y) for v in rev.vertices] == [(10, 10), (10, 0), (0, 0)]
    # segment (10,0)->(0,0) is the old first segment, traversed backwards
    assert rev.vertices[1].bulge == -0.5
    assert rev.vertices[0].bulge == 0.0
    assert rev.entity_type == EntityType.LWPOLYLINE


def test_bounding_box_distance_and_containment():
    outer = BoundingBox(0, 0, 100, 100)
    inner = BoundingBox(40, 40, 60, 60)
    far = BoundingBox(103, 104, 110, 110)

    assert outer.contains(inner)
    assert not inner.contains(outer)
    assert outer.distance_to(inner) == 0.0
    assert outer.distance_to(far) == pytest.approx(5.0)
    assert BoundingBox.from_points([]) == BoundingBox.empty()
