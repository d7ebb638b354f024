"""
Testy budowania konturów.
"""

import pytest

from core.dxf.entities import (
    Point2D, LineEntity, CircleEntity, ArcEntity, PolylineVertex, PolylineEntity,
    Contour, get_start_point, get_end_point,
)
from core.dxf.contour_builder import (
    ContourBuilder, EndpointIndex, build_contours, validate_contours,
    WARNING_AUTO_CLOSED, WARNING_OPEN,
)


def line(x1, y1, x2, y2):
    return LineEntity(vertices=(Point2D(x1, y1), Point2D(x2, y2)))


def assert_chained(contour: Contour, tolerance: float = 0.1):
    for a, b in zip(contour.entities, contour.entities[1:]):
        assert get_end_point(a).distance_to(get_start_point(b)) < tolerance


def test_triangle_chains_into_one_closed_contour():
    contours = build_contours([line(0, 0, 10, 0), line(10, 0, 5, 8), line(5, 8, 0, 0)])

    assert len(contours) == 1
    contour = contours[0]
    assert contour.closed
    assert not contour.single
    assert len(contour.entities) == 3
    assert contour.warning is None
    assert_chained(contour)


def test_entity_matched_on_its_end_is_reversed():
    # drugi odcinek narysowany "pod prąd"
    entities = [line(0, 0, 10, 0), line(10, 10, 10, 0), line(10, 10, 0, 0)]
    contours = build_contours(entities)

    assert len(contours) == 1
    assert contours[0].closed
    assert_chained(contours[0])
    assert get_start_point(contours[0].entities[1]) == Point2D(10, 0)
    # wejście bez zmian
    assert entities[1].vertices[0] == Point2D(10, 10)


def test_closed_entities_become_single_contours():
    circle = CircleEntity(center=Point2D(0, 0), radius=5)
    square = PolylineEntity(
        vertices=(PolylineVertex(20, 0), PolylineVertex(30, 0), PolylineVertex(30, 10)),
        closed=True,
    )
    contours = build_contours([circle, square])

    assert len(contours) == 2
    assert all(c.single and c.closed for c in contours)
    assert contours[0].bounding_box.width == pytest.approx(10)


def test_small_gap_is_auto_closed():
    entities = [line(0, 0, 10, 0), line(10, 0, 10, 10), line(10, 10, 0, 0.5)]
    contour = build_contours(entities, tolerance=0.1)[0]

    assert contour.closed
    assert contour.warning == WARNING_AUTO_CLOSED


def test_gap_without_auto_close_stays_open():
    entities = [line(0, 0, 10, 0), line(10, 0, 10, 10), line(10, 10, 0, 0.5)]
    contour = build_contours(entities, tolerance=0.1, auto_close=False)[0]

    assert not contour.closed
    assert contour.warning == WARNING_OPEN


def test_large_gap_stays_open():
    entities = [line(0, 0, 10, 0), line(10, 0, 10, 10)]
    contour = build_contours(entities, tolerance=0.1)[0]

    assert not contour.closed
    assert contour.warning == WARNING_OPEN


def test_short_chains_are_discarded():
    contours = build_contours([line(0, 0, 1, 0)], min_contour_length=2)
    assert contours == []


def test_first_tie_break_takes_lowest_index():
    # dwa kandydaty w tym samym punkcie (10, 0)
    entities = [line(0, 0, 10, 0), line(10, 0, 10, 5), line(10, 0, 20, 0)]
    contours = ContourBuilder(tie_break="first").build_contours(entities)

    assert contours[0].entities[1] == entities[1]


def test_nearest_tie_break_takes_closest_endpoint():
    entities = [line(0, 0, 10, 0), line(10.05, 0, 10, 5), line(10.01, 0, 20, 0)]
    contours = ContourBuilder(tie_break="nearest").build_contours(entities)

    assert contours[0].entities[1] == entities[2]


def test_arc_chain_closes():
    # półokrąg + średnica
    arc = ArcEntity(center=Point2D(0, 0), radius=10, start_angle=0, end_angle=180)
    contours = build_contours([line(-10, 0, 10, 0), arc])

    assert len(contours) == 1
    assert contours[0].closed
    assert contours[0].bounding_box.max_y == pytest.approx(10)


def test_invalid_options_rejected():
    with pytest.raises(ValueError):
        ContourBuilder(tolerance=0)
    with pytest.raises(ValueError):
        ContourBuilder(tie_break="random")


def test_endpoint_index_finds_neighbours_across_cells():
    index = EndpointIndex(0.1)
    index.add(0, 0, (0.99, 0.0))
    index.add(1, 1, (1.5, 0.0))

    found = index.query((1.02, 0.0), 0.1)
    assert [(i, which) for i, which, _ in found] == [(0, 0)]


def test_validate_contours():
    assert not validate_contours([]).valid

    open_pair = build_contours([line(0, 0, 10, 0), line(10, 0, 10, 10)])
    result = validate_contours(open_pair)
    assert result.valid
    assert any("not closed" in w for w in result.warnings)
    assert any("only 2 entities" in w for w in result.warnings)

    assert not validate_contours([Contour()]).valid


def test_endpoint_index_radius_limited_to_cell_size():
    index = EndpointIndex(0.1)
    index.add(0, 0, (1.0, 0.0))

    assert [i for i, _, _ in index.query((1.04, 0.0), 0.05)] == [0]
    assert index.query((1.06, 0.0), 0.05) == []
    with pytest.raises(ValueError):
        index.query((1.0, 0.0), 0.2)
