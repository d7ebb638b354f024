"""
Testy parsowania DXF (ezdxf).
"""

import pytest

from core.exceptions import ParsingError, ParseError
from core.dxf.entities import EntityType, Point2D
from core.dxf.reader import (
    parse, extract_entities, filter_entities_by_type, filter_entities_by_layer,
    get_layers, get_header, get_entity_by_handle, get_entity_stats,
    get_entities_bounding_box, validate_dxf,
)


def mixed_drawing(msp):
    msp.add_line((0, 0), (10, 0), dxfattribs={"layer": "CUT"})
    msp.add_arc((0, 0), radius=5, start_angle=0, end_angle=90)
    msp.add_circle((20, 20), radius=3, dxfattribs={"layer": "HOLES"})
    msp.add_lwpolyline([(0, 0, 0.5), (10, 0, 0), (10, 10, 0)], format="xyb")
    msp.add_ellipse((50, 50), major_axis=(10, 0), ratio=0.5)
    msp.add_spline([(0, 0), (10, 10), (20, 0), (30, 10)])
    msp.add_text("LABEL")


@pytest.fixture
def mixed_dxf(make_dxf):
    return make_dxf(mixed_drawing)


def test_parse_converts_supported_entities(mixed_dxf):
    document = parse(mixed_dxf, "mixed.dxf")

    types = [e.entity_type for e in extract_entities(document)]
    assert types == [
        EntityType.LINE, EntityType.ARC, EntityType.CIRCLE,
        EntityType.LWPOLYLINE, EntityType.ELLIPSE, EntityType.SPLINE,
    ]
    assert len(document.entities) == 7
    assert document.filename == "mixed.dxf"


def test_parsed_geometry(mixed_dxf):
    document = parse(mixed_dxf)
    line, arc, circle, poly, ellipse, spline = extract_entities(document)

    assert line.vertices == (Point2D(0, 0, 0), Point2D(10, 0, 0))
    assert (arc.start_angle, arc.end_angle, arc.radius) == (0, 90, 5)
    assert circle.center.x == 20 and circle.radius == 3
    assert [v.bulge for v in poly.vertices] == [0.5, 0, 0]
    assert not poly.closed
    assert ellipse.ratio == pytest.approx(0.5)
    assert len(spline.fit_points) == 4 or len(spline.control_points) > 0


def test_parse_error_is_raised_for_garbage():
    with pytest.raises(ParsingError) as exc_info:
        parse("this is not\na dxf file\n", "broken.dxf")

    assert exc_info.value.stage == "parsing"
    assert "broken.dxf" in exc_info.value.message
    assert ParseError is ParsingError


def test_parse_error_for_empty_content():
    with pytest.raises(ParsingError):
        parse("   ")


def test_filters_and_lookups(mixed_dxf):
    document = parse(mixed_dxf)
    entities = extract_entities(document)

    assert len(filter_entities_by_type(entities, ["line", "CIRCLE"])) == 2
    assert [e.entity_type for e in filter_entities_by_layer(entities, ["HOLES"])] == [EntityType.CIRCLE]

    layers = get_layers(document)
    assert "CUT" in layers and "HOLES" in layers and "0" in layers
    assert len(layers) == len(set(layers))

    handle = entities[0].handle
    assert get_entity_by_handle(document, handle) is entities[0]
    assert get_entity_by_handle(document, "NOPE") is None


def test_header_and_stats(mixed_dxf):
    document = parse(mixed_dxf)

    header = get_header(document)
    assert header["$ACADVER"].startswith("AC")

    stats = get_entity_stats(document)
    assert stats["LINE"] == 1
    assert stats["TEXT"] == 1

    box = get_entities_bounding_box(document)
    assert box.max_x >= 60
    assert box.max_y >= 50


def test_validate_dxf_reports_unsupported(mixed_dxf):
    result = validate_dxf(parse(mixed_dxf))
    assert result.valid
    assert result.warnings == ["Unsupported entity type TEXT ignored (1 found)"]


def test_validate_dxf_empty_document(make_dxf):
    result = validate_dxf(parse(make_dxf()))
    assert not result.valid
    assert result.errors == ["DXF file contains no entities"]
