"""
Core DXF Module - Geometria DXF dla nestingu
============================================

Potok: tekst DXF -> entities -> kontury -> kontur zewnętrzny + otwory
-> wielokąty (dyskretyzacja krzywych) -> walidacja.

Główne komponenty:
- reader.parse: Parsowanie tekstu DXF (ezdxf) do DXFDocument
- ContourBuilder: Łączenie entities w kontury
- separate_exterior_and_holes / detect_shape: Klasyfikacja otworów
- contour_to_polygon / validate_polygon: Wielokąt końcowy

Użycie:
    from core.dxf import parse, extract_entities, build_contours

    document = parse(dxf_text, "part.dxf")
    contours = build_contours(extract_entities(document), tolerance=0.1)
"""

from .entities import (
    EntityType,
    SUPPORTED_ENTITY_TYPES,
    PointTuple,
    Point2D,
    BoundingBox,
    LineEntity,
    CircleEntity,
    ArcEntity,
    PolylineVertex,
    PolylineEntity,
    EllipseEntity,
    SplineEntity,
    UnsupportedEntity,
    DXFEntity,
    Contour,
    ShapeWithHoles,
    entity_type_name,
    get_start_point,
    get_end_point,
    is_closed_entity,
    reverse_entity,
)

from .converters import (
    arc_to_points,
    circle_to_points,
    ellipse_to_points,
    bulge_arc_to_points,
    polyline_to_points,
    spline_to_points,
    entity_to_points,
    entities_bounding_box,
)

from .contour_builder import (
    ContourBuilder,
    ContourValidationResult,
    build_contours,
    validate_contours,
)

from .shape_classifier import (
    PolygonShape,
    bounding_box_distance,
    separate_exterior_and_holes,
    group_contours_by_proximity,
    detect_shape,
)

from .polygon import (
    PolygonValidationResult,
    calculate_signed_area,
    ensure_counter_clockwise,
    close_contour,
    remove_duplicate_points,
    subdivide_long_edges,
    contour_to_polygon,
    validate_polygon,
)

from .reader import (
    DXFDocument,
    DXFHeader,
    DXFValidationResult,
    parse,
    extract_entities,
    filter_entities_by_type,
    filter_entities_by_layer,
    get_layers,
    get_header,
    get_entity_by_handle,
    get_entity_stats,
    get_entities_bounding_box,
    validate_dxf,
)


__all__ = [
    # Entities
    'EntityType',
    'SUPPORTED_ENTITY_TYPES',
    'PointTuple',
    'Point2D',
    'BoundingBox',
    'LineEntity',
    'CircleEntity',
    'ArcEntity',
    'PolylineVertex',
    'PolylineEntity',
    'EllipseEntity',
    'SplineEntity',
    'UnsupportedEntity',
    'DXFEntity',
    'Contour',
    'ShapeWithHoles',
    'entity_type_name',
    'get_start_point',
    'get_end_point',
    'is_closed_entity',
    'reverse_entity',
    # Converters
    'arc_to_points',
    'circle_to_points',
    'ellipse_to_points',
    'bulge_arc_to_points',
    'polyline_to_points',
    'spline_to_points',
    'entity_to_points',
    'entities_bounding_box',
    # Contours
    'ContourBuilder',
    'ContourValidationResult',
    'build_contours',
    'validate_contours',
    # Shapes
    'PolygonShape',
    'bounding_box_distance',
    'separate_exterior_and_holes',
    'group_contours_by_proximity',
    'detect_shape',
    # Polygon
    'PolygonValidationResult',
    'calculate_signed_area',
    'ensure_counter_clockwise',
    'close_contour',
    'remove_duplicate_points',
    'subdivide_long_edges',
    'contour_to_polygon',
    'validate_polygon',
    # Reader
    'DXFDocument',
    'DXFHeader',
    'DXFValidationResult',
    'parse',
    'extract_entities',
    'filter_entities_by_type',
    'filter_entities_by_layer',
    'get_layers',
    'get_header',
    'get_entity_by_handle',
    'get_entity_stats',
    'get_entities_bounding_box',
    'validate_dxf',
]
