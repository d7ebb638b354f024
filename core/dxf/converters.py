"""
DXF Entity Converters - Dyskretyzacja entities na punkty
========================================================
Obsługuje: LINE, ARC, CIRCLE, LWPOLYLINE, POLYLINE, SPLINE, ELLIPSE

Każdy konwerter to czysta funkcja (entity, segments) -> List[PointTuple].
Żadna entity nie jest modyfikowana.
"""

import math
import logging
from typing import List, Sequence

from ezdxf.math import bulge_to_arc

from .entities import (
    DXFEntity, EntityType, Point2D, PointTuple, BoundingBox,
    ArcEntity, CircleEntity, EllipseEntity, PolylineEntity, SplineEntity,
    entity_type_name,
)

logger = logging.getLogger(__name__)

# Punkty bliżej początku układu niż ta wartość to artefakty eksportera
ORIGIN_ARTIFACT_TOLERANCE = 0.01

# Kolejne punkty kontrolne bliżej niż ta wartość to duplikaty
CONTROL_POINT_DUPLICATE_TOLERANCE = 0.0001

# Deduplikacja punktów wyjściowych splajnu
OUTPUT_DUPLICATE_TOLERANCE = 0.01

BULGE_EPSILON = 1e-10


def filter_duplicate_points(points: Sequence[PointTuple], tolerance: float = 0.0001) -> List[PointTuple]:
    """Usuń kolejne punkty bliższe niż tolerancja"""
    if not points:
        return []

    filtered = [points[0]]
    for current in points[1:]:
        prev = filtered[-1]
        if math.dist(current, prev) >= tolerance:
            filtered.append(current)
    return filtered


def arc_to_points(arc: ArcEntity, segments: int = 16) -> List[PointTuple]:
    """
    Konwertuj łuk na listę punktów.

    Args:
        arc: ArcEntity (kąty w stopniach)
        segments: Liczba równych kroków kątowych

    Returns:
        segments + 1 punktów, od start_angle do end_angle włącznie
    """
    start = math.radians(arc.start_angle)
    total = math.radians(arc.sweep_angle)
    step = total / segments
    if arc.clockwise:
        step = -step

    points = []
    for i in range(segments + 1):
        angle = start + step * i
        points.append((
            arc.center.x + arc.radius * math.cos(angle),
            arc.center.y + arc.radius * math.sin(angle),
        ))
    return points


def circle_to_points(circle: CircleEntity, segments: int = 32) -> List[PointTuple]:
    """
    Konwertuj okrąg na listę punktów.

    Returns:
        segments punktów + pierwszy punkt powtórzony na końcu (zamknięcie)
    """
    step = 2 * math.pi / segments
    points = []
    for i in range(segments):
        angle = step * i
        points.append((
            circle.center.x + circle.radius * math.cos(angle),
            circle.center.y + circle.radius * math.sin(angle),
        ))

    # Zamknij okrąg
    points.append(points[0])
    return points


def ellipse_to_points(ellipse: EllipseEntity, segments: int = 32) -> List[PointTuple]:
    """
    Konwertuj elipsę na zamkniętą listę punktów.

    Elipsa traktowana jest jako zamknięta - próbkowany jest pełny obwód
    niezależnie od start_param / end_param.
    """
    major = ellipse.major_axis
    minor = ellipse.minor_axis
    step = 2 * math.pi / segments

    points = []
    for i in range(segments):
        t = step * i
        cos_t, sin_t = math.cos(t), math.sin(t)
        points.append((
            ellipse.center.x + major.x * cos_t + minor.x * sin_t,
            ellipse.center.y + major.y * cos_t + minor.y * sin_t,
        ))

    points.append(points[0])
    return points


def bulge_arc_to_points(
    p1: PointTuple,
    p2: PointTuple,
    bulge: float,
    segments: int = 8
) -> List[PointTuple]:
    """
    Konwertuj łuk zdefiniowany przez bulge (z LWPOLYLINE) na punkty.

    Args:
        p1: Punkt początkowy
        p2: Punkt końcowy
        bulge: Wartość bulge (tan(kąt/4)); dodatni = przeciwnie do wskazówek zegara
        segments: Liczba segmentów łuku

    Returns:
        Punkty od p1 do p2 włącznie
    """
    if abs(bulge) < BULGE_EPSILON or math.dist(p1, p2) == 0:
        return [p1, p2]

    center, _start_angle, _end_angle, radius = bulge_to_arc(p1, p2, bulge)

    # Kąt środkowy = 4 * atan(bulge); ujemny bulge = ruch zgodnie z zegarem od p1
    sweep = 4 * math.atan(bulge)
    first = math.atan2(p1[1] - center[1], p1[0] - center[0])
    step = sweep / segments

    points = [p1]
    for i in range(1, segments):
        angle = first + step * i
        points.append((
            center[0] + radius * math.cos(angle),
            center[1] + radius * math.sin(angle),
        ))
    points.append(p2)
    return points


def polyline_to_points(polyline: PolylineEntity, arc_segments: int = 16) -> List[PointTuple]:
    """
    Konwertuj polilinię na punkty (z obsługą bulge).

    Segment zamykający (ostatni -> pierwszy) dodawany jest tylko wtedy,
    gdy ma bulge - proste domknięcie wykonuje asembler wielokąta.
    """
    vertices = polyline.vertices
    if not vertices:
        return []

    closed = polyline.closed or polyline.shape
    n = len(vertices)
    points: List[PointTuple] = [(vertices[0].x, vertices[0].y)]

    segment_count = n if closed else n - 1
    for i in range(segment_count):
        current = vertices[i]
        nxt = vertices[(i + 1) % n]
        p1 = (current.x, current.y)
        p2 = (nxt.x, nxt.y)

        if abs(current.bulge) > BULGE_EPSILON:
            arc_points = bulge_arc_to_points(p1, p2, current.bulge, arc_segments)
            points.extend(arc_points[1:])
        elif i < n - 1:
            points.append(p2)

    return points


def _strip_origin_artifacts(points: Sequence[Point2D], label: str) -> List[Point2D]:
    kept = []
    for index, p in enumerate(points):
        if p.distance_from_origin < ORIGIN_ARTIFACT_TOLERANCE:
            logger.debug(
                f"SPLINE: Removing {label} {index} at [{p.x:.6f}, {p.y:.6f}] - too close to origin (artifact)"
            )
            continue
        kept.append(p)
    return kept


def catmull_rom_point(p0: Point2D, p1: Point2D, p2: Point2D, p3: Point2D, t: float) -> PointTuple:
    """Punkt krzywej Catmull-Rom między p1 i p2 dla parametru t w [0, 1]"""
    t2 = t * t
    t3 = t2 * t

    x = 0.5 * (
        2 * p1.x +
        (-p0.x + p2.x) * t +
        (2 * p0.x - 5 * p1.x + 4 * p2.x - p3.x) * t2 +
        (-p0.x + 3 * p1.x - 3 * p2.x + p3.x) * t3
    )
    y = 0.5 * (
        2 * p1.y +
        (-p0.y + p2.y) * t +
        (2 * p0.y - 5 * p1.y + 4 * p2.y - p3.y) * t2 +
        (-p0.y + 3 * p1.y - 3 * p2.y + p3.y) * t3
    )
    return (x, y)


def spline_to_points(spline: SplineEntity, segments: int = 32) -> List[PointTuple]:
    """
    Konwertuj SPLINE na punkty.

    Kolejność:
    1. Punkty dopasowania (fit points), jeśli są - bez artefaktów przy (0, 0)
    2. Stopień <= 1 lub <= 2 punkty kontrolne - łamana przez punkty kontrolne
    3. Wyższy stopień - interpolacja Catmull-Rom przez punkty kontrolne
       (przybliżenie NURBS, wystarczające dla tolerancji cięcia)
    """
    if spline.fit_points:
        fit_points = _strip_origin_artifacts(spline.fit_points, "fit point")
        if fit_points:
            logger.debug(f"SPLINE: Using {len(fit_points)} fit points")
            return filter_duplicate_points(
                [p.as_tuple() for p in fit_points], OUTPUT_DUPLICATE_TOLERANCE
            )

    if not spline.control_points:
        logger.warning("SPLINE has no control points")
        return []

    control_points = _strip_origin_artifacts(spline.control_points, "control point")

    unique: List[Point2D] = []
    for p in control_points:
        if unique and p.distance_to(unique[-1]) < CONTROL_POINT_DUPLICATE_TOLERANCE:
            continue
        unique.append(p)

    if len(unique) != len(spline.control_points):
        logger.debug(
            f"SPLINE: Filtered control points {len(spline.control_points)} -> {len(unique)}"
        )

    if not unique:
        logger.warning("SPLINE has no valid control points after filtering")
        return []

    degree = spline.degree or 3

    if degree <= 1 or len(unique) <= 2:
        return filter_duplicate_points(
            [p.as_tuple() for p in unique], CONTROL_POINT_DUPLICATE_TOLERANCE
        )

    n = len(unique)
    per_section = math.ceil(segments / (n - 1))
    points: List[PointTuple] = []

    for i in range(n - 1):
        p0 = unique[max(0, i - 1)]
        p1 = unique[i]
        p2 = unique[i + 1]
        p3 = unique[min(n - 1, i + 2)]

        for j in range(per_section):
            points.append(catmull_rom_point(p0, p1, p2, p3, j / per_section))

    points.append(unique[-1].as_tuple())

    return filter_duplicate_points(points, OUTPUT_DUPLICATE_TOLERANCE)


def entity_to_points(
    entity: DXFEntity,
    arc_segments: int = 16,
    spline_segments: int = 100
) -> List[PointTuple]:
    """
    Uniwersalny konwerter entity -> punkty.

    Args:
        entity: Entity (dowolny obsługiwany typ)
        arc_segments: Segmenty łuków / okręgów / elips / bulge
        spline_segments: Segmenty splajnów

    Returns:
        Lista punktów; pusta dla nieobsługiwanych typów
    """
    etype = entity.entity_type

    if etype == EntityType.LINE:
        return [entity.vertices[0].as_tuple(), entity.vertices[1].as_tuple()]

    if etype == EntityType.ARC:
        return arc_to_points(entity, arc_segments)

    if etype == EntityType.CIRCLE:
        return circle_to_points(entity, arc_segments)

    if etype in (EntityType.LWPOLYLINE, EntityType.POLYLINE):
        return polyline_to_points(entity, arc_segments)

    if etype == EntityType.ELLIPSE:
        return ellipse_to_points(entity, arc_segments)

    if etype == EntityType.SPLINE:
        return spline_to_points(entity, spline_segments)

    logger.warning(f"entity_to_points: Unknown entity type {entity_type_name(entity)}")
    return []


# ============================================================
# Zasięg entity (bounding box)
# ============================================================

def _arc_extent_points(arc: ArcEntity) -> List[PointTuple]:
    """Początek, koniec i skrajne punkty osi leżące na łuku"""
    points = arc_to_points(arc, 1)
    ccw_start = arc.end_angle if arc.clockwise else arc.start_angle
    sweep = arc.sweep_angle

    for axis_angle in (0.0, 90.0, 180.0, 270.0):
        if (axis_angle - ccw_start) % 360.0 <= sweep:
            rad = math.radians(axis_angle)
            points.append((
                arc.center.x + arc.radius * math.cos(rad),
                arc.center.y + arc.radius * math.sin(rad),
            ))
    return points


def entity_extent_points(entity: DXFEntity) -> List[PointTuple]:
    """
    Punkty wyznaczające bounding box entity.

    Okrąg, łuk i elipsa - dokładne skrajne punkty; polilinia - wierzchołki
    oraz punkty łuków bulge; splajn - punkty kontrolne (otoczka wypukła).
    """
    etype = entity.entity_type

    if etype == EntityType.LINE:
        return [v.as_tuple() for v in entity.vertices]

    if etype == EntityType.CIRCLE:
        c, r = entity.center, entity.radius
        return [(c.x - r, c.y), (c.x + r, c.y), (c.x, c.y - r), (c.x, c.y + r)]

    if etype == EntityType.ARC:
        return _arc_extent_points(entity)

    if etype in (EntityType.LWPOLYLINE, EntityType.POLYLINE):
        return polyline_to_points(entity, 16)

    if etype == EntityType.ELLIPSE:
        major, minor = entity.major_axis, entity.minor_axis
        half_w = math.hypot(major.x, minor.x)
        half_h = math.hypot(major.y, minor.y)
        c = entity.center
        return [(c.x - half_w, c.y - half_h), (c.x + half_w, c.y + half_h)]

    if etype == EntityType.SPLINE:
        return [p.as_tuple() for p in entity.control_points or entity.fit_points]

    logger.warning(f"entity_extent_points: Unknown entity type {entity_type_name(entity)}")
    return []


def entities_bounding_box(entities: Sequence[DXFEntity]) -> BoundingBox:
    """Bounding box wszystkich entities (pusty box dla pustej listy)"""
    points: List[PointTuple] = []
    for entity in entities:
        points.extend(entity_extent_points(entity))
    return BoundingBox.from_points(points)


# Eksporty
__all__ = [
    'filter_duplicate_points',
    'arc_to_points',
    'circle_to_points',
    'ellipse_to_points',
    'bulge_arc_to_points',
    'polyline_to_points',
    'catmull_rom_point',
    'spline_to_points',
    'entity_to_points',
    'entity_extent_points',
    'entities_bounding_box',
]
