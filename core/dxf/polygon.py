"""
Polygon Assembler - Kontur -> zamknięty wielokąt
================================================
Składanie punktów entities konturu w jeden pierścień, zamykanie,
podział długich krawędzi, orientacja CCW i walidacja wielokąta.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .entities import Contour, PointTuple
from .converters import entity_to_points, filter_duplicate_points

logger = logging.getLogger(__name__)

# Tolerancja ciągłości i zamknięcia pierścienia (mm)
POINT_TOLERANCE = 0.01

# Próg "zbyt małego" bounding boxa (mm)
MIN_DIMENSION = 0.1

DEFAULT_MAX_EDGE_LENGTH = 20.0


@dataclass
class PolygonValidationResult:
    """Wynik walidacji wielokąta"""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


# ============================================================
# Geometria pierścienia
# ============================================================

def calculate_signed_area(points: Sequence[PointTuple]) -> float:
    """
    Pole ze znakiem (wzór Shoelace).

    Dodatnie = przeciwnie do ruchu wskazówek zegara (CCW).
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        x1, y1 = points[i][0], points[i][1]
        x2, y2 = points[(i + 1) % n][0], points[(i + 1) % n][1]
        area += x1 * y2 - x2 * y1
    return area / 2.0


def ensure_counter_clockwise(points: Sequence[PointTuple]) -> List[PointTuple]:
    """Odwróć kolejność punktów, jeśli pierścień jest zgodny z zegarem"""
    if calculate_signed_area(points) < 0:
        return list(reversed(points))
    return list(points)


def is_closed_contour(points: Sequence[PointTuple], tolerance: float = POINT_TOLERANCE) -> bool:
    """Czy pierwszy i ostatni punkt pokrywają się w tolerancji"""
    if len(points) < 2:
        return False
    return math.dist(points[0], points[-1]) < tolerance


def close_contour(points: Sequence[PointTuple], tolerance: float = POINT_TOLERANCE) -> List[PointTuple]:
    """Dopisz pierwszy punkt na końcu, jeśli pierścień nie jest zamknięty"""
    result = list(points)
    if result and not is_closed_contour(result, tolerance):
        result.append(result[0])
    return result


def remove_duplicate_points(points: Sequence[PointTuple], tolerance: float = POINT_TOLERANCE) -> List[PointTuple]:
    """Usuń kolejne punkty bliższe niż tolerancja"""
    return filter_duplicate_points(points, tolerance)


def calculate_bounding_box(points: Sequence[PointTuple]) -> Tuple[float, float, float, float]:
    """Zwraca (min_x, min_y, max_x, max_y); zera dla pustej listy"""
    if not points:
        return (0.0, 0.0, 0.0, 0.0)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def subdivide_long_edges(points: Sequence[PointTuple], max_edge_length: float = DEFAULT_MAX_EDGE_LENGTH) -> List[PointTuple]:
    """
    Podziel krawędzie dłuższe niż max_edge_length na równe odcinki.

    Dla pierścienia zamkniętego krawędź ostatni -> pierwszy ma długość zero,
    więc zamknięcie jest zachowane.
    """
    if len(points) < 2 or max_edge_length <= 0:
        return list(points)

    result: List[PointTuple] = []
    n = len(points)
    for i in range(n - 1):
        p1 = points[i]
        p2 = points[i + 1]
        result.append(p1)

        length = math.dist(p1, p2)
        if length > max_edge_length:
            pieces = math.ceil(length / max_edge_length)
            for k in range(1, pieces):
                t = k / pieces
                result.append((
                    p1[0] + (p2[0] - p1[0]) * t,
                    p1[1] + (p2[1] - p1[1]) * t,
                ))

    result.append(points[-1])
    return result


# ============================================================
# Kontur -> wielokąt
# ============================================================

def contour_to_polygon(
    contour: Contour,
    arc_segments: int = 32,
    spline_segments: int = 100,
    max_edge_length: float = DEFAULT_MAX_EDGE_LENGTH
) -> List[PointTuple]:
    """
    Złóż wielokąt z konturu.

    1. Punkty kolejnych entities; pierwszy punkt segmentu pomijany, gdy
       pokrywa się z ostatnim punktem poprzedniego (0.01 mm)
    2. Zamknięcie pierścienia, jeśli przerwa > 0.01 mm
    3. Podział krawędzi dłuższych niż max_edge_length

    Returns:
        Zamknięty pierścień (pierwszy punkt == ostatni); pusty dla konturu
        bez punktów
    """
    points: List[PointTuple] = []

    for entity in contour.entities:
        segment = entity_to_points(entity, arc_segments, spline_segments)
        if not segment:
            continue

        if points and math.dist(points[-1], segment[0]) < POINT_TOLERANCE:
            segment = segment[1:]
        points.extend(segment)

    if not points:
        logger.warning("Contour produced no points")
        return []

    points = close_contour(points)
    return subdivide_long_edges(points, max_edge_length)


# ============================================================
# Walidacja
# ============================================================

def validate_polygon(points: Sequence[PointTuple]) -> PolygonValidationResult:
    """
    Sprawdź poprawność wielokąta.

    Błędy: mniej niż 3 punkty, mniej niż 3 różne punkty.
    Ostrzeżenia: duplikaty kolejnych punktów, wiele punktów przy (0, 0),
    bounding box węższy niż 0.1 mm.
    """
    errors = []
    warnings = []

    if len(points) < 3:
        errors.append(f"Polygon has only {len(points)} points (minimum 3)")
        return PolygonValidationResult(valid=False, errors=errors, warnings=warnings)

    distinct = remove_duplicate_points(points)
    if len(distinct) > 1 and math.dist(distinct[0], distinct[-1]) < POINT_TOLERANCE:
        distinct = distinct[:-1]
    if len(distinct) < 3:
        errors.append(f"Polygon has only {len(distinct)} distinct points (minimum 3)")

    duplicates = sum(
        1 for i in range(1, len(points))
        if math.dist(points[i - 1], points[i]) < POINT_TOLERANCE
    )
    if duplicates:
        warnings.append(f"Found {duplicates} duplicate consecutive point(s)")

    near_origin = sum(1 for p in points if math.hypot(p[0], p[1]) < POINT_TOLERANCE)
    if near_origin > 1:
        warnings.append(
            f"Found {near_origin} points near origin (0, 0) - possible export artifact"
        )

    min_x, min_y, max_x, max_y = calculate_bounding_box(points)
    width, height = max_x - min_x, max_y - min_y
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        warnings.append(
            f"Polygon bounding box is very small ({width:.4f} x {height:.4f} mm)"
        )

    return PolygonValidationResult(valid=not errors, errors=errors, warnings=warnings)


# Eksporty
__all__ = [
    'PolygonValidationResult',
    'calculate_signed_area',
    'ensure_counter_clockwise',
    'is_closed_contour',
    'close_contour',
    'remove_duplicate_points',
    'calculate_bounding_box',
    'subdivide_long_edges',
    'contour_to_polygon',
    'validate_polygon',
]
