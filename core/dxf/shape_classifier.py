"""
Shape Classifier - Kontur zewnętrzny, otwory, grupowanie detali
===============================================================
Dwa sposoby wykrywania otworów:
- na poziomie konturów: zawieranie bounding boxów
- na poziomie wielokątów: znak pola (Shoelace) - CCW zewnętrzny, CW otwór

Ograniczenie: kontury spoza bounding boxa konturu zewnętrznego są pomijane,
a przy wielu pierścieniach CCW zachowywany jest tylko największy.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .entities import BoundingBox, Contour, ShapeWithHoles, PointTuple
from .polygon import calculate_signed_area

logger = logging.getLogger(__name__)

DEFAULT_GROUP_DISTANCE = 100.0


def bounding_box_distance(a: BoundingBox, b: BoundingBox) -> float:
    """Odległość między bounding boxami: 0 przy nakładaniu, inaczej między najbliższymi krawędziami"""
    return a.distance_to(b)


def separate_exterior_and_holes(contours: List[Contour]) -> Optional[ShapeWithHoles]:
    """
    Rozdziel kontury na zewnętrzny i otwory.

    Największy bounding box to kontur zewnętrzny; kontury, których
    bounding box mieści się w nim w całości, to otwory. Pozostałe kontury
    są pomijane (z ostrzeżeniem w logu).

    Returns:
        ShapeWithHoles lub None dla pustej listy
    """
    if not contours:
        return None

    if len(contours) == 1:
        return ShapeWithHoles(exterior=contours[0], holes=[])

    ordered = sorted(contours, key=lambda c: c.bounding_box.area, reverse=True)
    exterior = ordered[0]
    holes = []
    dropped = 0

    for contour in ordered[1:]:
        if exterior.bounding_box.contains(contour.bounding_box):
            holes.append(contour)
        else:
            dropped += 1

    if dropped:
        logger.warning(
            f"Dropped {dropped} contour(s) outside the exterior bounding box"
        )

    return ShapeWithHoles(exterior=exterior, holes=holes)


def group_contours_by_proximity(
    contours: List[Contour],
    max_distance: float = DEFAULT_GROUP_DISTANCE
) -> List[List[Contour]]:
    """
    Zachłanne grupowanie konturów w detale.

    Każdy niezgrupowany kontur zakłada grupę; dołączają do niej wszystkie
    niezgrupowane kontury, których bounding box jest bliżej niż max_distance
    od bounding boxa konturu zakładającego.
    """
    groups = []
    grouped = [False] * len(contours)

    for i, seed in enumerate(contours):
        if grouped[i]:
            continue

        grouped[i] = True
        group = [seed]

        for j in range(i + 1, len(contours)):
            if grouped[j]:
                continue
            if bounding_box_distance(seed.bounding_box, contours[j].bounding_box) < max_distance:
                grouped[j] = True
                group.append(contours[j])

        groups.append(group)

    logger.debug(f"Grouped {len(contours)} contour(s) into {len(groups)} part(s)")
    return groups


@dataclass
class PolygonShape:
    """Wielokąt zewnętrzny z otworami (wszystkie pierścienie CCW)"""
    exterior: List[PointTuple]
    holes: List[List[PointTuple]] = field(default_factory=list)


def detect_shape(polygons: List[List[PointTuple]]) -> Optional[PolygonShape]:
    """
    Klasyfikuj pierścienie po znaku pola.

    Dodatnie pole - kandydat na zewnętrzny (wygrywa największe |pole|,
    pozostałe są odrzucane); ujemne - otwór, odwracany do CCW.

    Returns:
        PolygonShape lub None, gdy brak pierścienia CCW
    """
    exteriors = []
    holes = []

    for ring in polygons:
        area = calculate_signed_area(ring)
        if area > 0:
            exteriors.append((abs(area), ring))
        elif area < 0:
            holes.append(list(reversed(ring)))

    if not exteriors:
        return None

    exteriors.sort(key=lambda item: item[0], reverse=True)
    if len(exteriors) > 1:
        logger.warning(
            f"Found {len(exteriors)} counter-clockwise rings, keeping the largest"
        )

    return PolygonShape(exterior=list(exteriors[0][1]), holes=holes)


# Eksporty
__all__ = [
    'bounding_box_distance',
    'separate_exterior_and_holes',
    'group_contours_by_proximity',
    'PolygonShape',
    'detect_shape',
]
