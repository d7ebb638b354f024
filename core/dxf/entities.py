"""
DXF Entities - Dataclasses dla reprezentacji geometrii DXF
==========================================================
Niezmienne struktury danych używane przez reader, ContourBuilder
i dyskretyzator krzywych.

Entity to zamknięta suma typów (LINE, ARC, CIRCLE, LWPOLYLINE/POLYLINE,
ELLIPSE, SPLINE). Wszystko inne trafia do UnsupportedEntity.
"""

import math
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Tuple, Optional, Union
from enum import Enum

logger = logging.getLogger(__name__)

PointTuple = Tuple[float, float]


class EntityType(Enum):
    """Obsługiwane typy entities DXF"""
    LINE = "LINE"
    ARC = "ARC"
    CIRCLE = "CIRCLE"
    LWPOLYLINE = "LWPOLYLINE"
    POLYLINE = "POLYLINE"
    SPLINE = "SPLINE"
    ELLIPSE = "ELLIPSE"


SUPPORTED_ENTITY_TYPES: Tuple[str, ...] = tuple(t.value for t in EntityType)

# Punkty kontrolne bliżej początku układu niż ta wartość to artefakty eksportera
SPLINE_ORIGIN_TOLERANCE = 0.0001


@dataclass(frozen=True)
class Point2D:
    """Punkt 2D (z opcjonalnym z, nieużywanym dalej)"""
    x: float
    y: float
    z: float = 0.0

    def distance_to(self, other: 'Point2D') -> float:
        """Odległość euklidesowa w płaszczyźnie XY"""
        return math.hypot(other.x - self.x, other.y - self.y)

    @property
    def distance_from_origin(self) -> float:
        return math.hypot(self.x, self.y)

    def as_tuple(self) -> PointTuple:
        return (self.x, self.y)


ORIGIN = Point2D(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class BoundingBox:
    """Bounding box (min_x, min_y, max_x, max_y)"""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def empty(cls) -> 'BoundingBox':
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_points(cls, points: Iterable[PointTuple]) -> 'BoundingBox':
        """Bounding box listy punktów (x, y); pusta lista -> empty()"""
        pts = list(points)
        if not pts:
            return cls.empty()
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, other: 'BoundingBox') -> bool:
        """Czy `other` leży w całości wewnątrz tego boxa (krawędzie włącznie)"""
        return (
            other.min_x >= self.min_x and
            other.max_x <= self.max_x and
            other.min_y >= self.min_y and
            other.max_y <= self.max_y
        )

    def overlaps(self, other: 'BoundingBox') -> bool:
        return (
            self.min_x <= other.max_x and
            self.max_x >= other.min_x and
            self.min_y <= other.max_y and
            self.max_y >= other.min_y
        )

    def distance_to(self, other: 'BoundingBox') -> float:
        """
        Minimalna odległość między boxami.
        0 gdy boxy się nakładają, inaczej odległość najbliższych krawędzi.
        """
        if self.overlaps(other):
            return 0.0
        dx = max(0.0, self.min_x - other.max_x, other.min_x - self.max_x)
        dy = max(0.0, self.min_y - other.max_y, other.min_y - self.max_y)
        return math.hypot(dx, dy)

    def to_dict(self) -> dict:
        return {
            'min_x': self.min_x,
            'min_y': self.min_y,
            'max_x': self.max_x,
            'max_y': self.max_y,
            'width': self.width,
            'height': self.height,
        }


# ============================================================
# Entities
# ============================================================

@dataclass(frozen=True)
class LineEntity:
    """LINE - dwa wierzchołki"""
    vertices: Tuple[Point2D, Point2D]
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: EntityType = field(default=EntityType.LINE, init=False)


@dataclass(frozen=True)
class CircleEntity:
    """CIRCLE - środek + promień"""
    center: Point2D
    radius: float
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: EntityType = field(default=EntityType.CIRCLE, init=False)


@dataclass(frozen=True)
class ArcEntity:
    """
    ARC - środek, promień, kąty w stopniach (bezwzględne, względem środka).

    DXF zawsze opisuje łuk przeciwnie do wskazówek zegara od start do end.
    Odwrócony łuk ma zamienione kąty i clockwise=True - geometria bez zmian.
    """
    center: Point2D
    radius: float
    start_angle: float
    end_angle: float
    clockwise: bool = False
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: EntityType = field(default=EntityType.ARC, init=False)

    @property
    def sweep_angle(self) -> float:
        """Rozpiętość łuku w stopniach, 0 <= sweep < 360"""
        if self.clockwise:
            total = self.start_angle - self.end_angle
        else:
            total = self.end_angle - self.start_angle
        if total < 0:
            total += 360.0
        return total


@dataclass(frozen=True)
class PolylineVertex:
    """Wierzchołek polilinii; bulge opisuje łuk do następnego wierzchołka"""
    x: float
    y: float
    bulge: float = 0.0

    @property
    def point(self) -> Point2D:
        return Point2D(self.x, self.y)


@dataclass(frozen=True)
class PolylineEntity:
    """LWPOLYLINE / POLYLINE - lista wierzchołków + flagi zamknięcia"""
    vertices: Tuple[PolylineVertex, ...]
    closed: bool = False
    shape: bool = False
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: EntityType = EntityType.LWPOLYLINE


@dataclass(frozen=True)
class EllipseEntity:
    """ELLIPSE - środek, wektor osi wielkiej (względem środka), stosunek osi"""
    center: Point2D
    major_axis: Point2D
    ratio: float = 1.0
    start_param: float = 0.0
    end_param: float = 2 * math.pi
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: EntityType = field(default=EntityType.ELLIPSE, init=False)

    @property
    def minor_axis(self) -> Point2D:
        """Wektor osi małej (oś wielka obrócona o 90°, skalowana przez ratio)"""
        return Point2D(-self.major_axis.y * self.ratio, self.major_axis.x * self.ratio)


@dataclass(frozen=True)
class SplineEntity:
    """SPLINE - punkty kontrolne, opcjonalne punkty dopasowania, stopień"""
    control_points: Tuple[Point2D, ...] = ()
    fit_points: Tuple[Point2D, ...] = ()
    degree: int = 3
    closed: bool = False
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: EntityType = field(default=EntityType.SPLINE, init=False)


@dataclass(frozen=True)
class UnsupportedEntity:
    """Entity nieobsługiwanego typu (TEXT, HATCH, INSERT...) - tylko do raportu"""
    dxftype: str
    layer: str = "0"
    handle: Optional[str] = None
    entity_type: Optional[EntityType] = field(default=None, init=False)


DXFEntity = Union[
    LineEntity, CircleEntity, ArcEntity, PolylineEntity,
    EllipseEntity, SplineEntity, UnsupportedEntity,
]


def entity_type_name(entity: DXFEntity) -> str:
    """Nazwa typu DXF entity ('LINE', 'TEXT', ...)"""
    if entity.entity_type is None:
        return getattr(entity, 'dxftype', 'UNKNOWN')
    return entity.entity_type.value


# ============================================================
# Kontury
# ============================================================

@dataclass
class Contour:
    """
    Uporządkowany łańcuch połączonych entities.

    Dla konturu niepojedynczego koniec entity i pokrywa się (w tolerancji)
    z początkiem entity i+1 - po ewentualnym odwróceniu.
    """
    entities: List[DXFEntity] = field(default_factory=list)
    closed: bool = False
    single: bool = False  # True = jedna z natury zamknięta entity (np. CIRCLE)
    bounding_box: BoundingBox = field(default_factory=BoundingBox.empty)
    warning: Optional[str] = None


@dataclass
class ShapeWithHoles:
    """Kontur zewnętrzny + otwory jednego detalu"""
    exterior: Contour
    holes: List[Contour] = field(default_factory=list)


# ============================================================
# Punkty końcowe, zamknięcie, odwracanie
# ============================================================

def _arc_point(center: Point2D, radius: float, angle_deg: float) -> Point2D:
    angle = math.radians(angle_deg)
    return Point2D(
        center.x + radius * math.cos(angle),
        center.y + radius * math.sin(angle),
        center.z,
    )


def _first_non_origin(points: Iterable[Point2D]) -> Optional[Point2D]:
    for point in points:
        if point.distance_from_origin > SPLINE_ORIGIN_TOLERANCE:
            return point
    return None


def get_start_point(entity: DXFEntity) -> Point2D:
    """
    Punkt początkowy entity.

    CIRCLE / ELLIPSE nie mają naturalnego początku - zwracany jest umowny
    punkt na obwodzie ("góra" okręgu, koniec osi małej elipsy).
    """
    etype = entity.entity_type

    if etype == EntityType.LINE:
        return entity.vertices[0]

    if etype == EntityType.ARC:
        return _arc_point(entity.center, entity.radius, entity.start_angle)

    if etype in (EntityType.LWPOLYLINE, EntityType.POLYLINE):
        if not entity.vertices:
            return ORIGIN
        return entity.vertices[0].point

    if etype == EntityType.CIRCLE:
        # Tylko do łańcuchowania; circle_to_points próbkuje od kąta 0, okrąg zawsze jest osobnym konturem
        return Point2D(entity.center.x, entity.center.y + entity.radius, entity.center.z)

    if etype == EntityType.ELLIPSE:
        minor = entity.minor_axis
        return Point2D(entity.center.x + minor.x, entity.center.y + minor.y, entity.center.z)

    if etype == EntityType.SPLINE:
        points = entity.control_points or entity.fit_points
        if points:
            point = _first_non_origin(points)
            return point if point is not None else points[0]
        return ORIGIN

    logger.warning(f"get_start_point: Unknown entity type {entity_type_name(entity)}")
    return ORIGIN


def get_end_point(entity: DXFEntity) -> Point2D:
    """Punkt końcowy entity (dla CIRCLE / ELLIPSE równy początkowi)"""
    etype = entity.entity_type

    if etype == EntityType.LINE:
        return entity.vertices[1]

    if etype == EntityType.ARC:
        return _arc_point(entity.center, entity.radius, entity.end_angle)

    if etype in (EntityType.LWPOLYLINE, EntityType.POLYLINE):
        if not entity.vertices:
            return ORIGIN
        return entity.vertices[-1].point

    if etype in (EntityType.CIRCLE, EntityType.ELLIPSE):
        return get_start_point(entity)

    if etype == EntityType.SPLINE:
        points = entity.control_points or entity.fit_points
        if points:
            point = _first_non_origin(reversed(points))
            return point if point is not None else points[-1]
        return ORIGIN

    logger.warning(f"get_end_point: Unknown entity type {entity_type_name(entity)}")
    return ORIGIN


def is_closed_entity(entity: DXFEntity, tolerance: float = 0.01) -> bool:
    """
    Czy entity jest z natury zamknięta.

    Polilinia: flaga closed/shape LUB pierwszy ≈ ostatni wierzchołek.
    """
    etype = entity.entity_type

    if etype in (EntityType.CIRCLE, EntityType.ELLIPSE):
        return True

    if etype in (EntityType.LWPOLYLINE, EntityType.POLYLINE):
        if entity.closed or entity.shape:
            return True
        if len(entity.vertices) < 2:
            return False
        first = entity.vertices[0].point
        last = entity.vertices[-1].point
        return first.distance_to(last) < tolerance

    if etype == EntityType.SPLINE:
        return entity.closed

    if etype in (EntityType.LINE, EntityType.ARC):
        return False

    logger.warning(f"is_closed_entity: Unknown entity type {entity_type_name(entity)}")
    return False


def reverse_entity(entity: DXFEntity) -> DXFEntity:
    """
    Zwróć NOWĄ entity z zamienionym początkiem i końcem.
    Oryginał pozostaje bez zmian.
    """
    etype = entity.entity_type

    if etype == EntityType.LINE:
        return replace(entity, vertices=(entity.vertices[1], entity.vertices[0]))

    if etype == EntityType.ARC:
        return replace(
            entity,
            start_angle=entity.end_angle,
            end_angle=entity.start_angle,
            clockwise=not entity.clockwise,
        )

    if etype in (EntityType.LWPOLYLINE, EntityType.POLYLINE):
        old = entity.vertices
        n = len(old)
        # Bulge segmentu k po odwróceniu = -bulge segmentu (n-2-k) przed odwróceniem
        new_vertices = tuple(
            PolylineVertex(old[n - 1 - k].x, old[n - 1 - k].y, -old[(n - 2 - k) % n].bulge)
            for k in range(n)
        )
        return replace(entity, vertices=new_vertices)

    if etype == EntityType.SPLINE:
        return replace(
            entity,
            control_points=tuple(reversed(entity.control_points)),
            fit_points=tuple(reversed(entity.fit_points)),
        )

    if etype in (EntityType.CIRCLE, EntityType.ELLIPSE):
        return entity

    logger.warning(f"reverse_entity: Cannot reverse entity type {entity_type_name(entity)}")
    return entity


# Eksporty
__all__ = [
    'PointTuple',
    'EntityType',
    'SUPPORTED_ENTITY_TYPES',
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
    'entity_type_name',
    'Contour',
    'ShapeWithHoles',
    'get_start_point',
    'get_end_point',
    'is_closed_entity',
    'reverse_entity',
]
