"""
DXF Reader - Parsowanie tekstu DXF do modelu entities
=====================================================
Cienka warstwa nad ezdxf: tekst DXF -> DXFDocument z niezmiennymi
entities (LINE, ARC, CIRCLE, LWPOLYLINE, POLYLINE, SPLINE, ELLIPSE).

Entities innych typów trafiają do dokumentu jako UnsupportedEntity,
żeby można je było policzyć i zgłosić jako ostrzeżenie.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import ezdxf

from core.exceptions import ParsingError
from .entities import (
    DXFEntity, EntityType, Point2D, BoundingBox,
    LineEntity, CircleEntity, ArcEntity, PolylineVertex, PolylineEntity,
    EllipseEntity, SplineEntity, UnsupportedEntity,
    entity_type_name,
)
from .converters import entities_bounding_box

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DXFHeader:
    """Wybrane zmienne nagłówka DXF"""
    version: Optional[str] = None       # $ACADVER
    units: Optional[int] = None         # $INSUNITS
    limits_min: Optional[Tuple[float, float]] = None  # $LIMMIN
    limits_max: Optional[Tuple[float, float]] = None  # $LIMMAX

    def to_dict(self) -> Dict[str, Any]:
        return {
            '$ACADVER': self.version,
            '$INSUNITS': self.units,
            '$LIMMIN': self.limits_min,
            '$LIMMAX': self.limits_max,
        }


@dataclass(frozen=True)
class DXFDocument:
    """Sparsowany dokument - entities modelspace, nagłówek, warstwy"""
    entities: Tuple[DXFEntity, ...] = ()
    header: DXFHeader = field(default_factory=DXFHeader)
    layers: Tuple[str, ...] = ()
    filename: Optional[str] = None


@dataclass
class DXFValidationResult:
    """Wynik walidacji dokumentu"""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


# ============================================================
# Parsowanie
# ============================================================

def parse(raw_text: str, filename: str = None) -> DXFDocument:
    """
    Sparsuj tekst DXF.

    Args:
        raw_text: Zawartość pliku DXF (już wczytana)
        filename: Nazwa pliku - tylko do komunikatów

    Returns:
        DXFDocument

    Raises:
        ParsingError: Niepoprawna struktura DXF (nigdy częściowy dokument)
    """
    if not raw_text or not raw_text.strip():
        raise ParsingError("empty DXF content", filename)

    try:
        doc = ezdxf.read(io.StringIO(raw_text))
    except Exception as e:
        logger.error(f"DXF parse error{f' ({filename})' if filename else ''}: {e}")
        raise ParsingError(str(e) or type(e).__name__, filename) from e

    entities = []
    for dxf_entity in doc.modelspace():
        entities.append(convert_ezdxf_entity(dxf_entity))

    header = _read_header(doc)
    layers = tuple(layer.dxf.name for layer in doc.layers)

    logger.debug(
        f"Parsed {filename or 'DXF'}: {len(entities)} entities, "
        f"{len(layers)} layers, version {header.version}"
    )

    return DXFDocument(
        entities=tuple(entities),
        header=header,
        layers=layers,
        filename=filename,
    )


def _xy(value) -> Optional[Tuple[float, float]]:
    if value is None:
        return None
    return (float(value[0]), float(value[1]))


def _read_header(doc) -> DXFHeader:
    header = doc.header
    units = header.get('$INSUNITS', None)
    return DXFHeader(
        version=header.get('$ACADVER', None),
        units=int(units) if units is not None else None,
        limits_min=_xy(header.get('$LIMMIN', None)),
        limits_max=_xy(header.get('$LIMMAX', None)),
    )


def _point(vec) -> Point2D:
    z = float(vec[2]) if len(vec) > 2 else 0.0
    return Point2D(float(vec[0]), float(vec[1]), z)


def _points(vectors: Iterable) -> Tuple[Point2D, ...]:
    return tuple(_point(v) for v in vectors)


def convert_ezdxf_entity(e) -> DXFEntity:
    """
    Konwertuj entity ezdxf na entity modelu.

    Nieobsługiwane typy (w tym siatki POLYLINE) -> UnsupportedEntity.
    """
    dxftype = e.dxftype()
    layer = e.dxf.get('layer', '0')
    handle = e.dxf.get('handle', None)

    if dxftype == 'LINE':
        return LineEntity(
            vertices=(_point(e.dxf.start), _point(e.dxf.end)),
            layer=layer, handle=handle,
        )

    if dxftype == 'CIRCLE':
        return CircleEntity(
            center=_point(e.dxf.center),
            radius=float(e.dxf.radius),
            layer=layer, handle=handle,
        )

    if dxftype == 'ARC':
        return ArcEntity(
            center=_point(e.dxf.center),
            radius=float(e.dxf.radius),
            start_angle=float(e.dxf.start_angle),
            end_angle=float(e.dxf.end_angle),
            layer=layer, handle=handle,
        )

    if dxftype == 'LWPOLYLINE':
        vertices = tuple(
            PolylineVertex(float(x), float(y), float(b))
            for x, y, b in e.get_points('xyb')
        )
        return PolylineEntity(
            vertices=vertices,
            closed=bool(e.closed),
            layer=layer, handle=handle,
            entity_type=EntityType.LWPOLYLINE,
        )

    if dxftype == 'POLYLINE':
        if e.is_poly_face_mesh:
            return UnsupportedEntity('POLYFACE', layer=layer, handle=handle)
        if e.is_polygon_mesh:
            return UnsupportedEntity('POLYMESH', layer=layer, handle=handle)

        vertices = tuple(
            PolylineVertex(
                float(v.dxf.location[0]),
                float(v.dxf.location[1]),
                float(v.dxf.get('bulge', 0.0)),
            )
            for v in e.vertices
        )
        return PolylineEntity(
            vertices=vertices,
            closed=bool(e.is_closed),
            layer=layer, handle=handle,
            entity_type=EntityType.POLYLINE,
        )

    if dxftype == 'ELLIPSE':
        return EllipseEntity(
            center=_point(e.dxf.center),
            major_axis=_point(e.dxf.major_axis),
            ratio=float(e.dxf.ratio),
            start_param=float(e.dxf.start_param),
            end_param=float(e.dxf.end_param),
            layer=layer, handle=handle,
        )

    if dxftype == 'SPLINE':
        return SplineEntity(
            control_points=_points(e.control_points),
            fit_points=_points(e.fit_points),
            degree=int(e.dxf.degree),
            closed=bool(e.closed),
            layer=layer, handle=handle,
        )

    logger.debug(f"Unsupported entity type: {dxftype} (handle {handle})")
    return UnsupportedEntity(dxftype, layer=layer, handle=handle)


# ============================================================
# Zapytania o dokument (czyste funkcje)
# ============================================================

def is_supported(entity: DXFEntity) -> bool:
    return entity.entity_type is not None


def extract_entities(document: DXFDocument, include_unsupported: bool = False) -> List[DXFEntity]:
    """Entities dokumentu; domyślnie tylko obsługiwane typy"""
    if include_unsupported:
        return list(document.entities)
    return [e for e in document.entities if is_supported(e)]


def filter_entities_by_type(entities: Iterable[DXFEntity], types: Iterable[str]) -> List[DXFEntity]:
    """Entities o podanych nazwach typów DXF ('LINE', 'ARC', ...)"""
    wanted = {t.upper() for t in types}
    return [e for e in entities if entity_type_name(e) in wanted]


def filter_entities_by_layer(entities: Iterable[DXFEntity], layers: Iterable[str]) -> List[DXFEntity]:
    """Entities leżące na podanych warstwach"""
    wanted = set(layers)
    return [e for e in entities if e.layer in wanted]


def get_layers(document: DXFDocument) -> List[str]:
    """
    Nazwy warstw: z tabeli warstw, a po nich warstwy użyte przez entities,
    których w tabeli nie ma. Bez powtórzeń, w kolejności wystąpienia.
    """
    names = list(document.layers)
    seen = set(names)
    for entity in document.entities:
        if entity.layer not in seen:
            seen.add(entity.layer)
            names.append(entity.layer)
    return names


def get_header(document: DXFDocument) -> Dict[str, Any]:
    return document.header.to_dict()


def get_entity_by_handle(document: DXFDocument, handle: str) -> Optional[DXFEntity]:
    for entity in document.entities:
        if entity.handle == handle:
            return entity
    return None


def get_entity_stats(document: DXFDocument) -> Dict[str, int]:
    """Liczba entities per typ DXF"""
    stats: Dict[str, int] = {}
    for entity in document.entities:
        name = entity_type_name(entity)
        stats[name] = stats.get(name, 0) + 1
    return stats


def get_entities_bounding_box(document: DXFDocument) -> BoundingBox:
    """Bounding box obsługiwanych entities (pusty, gdy ich brak)"""
    return entities_bounding_box(extract_entities(document))


def validate_dxf(document: DXFDocument) -> DXFValidationResult:
    """
    Sprawdź dokument przed budowaniem konturów.

    Błąd: brak jakichkolwiek entities.
    Ostrzeżenia: nieobsługiwane typy entities (z liczbą wystąpień).
    """
    errors = []
    warnings = []

    if not document.entities:
        errors.append("DXF file contains no entities")
        return DXFValidationResult(valid=False, errors=errors, warnings=warnings)

    unsupported: Dict[str, int] = {}
    for entity in document.entities:
        if not is_supported(entity):
            name = entity_type_name(entity)
            unsupported[name] = unsupported.get(name, 0) + 1

    for name, count in unsupported.items():
        warnings.append(f"Unsupported entity type {name} ignored ({count} found)")

    return DXFValidationResult(valid=True, errors=errors, warnings=warnings)


# Eksporty
__all__ = [
    'DXFHeader',
    'DXFDocument',
    'DXFValidationResult',
    'parse',
    'convert_ezdxf_entity',
    'is_supported',
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
