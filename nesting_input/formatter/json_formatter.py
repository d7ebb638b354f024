"""
JSON formatter for the strip-packing solver.

Turns converted items into the solver's job document, validates its
structure and serializes it. The solver's deserializer rejects bare integers
where it expects floats, so every integral literal in a coordinate or
orientation array and the strip height are written with an explicit `.0`;
`id` and `demand` stay integers.
"""

import json
import math
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Any, Sequence

from core.dxf.entities import PointTuple
from core.dxf.polygon import ensure_counter_clockwise
from ..models.job import NestingInputItem, SparrowItem, SparrowJson, SIMPLE_POLYGON
from ..models.result import FileWarning

logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 6
ZERO_THRESHOLD = 1e-6
DUPLICATE_TOLERANCE = 0.01

METADATA_KEY = "_metadata"
GENERATOR_NAME = "dxf-nesting-input"
GENERATOR_VERSION = "1.0.0"


@dataclass
class JsonValidationResult:
    """Structural validation of a job document."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


# ============================================================
# Cleaning
# ============================================================

def clean_coordinate(value: float) -> float:
    """Round to 6 decimal places; anything below 1e-6 in magnitude becomes 0.0."""
    rounded = round(float(value), COORDINATE_PRECISION)
    if abs(rounded) < ZERO_THRESHOLD:
        return 0.0
    return rounded


def clean_polygon_data(points: Sequence[PointTuple]) -> List[List[float]]:
    """
    Clean a ring for the solver.

    Coordinates are rounded, consecutive points closer than 0.01 mm are
    dropped and the ring is made counter-clockwise. Running it on its own
    output returns the same ring.
    """
    cleaned = [(clean_coordinate(p[0]), clean_coordinate(p[1])) for p in points]

    result: List[PointTuple] = []
    for point in cleaned:
        if result and math.dist(point, result[-1]) < DUPLICATE_TOLERANCE:
            continue
        result.append(point)

    if len(result) != len(cleaned):
        logger.debug(f"Removed {len(cleaned) - len(result)} duplicate consecutive point(s)")

    return [[x, y] for x, y in ensure_counter_clockwise(result)]


# ============================================================
# Formatting
# ============================================================

def format_sparrow_json(
    items: Sequence[NestingInputItem],
    strip_height: float,
    problem_name: str
) -> SparrowJson:
    """
    Build the solver's job document.

    Only the exterior ring of each item is written; holes are not part of
    the simple_polygon format (see dropped_hole_warnings).
    """
    sparrow_items = []
    for item in items:
        sparrow_items.append(SparrowItem(
            id=int(item.id),
            demand=int(item.quantity),
            dxf=item.metadata.filename or f"item_{item.id}.dxf",
            allowed_orientations=[float(angle) for angle in item.allowed_rotations],
            data=clean_polygon_data(item.shape.exterior),
            shape_type=SIMPLE_POLYGON
        ))

    return SparrowJson(
        name=problem_name,
        items=sparrow_items,
        strip_height=float(strip_height)
    )


def dropped_hole_warnings(items: Sequence[NestingInputItem]) -> List[FileWarning]:
    """One warning per item whose holes are left out of the job document."""
    warnings = []
    for item in items:
        holes = len(item.shape.interiors)
        if holes:
            message = (
                f"Item {item.id}: has {holes} hole(s) - only simple polygons are "
                f"supported, holes will be ignored"
            )
            logger.warning(message)
            warnings.append(FileWarning(file=item.metadata.filename, message=message))
    return warnings


# ============================================================
# Validation
# ============================================================

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_polygon_data(data, label: str) -> List[str]:
    errors = []

    if not isinstance(data, list):
        return [f"{label}: Must be an array of points"]

    if len(data) < 3:
        return [f"{label}: Must have at least 3 points (has {len(data)})"]

    for index, point in enumerate(data):
        if not isinstance(point, (list, tuple)):
            errors.append(f"{label}[{index}]: Point must be [x, y] array")
            continue
        if len(point) != 2:
            errors.append(f"{label}[{index}]: Point must have exactly 2 coordinates [x, y]")
            continue
        if not _is_number(point[0]) or not math.isfinite(point[0]):
            errors.append(f"{label}[{index}]: x coordinate must be finite number")
        if not _is_number(point[1]) or not math.isfinite(point[1]):
            errors.append(f"{label}[{index}]: y coordinate must be finite number")

    return errors


def _validate_item(item, index: int) -> List[str]:
    errors = []

    if not isinstance(item, dict):
        return [f"Item {index}: Must be an object"]

    if not isinstance(item.get('id'), int) or isinstance(item.get('id'), bool) or item['id'] < 0:
        errors.append(f'Item {index}: Missing or invalid "id" (must be non-negative integer)')

    demand = item.get('demand')
    if not isinstance(demand, int) or isinstance(demand, bool) or demand <= 0:
        errors.append(f'Item {index}: Missing or invalid "demand" (must be positive integer)')

    if not isinstance(item.get('dxf'), str) or not item['dxf']:
        errors.append(f'Item {index}: Missing or invalid "dxf" (must be string path)')

    orientations = item.get('allowed_orientations')
    if orientations is None:
        errors.append(f'Item {index}: Missing "allowed_orientations"')
    elif not isinstance(orientations, list):
        errors.append(f'Item {index}: "allowed_orientations" must be an array')
    elif not orientations:
        errors.append(f'Item {index}: "allowed_orientations" must contain at least one orientation')
    elif any(not _is_number(a) or not 0 <= a < 360 for a in orientations):
        errors.append(f"Item {index}: Invalid orientations (must be 0-359 degrees)")

    shape = item.get('shape')
    if not isinstance(shape, dict):
        errors.append(f'Item {index}: Missing "shape" property')
        return errors

    if shape.get('type') != SIMPLE_POLYGON:
        errors.append(f'Item {index}: shape.type must be "{SIMPLE_POLYGON}"')

    if 'data' not in shape:
        errors.append(f'Item {index}: Missing "shape.data"')
    else:
        errors.extend(_validate_polygon_data(shape['data'], f"Item {index} shape.data"))

    return errors


def validate_sparrow_json(data: Dict[str, Any]) -> JsonValidationResult:
    """
    Check the structure of a job document (as a plain dict).

    Errors: name, strip_height, items and every item field the solver reads.
    Warning: empty item list.
    """
    errors = []
    warnings = []

    if not isinstance(data.get('name'), str) or not data['name']:
        errors.append('Missing or invalid "name" property (must be string)')

    strip_height = data.get('strip_height')
    if not _is_number(strip_height) or not math.isfinite(strip_height) or strip_height <= 0:
        errors.append("Invalid strip_height: must be positive number")

    items = data.get('items')
    if items is None:
        errors.append('Missing "items" property')
    elif not isinstance(items, list):
        errors.append('"items" must be an array')
    else:
        if not items:
            warnings.append("Items array is empty")
        for index, item in enumerate(items):
            errors.extend(_validate_item(item, index))

    return JsonValidationResult(valid=not errors, errors=errors, warnings=warnings)


# ============================================================
# Serialization
# ============================================================

def _as_float(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


def _float_array(values: Any) -> Any:
    """Integers inside a (nested) number array become floats; other values are kept."""
    if not isinstance(values, list):
        return values
    return [_float_array(v) if isinstance(v, list) else _as_float(v) for v in values]


def _with_float_literals(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the document with float coordinates, orientations and strip height."""
    result = dict(data)
    if 'strip_height' in result:
        result['strip_height'] = _as_float(result['strip_height'])

    items = result.get('items')
    if isinstance(items, list):
        converted = []
        for item in items:
            if isinstance(item, dict):
                item = dict(item)
                if 'allowed_orientations' in item:
                    item['allowed_orientations'] = _float_array(item['allowed_orientations'])
                shape = item.get('shape')
                if isinstance(shape, dict) and 'data' in shape:
                    item['shape'] = dict(shape, data=_float_array(shape['data']))
            converted.append(item)
        result['items'] = converted
    return result


def stringify_sparrow_json(data: Dict[str, Any], indent: int = 2) -> str:
    """
    Serialize a job document with float notation for the solver.

    Coordinates, orientations and the strip height are converted to floats
    before encoding, so json writes them with a `.0`. Strings, `id` and
    `demand` are encoded as they are.
    """
    prepared = _with_float_literals(data)
    if indent is None:
        return json.dumps(prepared, separators=(',', ':'))
    return json.dumps(prepared, indent=indent)


def minify_json(data: Dict[str, Any]) -> str:
    """Compact serialization with the same float notation."""
    return stringify_sparrow_json(data, indent=None)


def calculate_json_size(data: Dict[str, Any]) -> Dict[str, Any]:
    """Size of the compact serialization."""
    size = len(minify_json(data).encode('utf-8'))
    kilobytes = size / 1024
    return {
        'bytes': size,
        'kilobytes': kilobytes,
        'formatted': f"{size} bytes" if kilobytes < 1 else f"{kilobytes:.2f} KB"
    }


def get_json_stats(data: Dict[str, Any]) -> Dict[str, Any]:
    """Item, point and demand totals of a job document."""
    items = data.get('items') or []
    return {
        'item_count': len(items),
        'total_points': sum(len(item.get('shape', {}).get('data', [])) for item in items),
        'total_demand': sum(item.get('demand', 1) for item in items),
        'strip_height': data.get('strip_height', 0),
        'problem_name': data.get('name', 'unknown'),
        'file_size': calculate_json_size(data)
    }


def add_metadata(data: Dict[str, Any], metadata: Dict[str, Any] = None) -> Dict[str, Any]:
    """Return a copy of the document with a `_metadata` block."""
    block = {
        'generated_at': datetime.now().isoformat(),
        'generator': GENERATOR_NAME,
        'version': GENERATOR_VERSION,
        'format': 'sparrow strip packing'
    }
    block.update(metadata or {})
    result = dict(data)
    result[METADATA_KEY] = block
    return result


def remove_metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the document without the `_metadata` block."""
    return {k: v for k, v in data.items() if k != METADATA_KEY}
