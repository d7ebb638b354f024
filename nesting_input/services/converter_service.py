"""
DXF to nesting conversion service.

Converts a batch of DXF files into one job document for the strip-packing
solver:

    parse -> validate -> extract -> build contours -> classify holes
    -> discretize -> validate polygon -> assign ids -> format -> validate job

Each file is converted on its own into an immutable FileOutcome. A file that
fails is left out of the job and reported with the stage it failed at; only
a job document that fails structural validation fails the whole batch.

Usage:
    result = convert_dxf_to_json([DxfFileInput("part.dxf", text, 5)])
    if result.success:
        submit(result.json_string)
"""

import logging
from typing import Dict, List, Optional, Sequence, Any

from core.exceptions import ConverterError, ValidationError, ContourError, PolygonError
from core.dxf.entities import BoundingBox, Contour
from core.dxf.reader import parse, validate_dxf, extract_entities
from core.dxf.contour_builder import ContourBuilder, validate_contours, WARNING_AUTO_CLOSED
from core.dxf.shape_classifier import (
    separate_exterior_and_holes, group_contours_by_proximity, detect_shape
)
from core.dxf.polygon import (
    contour_to_polygon, validate_polygon, remove_duplicate_points, ensure_counter_clockwise,
    subdivide_long_edges
)
from ..config import ConversionSettings
from ..models.job import (
    DxfFileInput, ItemShape, ItemMetadata, ConvertedPart, NestingInputItem
)
from ..models.result import (
    FileError, FileWarning, FileOutcome, ConversionStats, ConversionResult,
    ContentConversionResult, OUTPUT_FILE, STAGE_JSON_VALIDATION
)
from ..formatter.json_formatter import (
    clean_coordinate, format_sparrow_json, dropped_hole_warnings, validate_sparrow_json,
    stringify_sparrow_json, minify_json
)

logger = logging.getLogger(__name__)

STAGE_INPUT = "input"
STAGE_EXTRACTION = "extraction"

HOLE_DETECTION_WINDING = "winding"

NO_ITEMS_MESSAGE = "No items were successfully converted"


# ============================================================
# Single file
# ============================================================

def convert_file(file_input: DxfFileInput, settings: ConversionSettings) -> FileOutcome:
    """
    Convert one file into parts or an error record.

    Never raises for problems in the file itself: every failure becomes
    a FileError carrying the stage it happened at.
    """
    warnings: List[str] = []

    try:
        parts = _convert_parts(file_input, settings, warnings)
    except ConverterError as e:
        logger.warning(f"[{file_input.name}] {e.stage}: {e.message}")
        return FileOutcome(
            file=file_input.name,
            quantity=file_input.quantity,
            error=FileError(file=file_input.name, stage=e.stage, message=e.message),
            warnings=_file_warnings(file_input.name, warnings)
        )
    except Exception as e:
        logger.exception(f"[{file_input.name}] Unexpected conversion failure")
        return FileOutcome(
            file=file_input.name,
            quantity=file_input.quantity,
            error=FileError(file=file_input.name, stage=ConverterError.stage, message=str(e)),
            warnings=_file_warnings(file_input.name, warnings)
        )

    logger.info(f"[{file_input.name}] Converted {len(parts)} part(s)")
    return FileOutcome(
        file=file_input.name,
        quantity=file_input.quantity,
        parts=tuple(parts),
        warnings=_file_warnings(file_input.name, warnings)
    )


def _file_warnings(filename: str, messages: List[str]):
    return tuple(FileWarning(file=filename, message=m) for m in messages)


def _convert_parts(
    file_input: DxfFileInput,
    settings: ConversionSettings,
    warnings: List[str]
) -> List[ConvertedPart]:
    """Run the per-file pipeline; appends warnings, raises ConverterError on failure."""
    if not isinstance(file_input.quantity, int) or file_input.quantity < 1:
        raise ConverterError(
            f"Quantity must be a positive integer (got {file_input.quantity})",
            code="INVALID_INPUT",
            stage=STAGE_INPUT
        )

    document = parse(file_input.content, file_input.name)

    validation = validate_dxf(document)
    warnings.extend(validation.warnings)
    if not validation.valid:
        raise ValidationError("; ".join(validation.errors), code="NO_ENTITIES")

    entities = extract_entities(document)
    if not entities:
        raise ValidationError(
            "No supported entities found",
            code="NO_SUPPORTED_ENTITIES",
            stage=STAGE_EXTRACTION
        )

    builder = ContourBuilder(
        tolerance=settings.tolerance,
        auto_close=settings.auto_close,
        tie_break=settings.tie_break
    )
    contours = builder.build_contours(entities)

    contour_check = validate_contours(contours)
    if not contour_check.valid:
        raise ContourError("; ".join(contour_check.errors), code="NO_CONTOURS")
    warnings.extend(contour_check.warnings)

    auto_closed = sum(1 for c in contours if c.warning == WARNING_AUTO_CLOSED)
    if auto_closed:
        warnings.append(f"{WARNING_AUTO_CLOSED} ({auto_closed} contour(s))")

    if settings.split_parts:
        groups = group_contours_by_proximity(contours, settings.part_distance)
    else:
        groups = [contours]

    parts = []
    for part_index, group in enumerate(groups):
        prefix = f"Part {part_index}: " if len(groups) > 1 else ""
        shape = _build_shape(group, settings, warnings, prefix)

        metadata = ItemMetadata(
            filename=file_input.name,
            original_entity_count=len(document.entities),
            contour_count=len(group),
            bounding_box=BoundingBox.from_points(shape.exterior),
            part_index=part_index
        )
        parts.append(ConvertedPart(shape=shape, metadata=metadata))

    return parts


def _discretize(contour: Contour, settings: ConversionSettings):
    return contour_to_polygon(
        contour,
        arc_segments=settings.arc_segments,
        spline_segments=settings.spline_segments,
        max_edge_length=settings.max_edge_length
    )


def _build_shape(
    group: List[Contour],
    settings: ConversionSettings,
    warnings: List[str],
    prefix: str
) -> ItemShape:
    """Classify one part's contours and turn them into CCW rings."""
    if settings.hole_detection == HOLE_DETECTION_WINDING:
        rings = [_discretize(c, settings) for c in group]
        detected = detect_shape([r for r in rings if r])
        if detected is None:
            raise PolygonError([f"{prefix}No counter-clockwise ring found for the exterior"])
        exterior, holes = detected.exterior, detected.holes
    else:
        classified = separate_exterior_and_holes(group)
        dropped = len(group) - 1 - len(classified.holes)
        if dropped:
            warnings.append(
                f"{prefix}{dropped} contour(s) outside the exterior bounding box were dropped"
            )
        exterior = _discretize(classified.exterior, settings)
        holes = [_discretize(h, settings) for h in classified.holes]

    check = validate_polygon(exterior)
    warnings.extend(prefix + w for w in check.warnings)
    if not check.valid:
        raise PolygonError([prefix + e for e in check.errors])

    kept_holes = []
    for index, hole in enumerate(holes):
        hole_check = validate_polygon(hole)
        if not hole_check.valid:
            warnings.append(
                f"{prefix}Hole {index} skipped: {'; '.join(hole_check.errors)}"
            )
            continue
        kept_holes.append(_finish_ring(hole, settings.max_edge_length))

    return ItemShape(
        exterior=_finish_ring(exterior, settings.max_edge_length),
        interiors=tuple(kept_holes)
    )


def _finish_ring(points, max_edge_length: float):
    """
    Round, drop near-duplicates, then split long edges again.

    Dropping a point merges two edges, so no edge bound holds until the
    ring is subdivided after deduplication. The result is already clean
    for the formatter.
    """
    ring = remove_duplicate_points([(clean_coordinate(x), clean_coordinate(y)) for x, y in points])
    ring = subdivide_long_edges(ring, max_edge_length)
    ring = [(clean_coordinate(x), clean_coordinate(y)) for x, y in ring]
    return tuple(ensure_counter_clockwise(ring))


# ============================================================
# Batch
# ============================================================

def assign_ids(outcomes: Sequence[FileOutcome], settings: ConversionSettings) -> List[NestingInputItem]:
    """
    Number all parts of all successful outcomes 0..N-1 in input order.

    This is the only place ids are assigned.
    """
    items = []
    for outcome in outcomes:
        for part in outcome.parts:
            items.append(NestingInputItem(
                id=len(items),
                quantity=outcome.quantity,
                shape=part.shape,
                allowed_rotations=settings.allowed_rotations,
                metadata=part.metadata
            ))
    return items


def convert_dxf_to_json(
    files: Sequence[DxfFileInput],
    settings: ConversionSettings = None
) -> ConversionResult:
    """
    Convert a batch of files into one solver job.

    Files are converted strictly in order; each failed file is listed in
    `errors` and left out. The batch fails when no item was converted or
    when the job document fails structural validation.
    """
    settings = (settings or ConversionSettings()).validate()

    logger.info(f"Converting {len(files)} file(s)")
    outcomes = [convert_file(f, settings) for f in files]

    errors = [o.error for o in outcomes if o.error is not None]
    warnings = [w for o in outcomes for w in o.warnings]
    items = assign_ids(outcomes, settings)

    successful = sum(1 for o in outcomes if o.ok)
    stats = ConversionStats(
        total_files=len(files),
        successful_files=successful,
        failed_files=len(files) - successful,
        total_items=len(items)
    )

    if not items:
        logger.error(NO_ITEMS_MESSAGE)
        return ConversionResult(
            success=False,
            errors=errors,
            warnings=warnings,
            stats=stats,
            message=NO_ITEMS_MESSAGE
        )

    job = format_sparrow_json(items, settings.strip_height, settings.problem_name).to_dict()
    warnings.extend(dropped_hole_warnings(items))

    check = validate_sparrow_json(job)
    warnings.extend(FileWarning(file=OUTPUT_FILE, message=w) for w in check.warnings)
    if not check.valid:
        logger.error(f"Generated JSON is invalid ({len(check.errors)} error(s))")
        errors.extend(
            FileError(file=OUTPUT_FILE, stage=STAGE_JSON_VALIDATION, message=e)
            for e in check.errors
        )
        return ConversionResult(
            success=False,
            items=items,
            errors=errors,
            warnings=warnings,
            stats=stats,
            message="Generated JSON failed validation"
        )

    message = f"Converted {len(items)} item(s) from {successful} of {len(files)} file(s)"
    logger.info(message)
    return ConversionResult(
        success=True,
        json=job,
        json_string=stringify_sparrow_json(job),
        items=items,
        errors=errors,
        warnings=warnings,
        stats=stats,
        message=message
    )


# ============================================================
# Convenience entry points
# ============================================================

def convert_single_dxf(
    filename: str,
    content: str,
    quantity: int = 1,
    settings: ConversionSettings = None
) -> ConversionResult:
    """Convert a single DXF text."""
    return convert_dxf_to_json([DxfFileInput(filename, content, quantity)], settings)


def convert_dxf_content(
    content: str,
    filename: str = "input.dxf",
    quantity: int = 1,
    settings: ConversionSettings = None
) -> ContentConversionResult:
    """Convert a single DXF text; errors and warnings as plain strings."""
    return ContentConversionResult.from_result(
        convert_single_dxf(filename, content, quantity, settings)
    )


def convert_multiple_dxf(
    files: Sequence[Dict[str, Any]],
    settings: ConversionSettings = None
) -> ContentConversionResult:
    """
    Convert several DXF texts given as dicts {name, content, quantity}.

    Missing quantity defaults to 1.
    """
    inputs = [DxfFileInput.from_dict(f) for f in files]
    return ContentConversionResult.from_result(convert_dxf_to_json(inputs, settings))


def get_conversion_stats(result: ConversionResult) -> Dict[str, Any]:
    """Summary of a batch result for display."""
    if not result.success:
        return {
            'status': 'failed',
            'message': result.message,
            'error_count': len(result.errors),
            'warning_count': len(result.warnings)
        }

    stats = result.stats.to_dict()
    stats.update({
        'status': 'success',
        'error_count': len(result.errors),
        'warning_count': len(result.warnings),
        'total_points': sum(len(item['shape']['data']) for item in result.json['items']),
        'json_size': len(minify_json(result.json))
    })
    return stats
