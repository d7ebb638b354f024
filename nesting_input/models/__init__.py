"""Data models for the DXF to nesting conversion."""

from .job import (
    DxfFileInput,
    ItemShape,
    ItemMetadata,
    ConvertedPart,
    NestingInputItem,
    SparrowItem,
    SparrowJson,
    SIMPLE_POLYGON
)
from .result import (
    FileError,
    FileWarning,
    FileOutcome,
    ConversionStats,
    ConversionResult,
    ContentConversionResult,
    OUTPUT_FILE,
    STAGE_JSON_VALIDATION
)

__all__ = [
    'DxfFileInput',
    'ItemShape',
    'ItemMetadata',
    'ConvertedPart',
    'NestingInputItem',
    'SparrowItem',
    'SparrowJson',
    'SIMPLE_POLYGON',
    'FileError',
    'FileWarning',
    'FileOutcome',
    'ConversionStats',
    'ConversionResult',
    'ContentConversionResult',
    'OUTPUT_FILE',
    'STAGE_JSON_VALIDATION'
]
