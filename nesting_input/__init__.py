"""
Nesting Input Module - DXF parts to strip-packing solver jobs.

Main components:
- config: ConversionSettings and JSON settings files
- models: Input files, converted items, solver job document, results
- formatter: Job document cleaning, validation and float-safe serialization
- services: Batch conversion pipeline
"""

from .config import (
    ConversionSettings,
    load_config,
    save_config,
    create_settings_from_config
)
from .models import (
    DxfFileInput,
    NestingInputItem,
    SparrowItem,
    SparrowJson,
    FileError,
    FileWarning,
    ConversionResult,
    ContentConversionResult
)
from .formatter import (
    format_sparrow_json,
    validate_sparrow_json,
    stringify_sparrow_json
)
from .services import (
    convert_file,
    convert_dxf_to_json,
    convert_single_dxf,
    convert_dxf_content,
    convert_multiple_dxf,
    get_conversion_stats
)

__all__ = [
    # Config
    'ConversionSettings',
    'load_config',
    'save_config',
    'create_settings_from_config',

    # Models
    'DxfFileInput',
    'NestingInputItem',
    'SparrowItem',
    'SparrowJson',
    'FileError',
    'FileWarning',
    'ConversionResult',
    'ContentConversionResult',

    # Formatter
    'format_sparrow_json',
    'validate_sparrow_json',
    'stringify_sparrow_json',

    # Services
    'convert_file',
    'convert_dxf_to_json',
    'convert_single_dxf',
    'convert_dxf_content',
    'convert_multiple_dxf',
    'get_conversion_stats',
]
