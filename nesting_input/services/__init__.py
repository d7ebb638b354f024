"""Services for converting DXF files into solver jobs."""

from .converter_service import (
    convert_file,
    assign_ids,
    convert_dxf_to_json,
    convert_single_dxf,
    convert_dxf_content,
    convert_multiple_dxf,
    get_conversion_stats
)

__all__ = [
    'convert_file',
    'assign_ids',
    'convert_dxf_to_json',
    'convert_single_dxf',
    'convert_dxf_content',
    'convert_multiple_dxf',
    'get_conversion_stats'
]
