"""Solver job document formatting, validation and serialization."""

from .json_formatter import (
    JsonValidationResult,
    clean_coordinate,
    clean_polygon_data,
    format_sparrow_json,
    dropped_hole_warnings,
    validate_sparrow_json,
    stringify_sparrow_json,
    minify_json,
    calculate_json_size,
    get_json_stats,
    add_metadata,
    remove_metadata
)

__all__ = [
    'JsonValidationResult',
    'clean_coordinate',
    'clean_polygon_data',
    'format_sparrow_json',
    'dropped_hole_warnings',
    'validate_sparrow_json',
    'stringify_sparrow_json',
    'minify_json',
    'calculate_json_size',
    'get_json_stats',
    'add_metadata',
    'remove_metadata'
]
