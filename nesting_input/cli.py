#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
dxf2nest - convert DXF parts into a strip-packing solver job

Usage:
    dxf2nest -i part1.dxf:5 part2.dxf -o job.json
    dxf2nest -i part.dxf --height 3000 --allow-rotations false
    dxf2nest -i sheet.dxf --split-parts --hole-detection winding -v

A file given as NAME:QTY gets demand QTY; without a quantity it is 1.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Tuple

from config.settings import LOG_FORMAT, LOG_LEVEL, HOLE_DETECTION_MODES, validate_config
from nesting_input.config import load_config, create_settings_from_config
from nesting_input.models import DxfFileInput
from nesting_input.services import convert_dxf_to_json

logger = logging.getLogger(__name__)


def parse_bool(value: str) -> bool:
    """argparse type for true/false flags"""
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"Expected true/false, got '{value}'")


def parse_file_arg(value: str) -> Tuple[str, int]:
    """Split 'path.dxf:5' into ('path.dxf', 5); no suffix means quantity 1"""
    path, sep, qty = value.rpartition(':')
    if sep and qty.isdigit() and path:
        return path, int(qty)
    return value, 1


def read_inputs(file_args: List[str]) -> List[DxfFileInput]:
    """Read every input file; the file name (without directory) becomes the item's dxf"""
    inputs = []
    for file_arg in file_args:
        path, quantity = parse_file_arg(file_arg)
        content = Path(path).read_text(encoding='utf-8', errors='replace')
        inputs.append(DxfFileInput(name=Path(path).name, content=content, quantity=quantity))
    return inputs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxf2nest",
        description="Convert DXF parts into a JSON job for the strip-packing solver"
    )
    parser.add_argument('-i', '--input', nargs='+', required=True, metavar='FILE[:QTY]',
                        help='DXF files, optionally with quantity (part.dxf:5)')
    parser.add_argument('-o', '--output', help='Output JSON file (default: stdout)')
    parser.add_argument('-H', '--height', type=float, dest='strip_height',
                        help='Strip height [mm]')
    parser.add_argument('--spacing', type=float, help='Part spacing [mm]')
    parser.add_argument('--arc-segments', type=int, help='Segments per arc / circle')
    parser.add_argument('--spline-segments', type=int, help='Segments per spline')
    parser.add_argument('--tolerance', type=float, help='Endpoint join tolerance [mm]')
    parser.add_argument('--max-edge-length', type=float, help='Longest polygon edge [mm]')
    parser.add_argument('--allow-rotations', type=parse_bool, metavar='BOOL',
                        help='Allow 0/90/180/270 rotations (default: true)')
    parser.add_argument('--name', dest='problem_name', help='Problem name in the JSON')
    parser.add_argument('--split-parts', action='store_true', default=None,
                        help='Each group of nearby contours becomes its own item')
    parser.add_argument('--hole-detection', choices=HOLE_DETECTION_MODES,
                        help='Hole detection: bounding box containment or ring winding')
    parser.add_argument('--config', help='JSON settings file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv: List[str] = None) -> int:
    """Entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT
    )

    try:
        validate_config()
        config = load_config(args.config) if args.config else {}
        settings = create_settings_from_config(
            config,
            strip_height=args.strip_height,
            spacing=args.spacing,
            arc_segments=args.arc_segments,
            spline_segments=args.spline_segments,
            tolerance=args.tolerance,
            max_edge_length=args.max_edge_length,
            allow_rotations=args.allow_rotations,
            problem_name=args.problem_name,
            split_parts=args.split_parts,
            hole_detection=args.hole_detection
        )
        inputs = read_inputs(args.input)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = convert_dxf_to_json(inputs, settings)

    for error in result.errors:
        print(f"ERROR {error}", file=sys.stderr)
    for warning in result.warnings:
        print(f"WARNING {warning}", file=sys.stderr)

    if not result.success:
        print(f"Conversion failed: {result.message}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(result.json_string, encoding='utf-8')
        logger.info(f"Saved {args.output}")
    else:
        print(result.json_string)

    print(result.message, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
