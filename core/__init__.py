#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core Module
===========
Wspólne komponenty: wyjątki i przetwarzanie geometrii DXF.
"""

# Exceptions
from core.exceptions import (
    ConverterError,
    ParsingError,
    ParseError,
    ValidationError,
    ContourError,
    PolygonError,
    SchemaError,
)


__all__ = [
    'ConverterError',
    'ParsingError',
    'ParseError',
    'ValidationError',
    'ContourError',
    'PolygonError',
    'SchemaError',
]
