"""
Wspólne fixtures testów - pliki DXF generowane w pamięci przez ezdxf.
"""

import io

import ezdxf
import pytest

from nesting_input.config import ConversionSettings


def dxf_text(doc) -> str:
    """Zapisz dokument ezdxf do tekstu DXF"""
    stream = io.StringIO()
    doc.write(stream)
    return stream.getvalue()


def build_dxf(*builders) -> str:
    """Nowy dokument; każdy builder dostaje modelspace"""
    doc = ezdxf.new()
    msp = doc.modelspace()
    for build in builders:
        build(msp)
    return dxf_text(doc)


def add_square(msp, x=0.0, y=0.0, size=100.0, layer="0"):
    msp.add_lwpolyline(
        [(x, y), (x + size, y), (x + size, y + size), (x, y + size)],
        close=True,
        dxfattribs={"layer": layer},
    )


@pytest.fixture
def make_dxf():
    """build_dxf dla testów, które składają własne rysunki"""
    return build_dxf


@pytest.fixture
def settings():
    return ConversionSettings(
        strip_height=6000,
        arc_segments=32,
        spline_segments=100,
        tolerance=0.1,
        auto_close=True,
        allow_rotations=True,
        problem_name="test_job",
        max_edge_length=20.0,
        hole_detection="containment",
        split_parts=False,
    )


@pytest.fixture
def triangle_dxf():
    """Trójkąt z trzech LINE (boki <= 20 mm)"""
    def build(msp):
        msp.add_line((0, 0), (10, 0))
        msp.add_line((10, 0), (5, 8))
        msp.add_line((5, 8), (0, 0))
    return build_dxf(build)


@pytest.fixture
def circle_dxf():
    return build_dxf(lambda msp: msp.add_circle((50, 50), radius=10))


@pytest.fixture
def square_dxf():
    return build_dxf(add_square)


@pytest.fixture
def text_only_dxf():
    return build_dxf(lambda msp: msp.add_text("NO GEOMETRY"))


@pytest.fixture
def plate_with_hole_dxf():
    """Płyta 100x100 z otworem 20x20 w środku"""
    def build(msp):
        add_square(msp, 0, 0, 100)
        add_square(msp, 40, 40, 20)
    return build_dxf(build)


@pytest.fixture
def near_duplicate_vertex_dxf():
    """Zamknięta LWPOLYLINE z odcinkiem 0.0001 mm"""
    def build(msp):
        msp.add_lwpolyline(
            [(0, 0), (10, 0), (10.0001, 0), (10, 10), (0, 10)],
            close=True,
        )
    return build_dxf(build)
