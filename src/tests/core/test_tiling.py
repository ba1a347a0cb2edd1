"""
Tiled Shape Tests
=================

Shape-file parsing, representative maps, and tessellation failures.

Run: python -m pytest tests/core/test_tiling.py -v
"""

import pytest

from lattice_codes.builders import TiledShape, parse_shape, load_shape, Geometry
from lattice_codes.spec import ShapeLoadError, TessellationError, FILE_OPEN, INVALID_FORMAT, TESSELLATION

SQUARE3 = "3 0 0 3\nx x x\nx x x\nx x x\n"


# =============================================================================
# G1: Construction
# =============================================================================

def test_square_shape():
    """G1.1: 3x3 square tiled by (3,0),(0,3)."""
    tiled = parse_shape(SQUARE3)
    assert tiled.size == 9
    assert tiled.shape[0] == (0, 0) and tiled.shape[-1] == (2, 2)
    assert tiled.interior == [(1, 1)]
    assert tiled.first_per_row == {(0, 0), (1, 0), (2, 0)}
    assert len(tiled.padding) == 25


def test_representatives_wrap():
    """G1.2: padded positions map back by basis translation."""
    tiled = parse_shape(SQUARE3)
    assert tiled.representative((-1, -1)) == (2, 2)
    assert tiled.representative((3, 1)) == (0, 1)
    assert tiled.representative((-2, 4)) == (1, 1)

    tiled.detectors.add((2, 2))
    assert tiled.is_detector((-1, -1))
    assert tiled.is_detector((2, -1))
    assert not tiled.is_detector((0, 0))


def test_normalised_and_holes():
    """G1.3: "." tokens are holes; coordinates start at 0."""
    tiled = parse_shape("3 0 0 1\n. x\n. x\n. x\n")
    assert tiled.shape == [(0, 0), (1, 0), (2, 0)]


def test_render():
    """G1.4: geometry, basis and size lines."""
    tiled = TiledShape([(5, 5), (5, 6), (6, 5), (6, 6)], (2, 0), (0, 2))
    tiled.detectors.add((0, 0))
    assert str(tiled) == "1 0 \n0 0 \n\nbasis: (2, 0) (0, 2)\nsize: 4\n"


def test_geometry_gaps():
    """G1.5: missing columns render as two spaces, missing rows as blank lines."""
    geo = Geometry([(0, 0), (0, 2), (2, 1)], [(0, 2)])
    assert str(geo) == "0   1 \n\n  0 \n"


# =============================================================================
# G2: Failures
# =============================================================================

def test_overlap():
    """G2.1: basis shorter than the shape makes tiles overlap."""
    with pytest.raises(TessellationError, match="overlap") as exc:
        parse_shape("1 0 0 3\nx x x\nx x x\nx x x\n")
    assert exc.value.reason == TESSELLATION


def test_not_dense():
    """G2.2: basis longer than the shape leaves gaps."""
    with pytest.raises(TessellationError, match="not dense"):
        parse_shape("3 0 0 4\nx x x\nx x x\nx x x\n")


@pytest.mark.parametrize("text,match", [
    ("", "4 tessellation arguments"),
    ("3 0 0\nx\n", "4 tessellation arguments"),
    ("a 0 0 3\nx\n", "as integer"),
    ("1 0 0 1\nxx\n", "length 1"),
    ("1 0 0 1\n. .\n", "empty"),
])
def test_invalid_format(text, match):
    """G2.3: malformed shape files."""
    with pytest.raises(ShapeLoadError, match=match) as exc:
        parse_shape(text)
    assert exc.value.reason == INVALID_FORMAT


def test_load_missing_file(tmp_path):
    """G2.4: unreadable file is FILE_OPEN."""
    with pytest.raises(ShapeLoadError) as exc:
        load_shape(tmp_path / "nope.txt")
    assert exc.value.reason == FILE_OPEN


def test_load_file(tmp_path):
    """G2.5: load_shape reads the same format from disk."""
    path = tmp_path / "square.txt"
    path.write_text(SQUARE3)
    assert load_shape(path).size == 9
