"""
Tiled Shapes
============

A finite shape that tiles the plane by translation along two basis vectors.

CONSTRUCTION:
    For every shape cell `to` and every i, j in -W..=W (W = BASIS_WINDOW):
        from = to + i*basis_a + j*basis_b
    - if two images coincide, the tiles overlap          -> TessellationError
    - images inside the padded region map back to `to`
    - if some padded position has no image, tiles leave gaps -> TessellationError

    Padding is the shape plus two king rings. One ring is where the final
    check walks; the second ring holds the neighbours of those positions.

SHAPE FILE:
    line 1:   ax ay bx by          (two basis vectors, integers)
    line 2..: single-character tokens separated by whitespace,
              "." = no cell, anything else = cell at (line - 2, token index)

    Coordinates are shifted so the minimum row and column are 0.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Set, Tuple

import numpy as np

from ..log import get_logger
from ..operators.adjacency import get_topology, KING
from ..spec.constants import BASIS_WINDOW
from ..spec.errors import ShapeLoadError, TessellationError, FILE_OPEN, INVALID_FORMAT
from ..spec.structures import Position
from .geometry import Geometry

logger = get_logger("lattice_codes.builders.tiling")

_KING = get_topology(KING, closed=False)


def _with_ring(cells: Iterable[Position]) -> Set[Position]:
    """cells plus every open king neighbour of a cell."""
    out = set(cells)
    for p in list(out):
        out.update(_KING.neighbors(p))
    return out


class TiledShape:
    """
    Shape + basis + representative map, validated on construction.

    Attributes:
        shape: sorted shape cells (normalised)
        interior: shape cells whose whole king ring is in the shape
        padding: sorted shape + one king ring (positions checked at the end)
        first_per_row: lowest-column cell of each row
        rep_map: padded position -> the shape cell it is a copy of
        detectors: current detector assignment (subset of shape)
    """

    def __init__(self, cells: Iterable[Position], basis_a: Tuple[int, int], basis_b: Tuple[int, int]):
        geo = Geometry(cells)
        if not geo.shape:
            raise ShapeLoadError(INVALID_FORMAT, "shape is empty")

        self.shape: List[Position] = geo.shape
        self.basis_a = tuple(basis_a)
        self.basis_b = tuple(basis_b)
        shape_set = set(self.shape)

        boundary = {p for p in self.shape if any(q not in shape_set for q in _KING.neighbors(p))}
        self.interior: List[Position] = [p for p in self.shape if p not in boundary]

        self.first_per_row: Set[Position] = set()
        last_row = None
        for p in self.shape:
            if p[0] != last_row:
                last_row = p[0]
                self.first_per_row.add(p)

        padding = _with_ring(self.shape)
        self.padding: List[Position] = sorted(padding)
        extra_padding = _with_ring(padding)

        self.rep_map: Dict[Position, Position] = self._build_rep_map(extra_padding)
        self.detectors: Set[Position] = set()

    def _build_rep_map(self, region: Set[Position]) -> Dict[Position, Position]:
        window = np.arange(-BASIS_WINDOW, BASIS_WINDOW + 1)
        ii, jj = np.meshgrid(window, window, indexing="ij")
        shifts = ii.reshape(-1, 1) * np.array(self.basis_a) + jj.reshape(-1, 1) * np.array(self.basis_b)

        seen: Set[Position] = set()
        rep_map: Dict[Position, Position] = {}
        for to in self.shape:
            for r, c in (shifts + np.array(to)).tolist():
                image = (r, c)
                if image in seen:
                    raise TessellationError("tessellation resulted in overlap")
                seen.add(image)
                if image in region:
                    rep_map[image] = to

        for pos in region:
            if pos not in rep_map:
                raise TessellationError("tessellation is not dense")
        return rep_map

    @property
    def size(self) -> int:
        return len(self.shape)

    def representative(self, pos: Position) -> Position:
        return self.rep_map[pos]

    def is_detector(self, pos: Position) -> bool:
        """Detector status of any padded position, via its representative."""
        return self.rep_map[pos] in self.detectors

    def __str__(self) -> str:
        return (
            f"{Geometry(self.shape, self.detectors)}\n"
            f"basis: {self.basis_a} {self.basis_b}\n"
            f"size: {self.size}\n"
        )


def parse_shape(text: str) -> TiledShape:
    """Build a TiledShape from shape-file text. Raises ShapeLoadError."""
    lines = text.splitlines()
    header = lines[0].split() if lines else []
    if len(header) != 4:
        raise ShapeLoadError(INVALID_FORMAT, "expected 4 tessellation arguments as top line of file")
    try:
        ax, ay, bx, by = (int(x) for x in header)
    except ValueError:
        raise ShapeLoadError(INVALID_FORMAT, "failed to parse a tessellation arg as integer")

    cells = []
    for row, line in enumerate(lines[1:]):
        for col, item in enumerate(line.split()):
            if len(item) != 1:
                raise ShapeLoadError(INVALID_FORMAT, "expected geometry element to be length 1")
            if item != ".":
                cells.append((row, col))
    if not cells:
        raise ShapeLoadError(INVALID_FORMAT, "shape is empty")

    return TiledShape(cells, (ax, ay), (bx, by))


def load_shape(path) -> TiledShape:
    """Read and build a shape file. Raises ShapeLoadError (incl. TessellationError)."""
    try:
        text = Path(path).read_text()
    except (OSError, UnicodeDecodeError):
        raise ShapeLoadError(FILE_OPEN, f"failed to open tessellation file {path}")

    tiled = parse_shape(text)
    logger.debug(
        "tiling_loaded",
        path=str(path),
        cells=tiled.size,
        basis_a=tiled.basis_a,
        basis_b=tiled.basis_b,
    )
    return tiled
