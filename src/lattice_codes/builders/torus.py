"""
Rectangular Torus
=================

rows x cols cells with PERIODIC boundary, standing in for an infinite lattice.

GEOMETRY:
    Cell (r, c) for 0 <= r < rows, 0 <= c < cols, index r*cols + c.
    Any integer position maps to one of these cells.

PHASE (boundary shear):
    Neighbour shape depends on the parity class of a position (hex, tmb), so
    a plain modular wrap can glue cells of different classes together. The
    torus therefore allows a sheared wrap:

        crossing the top/bottom edge shifts the column by phase[0]
        crossing the left/right edge shifts the row by phase[1]

    The shift is applied first, then the modular reduction. Interior cells
    are unaffected by the phase.

PHASE SET:
    (0, 0), then (x, 0) for x in 1..=(rows+1)//2, then (0, y) for
    y in 1..=(cols+1)//2. Searched in this order; first valid one wins.
"""

from typing import List, Tuple

import numpy as np

from ..spec.constants import MIN_TORUS_SIDE
from ..spec.structures import Position


class RectangularTorus:
    """
    Torus tessellation plus its detector assignment.

    Attributes:
        rows, cols: dimensions (both >= 2)
        detectors: (rows*cols,) bool array, True where a detector sits
        phase: boundary shear currently in effect
    """

    def __init__(self, rows: int, cols: int):
        if rows < MIN_TORUS_SIDE or cols < MIN_TORUS_SIDE:
            raise ValueError(
                f"Torus requires rows, cols >= {MIN_TORUS_SIDE}, got {rows}x{cols}. "
                f"1x1, 1xn and nx1 tori cannot be wrapped without self-adjacency."
            )
        self.rows = rows
        self.cols = cols
        self.detectors = np.zeros(rows * cols, dtype=bool)
        self.phase: Tuple[int, int] = (0, 0)

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def phases(self) -> List[Tuple[int, int]]:
        """Candidate boundary phases, in search order."""
        max_x = (self.rows + 1) // 2
        max_y = (self.cols + 1) // 2
        return [(0, 0)] + [(x, 0) for x in range(1, max_x + 1)] + [(0, y) for y in range(1, max_y + 1)]

    def reduce(self, row: int, col: int) -> Position:
        """Canonical interior cell for any integer position, under the current phase."""
        if row < 0:
            col_fix = col - self.phase[0]
        elif row >= self.rows:
            col_fix = col + self.phase[0]
        else:
            col_fix = col

        if col < 0:
            row_fix = row - self.phase[1]
        elif col >= self.cols:
            row_fix = row + self.phase[1]
        else:
            row_fix = row

        return row_fix % self.rows, col_fix % self.cols

    def index(self, row: int, col: int) -> int:
        """Flat index of reduce(row, col)."""
        r, c = self.reduce(row, col)
        return r * self.cols + c

    def is_detector(self, pos: Position) -> bool:
        return bool(self.detectors[self.index(pos[0], pos[1])])

    def clear(self) -> None:
        self.detectors[:] = False
        self.phase = (0, 0)

    def grid(self) -> np.ndarray:
        """(rows, cols) 0/1 view of the assignment."""
        return self.detectors.reshape(self.rows, self.cols).astype(int)

    def __str__(self) -> str:
        lines = ["".join(f"{v} " for v in row) for row in self.grid()]
        lines.append(f"phase: {self.phase}")
        return "\n".join(lines) + "\n"
