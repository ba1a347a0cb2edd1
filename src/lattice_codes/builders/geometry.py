"""
Printable Geometry
==================

A finite cell set with a detector subset, shifted so the smallest row and
the smallest column are both 0. Used to show tiled-shape solutions and the
discharging engine's problem configurations.
"""

from typing import Iterable, Set

from ..spec.structures import Position


class Geometry:
    """
    Shape + detectors, normalised for printing.

    Rendering: one text line per row, "1 " for a detector cell, "0 " for any
    other cell, two spaces per missing column, blank lines for missing rows.
    """

    def __init__(self, shape: Iterable[Position], detectors: Iterable[Position] = ()):
        shape = list(shape)
        if shape:
            min_row = min(p[0] for p in shape)
            min_col = min(p[1] for p in shape)
        else:
            min_row = min_col = 0
        self.shape = sorted((r - min_row, c - min_col) for r, c in shape)
        self.detectors: Set[Position] = {(r - min_row, c - min_col) for r, c in detectors}

    def __str__(self) -> str:
        out = []
        working_row = None
        working_col = 0
        for row, col in self.shape:
            if row != working_row:
                if working_row is not None:
                    out.append("\n" * (row - working_row))
                working_row = row
                working_col = 0
            out.append("  " * (col - working_col))
            working_col = col + 1
            out.append("1 " if (row, col) in self.detectors else "0 ")
        out.append("\n")
        return "".join(out)
