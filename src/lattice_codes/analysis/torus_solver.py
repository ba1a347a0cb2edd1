"""
Rectangular Torus Solver
========================

Exact-count backtracking placement on a RectangularTorus.

SEARCH:
    Cells in row-major order; each is first tried as a detector, then not.
    - prune when the cells left cannot supply the missing detectors
    - at the first cell of row R, re-check the strict interior rows 1..R-2
      (their codes are final once row R-1 is assigned; phase independent)
    - on reaching the target count: full interior check, then each boundary
      phase in order until one validates the whole extra ring

BOUNDARY RING:
    rows {-1, 0, rows-1, rows} over cols -1..=cols, and rows 1..rows-2 over
    cols {-1, 0, cols-1, cols}. Codes are lists of UNREDUCED positions, so
    two ring positions that reduce to the same cell still have distinct
    codes, exactly as in the infinite lattice.

STATE:
    The torus' detector array is mutated in place and restored on backtrack.
    On success it is left holding the witness, with `torus.phase` set to the
    accepted phase.
"""

import sys
from typing import Iterator, List, Optional

from ..builders.torus import RectangularTorus
from ..log import get_logger
from ..operators.modes import Mode
from ..spec.structures import Goal, Position

logger = get_logger("lattice_codes.analysis.torus_solver")


class TorusSolver:
    """Searches detector placements of an exact size on one torus for one mode."""

    def __init__(self, torus: RectangularTorus, mode: Mode):
        self.torus = torus
        self.mode = mode
        self.topology = mode.topology
        self._codes = mode.policy.new_codes()
        self._interior_codes = mode.policy.new_codes()
        self._phases = torus.phases()
        self._needed = 0
        self._placed = 0

    def code(self, pos: Position) -> List[Position]:
        """Detector neighbours of pos (unreduced positions)."""
        torus = self.torus
        return [x for x in self.topology.neighbors(pos) if torus.is_detector(x)]

    def _interior_valid_up_to(self, row: int) -> bool:
        codes = self._interior_codes
        codes.reset()
        for r in range(1, row - 1):
            for c in range(1, self.torus.cols - 1):
                pos = (r, c)
                if not codes.commit(self.torus.is_detector(pos), self.code(pos)):
                    return False
        return True

    def _boundary_positions(self) -> Iterator[Position]:
        rows, cols = self.torus.rows, self.torus.cols
        for r in (-1, 0, rows - 1, rows):
            for c in range(-1, cols + 1):
                yield r, c
        for r in range(1, rows - 1):
            for c in (-1, 0, cols - 1, cols):
                yield r, c

    def _boundary_valid(self) -> bool:
        """Boundary ring under the current phase; interior codes must be committed."""
        self._codes.reset()
        for pos in self._boundary_positions():
            is_det = self.torus.is_detector(pos)
            code = self.code(pos)
            if not self._interior_codes.compatible(is_det, code) or not self._codes.commit(is_det, code):
                return False
        return True

    def is_valid(self) -> bool:
        """Full check of the current assignment; on success torus.phase is the witness phase."""
        if not self._interior_valid_up_to(self.torus.rows):
            return False
        for phase in self._phases:
            self.torus.phase = phase
            if self._boundary_valid():
                logger.debug("torus_phase_accepted", phase=phase)
                return True
        return False

    def _search(self, pos: int) -> bool:
        if self._needed == self._placed:
            return self.is_valid()
        if pos + (self._needed - self._placed) > self.torus.size:
            return False

        row, col = divmod(pos, self.torus.cols)
        if col == 0 and not self._interior_valid_up_to(row):
            return False

        self.torus.detectors[pos] = True
        self._placed += 1
        if self._search(pos + 1):
            return True
        self._placed -= 1
        self.torus.detectors[pos] = False

        return self._search(pos + 1)

    def try_satisfy(self, goal: Goal) -> Optional[int]:
        """
        Find a valid placement of exactly goal.value(rows*cols) detectors.

        Returns:
            the detector count on success (torus holds the witness), else None
        """
        if goal.is_exact and goal.count > self.torus.size:
            raise ValueError(f"exact count must be in 0..={self.torus.size}, got {goal.count}")

        self.torus.clear()
        self._needed = goal.value(self.torus.size)
        self._placed = 0

        # one frame per cell, plus headroom
        depth = self.torus.size + 100
        if sys.getrecursionlimit() < depth:
            sys.setrecursionlimit(depth)

        logger.info(
            "torus_search_started",
            rows=self.torus.rows,
            cols=self.torus.cols,
            mode=str(self.mode),
            needed=self._needed,
        )
        found = self._search(0)
        logger.info("torus_search_finished", found=found, phase=self.torus.phase if found else None)
        return self._needed if found else None


def solve_torus(rows: int, cols: int, mode: Mode, goal: Goal):
    """Convenience wrapper: (count or None, torus holding the witness)."""
    torus = RectangularTorus(rows, cols)
    return TorusSolver(torus, mode).try_satisfy(goal), torus
