"""
Tiled-Shape Solver
==================

Exact-count backtracking placement on a TiledShape, valid for the whole
periodic tiling.

Same search as the torus solver, with the representative map in place of
modular arithmetic:
    - cells in sorted (row, col) order
    - exact-budget pruning
    - at the first cell of each row, re-check interior cells of the rows
      at least two above it
    - at the target count, check every position of the one-ring padding
"""

import sys
from typing import List, Optional

from ..builders.tiling import TiledShape
from ..log import get_logger
from ..operators.modes import Mode
from ..spec.structures import Goal, Position

logger = get_logger("lattice_codes.analysis.tiling_solver")


class TilingSolver:
    """Searches detector placements of an exact size on one tiled shape for one mode."""

    def __init__(self, tiled: TiledShape, mode: Mode):
        self.tiled = tiled
        self.mode = mode
        self.topology = mode.topology
        self._codes = mode.policy.new_codes()
        self._needed = 0

    def code(self, pos: Position) -> List[Position]:
        tiled = self.tiled
        return [x for x in self.topology.neighbors(pos) if tiled.is_detector(x)]

    def _interior_valid_up_to(self, row: int) -> bool:
        codes = self._codes
        codes.reset()
        for pos in self.tiled.interior:
            if pos[0] >= row - 1:
                break
            if not codes.commit(self.tiled.is_detector(pos), self.code(pos)):
                return False
        return True

    def is_valid(self) -> bool:
        codes = self._codes
        codes.reset()
        for pos in self.tiled.padding:
            if not codes.commit(self.tiled.is_detector(pos), self.code(pos)):
                return False
        return True

    def _search(self, i: int) -> bool:
        detectors = self.tiled.detectors
        if self._needed == len(detectors):
            return self.is_valid()

        shape = self.tiled.shape
        if i >= len(shape) or i + (self._needed - len(detectors)) > len(shape):
            return False

        p = shape[i]
        if p in self.tiled.first_per_row and not self._interior_valid_up_to(p[0]):
            return False

        detectors.add(p)
        if self._search(i + 1):
            return True
        detectors.remove(p)

        return self._search(i + 1)

    def try_satisfy(self, goal: Goal) -> Optional[int]:
        """Detector count on success (tiled.detectors holds the witness), else None."""
        if goal.is_exact and goal.count > self.tiled.size:
            raise ValueError(f"exact count must be in 0..={self.tiled.size}, got {goal.count}")

        self.tiled.detectors.clear()
        self._needed = goal.value(self.tiled.size)

        depth = self.tiled.size + 100
        if sys.getrecursionlimit() < depth:
            sys.setrecursionlimit(depth)

        logger.info("tiling_search_started", cells=self.tiled.size, mode=str(self.mode), needed=self._needed)
        found = self._search(0)
        logger.info("tiling_search_finished", found=found)
        return self._needed if found else None
