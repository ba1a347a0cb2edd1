"""
Finite-Graph Solver
===================

Include/exclude backtracking over vertex indices for a detector set of an
exact size. Only count pruning (a branch stops once the vertices left
cannot supply the missing detectors): general graphs have no row structure
to validate early, so the policy is checked on complete assignments only.

Exponential in the vertex count - for small graphs.
"""

import sys
from typing import List

from ..builders.graph import FiniteGraph
from ..log import get_logger
from ..operators.codesets import Policy

logger = get_logger("lattice_codes.analysis.graph_solver")


class GraphSolver:
    """Exact-size search on a FiniteGraph using open neighbourhoods."""

    def __init__(self, graph: FiniteGraph, policy: Policy):
        self.graph = graph
        self.policy = policy
        self._codes = policy.new_codes()
        self._needed = 0

    def code(self, v: int) -> List[int]:
        detectors = self.graph.detectors
        return [x for x in self.graph.adj[v] if x in detectors]

    def is_valid(self) -> bool:
        codes = self._codes
        codes.reset()
        detectors = self.graph.detectors
        for v in range(len(self.graph)):
            if not codes.commit(v in detectors, self.code(v)):
                return False
        return True

    def _search(self, v: int) -> bool:
        detectors = self.graph.detectors
        if self._needed == len(detectors):
            return self.is_valid()
        if v + (self._needed - len(detectors)) > len(self.graph):
            return False

        detectors.add(v)
        if self._search(v + 1):
            return True
        detectors.remove(v)

        return self._search(v + 1)

    def find_solution(self, count: int) -> bool:
        """
        Look for a valid detector set of exactly `count` vertices.

        Returns:
            True on success (graph.detectors holds the witness), else False
        """
        if count < 0 or count > len(self.graph):
            raise ValueError(f"count must be in 0..={len(self.graph)}, got {count}")

        self.graph.detectors.clear()
        self._needed = count

        depth = len(self.graph) + 100
        if sys.getrecursionlimit() < depth:
            sys.setrecursionlimit(depth)

        logger.info("graph_search_started", vertices=len(self.graph), policy=self.policy.value, needed=count)
        found = self._search(0)
        logger.info("graph_search_finished", found=found)
        return found
