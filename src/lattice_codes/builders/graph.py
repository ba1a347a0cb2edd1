"""
Finite Graphs
=============

Explicit undirected simple graphs, loaded from an edge-list file.

GRAPH FILE:
    whitespace-separated tokens "a:b", each an undirected edge a -- b.
    Labels are arbitrary non-empty strings without ':'.
    Repeated edges collapse; reflexive edges (a:a) are rejected.

Vertices are numbered in order of first appearance. Adjacency lists are
sorted and duplicate free, so codes come out in canonical order.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Set

from ..log import get_logger
from ..spec.errors import GraphLoadError, FILE_OPEN, INVALID_FORMAT

logger = get_logger("lattice_codes.builders.graph")


class FiniteGraph:
    """
    Attributes:
        labels: vertex index -> label
        adj: vertex index -> sorted neighbour indices
        detectors: current detector assignment (vertex indices)
    """

    def __init__(self, labels: List[str], adj: List[List[int]]):
        if len(labels) != len(adj):
            raise ValueError(f"Got {len(labels)} labels but {len(adj)} adjacency lists")
        self.labels = labels
        self.adj = adj
        self.detectors: Set[int] = set()

    @classmethod
    def from_edges(cls, edges: Iterable[tuple]) -> "FiniteGraph":
        """Build from (label_a, label_b) pairs. Raises GraphLoadError on a loop."""
        index: Dict[str, int] = {}
        labels: List[str] = []
        adj_sets: List[Set[int]] = []

        def vertex(label: str) -> int:
            if label not in index:
                index[label] = len(labels)
                labels.append(label)
                adj_sets.append(set())
            return index[label]

        for a, b in edges:
            if a == b:
                raise GraphLoadError(INVALID_FORMAT, "encountered reflexive connection")
            ia, ib = vertex(a), vertex(b)
            adj_sets[ia].add(ib)
            adj_sets[ib].add(ia)

        return cls(labels, [sorted(s) for s in adj_sets])

    def __len__(self) -> int:
        return len(self.labels)

    def solution(self) -> List[str]:
        """Sorted labels of the current detectors."""
        return sorted(self.labels[v] for v in self.detectors)


def parse_graph(text: str) -> FiniteGraph:
    """Build a FiniteGraph from edge-list text. Raises GraphLoadError."""
    edges = []
    for tok in text.split():
        if ":" not in tok:
            raise GraphLoadError(INVALID_FORMAT, "encountered token without a ':' separator")
        a, _, b = tok.partition(":")
        if ":" in b:
            raise GraphLoadError(INVALID_FORMAT, "encountered token with multiple ':' separators")
        if not a or not b:
            raise GraphLoadError(INVALID_FORMAT, "encountered token with an empty vertex label")
        edges.append((a, b))
    return FiniteGraph.from_edges(edges)


def load_graph(path) -> FiniteGraph:
    """Read and build a graph file. Raises GraphLoadError."""
    try:
        text = Path(path).read_text()
    except (OSError, UnicodeDecodeError):
        raise GraphLoadError(FILE_OPEN, f"failed to open graph file {path}")

    graph = parse_graph(text)
    logger.debug("graph_loaded", path=str(path), vertices=len(graph))
    return graph
