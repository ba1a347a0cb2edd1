"""
Adjacency Enumeration
=====================

Neighbour tables for the five periodic lattices, each open and closed.

CONTRACT:
    neighbors(pos) is sorted (lexicographic) and duplicate free.
    open.neighbors(pos) == closed.neighbors(pos) minus pos itself.

PARITY CLASSES:
    hex and tmb are translation periodic, but the neighbour SHAPE depends
    on the position: hex alternates with (r + c) mod 2, tmb with (r + c) mod 3.
    `classes` lists one representative position per class; the discharging
    engine uses them as its default centers.

All offsets are (d_row, d_col) and listed in sorted order, so adding them to
a position keeps the result sorted.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ..spec.structures import Position

KING = "king"
GRID = "grid"
TRI = "tri"
HEX = "hex"
TMB = "tmb"

FAMILIES = (KING, TRI, GRID, HEX, TMB)

_KING_CLOSED = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 0), (0, 1),
    (1, -1), (1, 0), (1, 1),
)
_GRID_CLOSED = ((-1, 0), (0, -1), (0, 0), (0, 1), (1, 0))
_TRI_CLOSED = ((-1, -1), (-1, 0), (0, -1), (0, 0), (0, 1), (1, 0), (1, 1))

# Per class: hex has an up-edge on even cells, a down-edge on odd cells
_HEX_CLOSED = (
    ((-1, 0), (0, -1), (0, 0), (0, 1)),
    ((0, -1), (0, 0), (0, 1), (1, 0)),
)

# tmb: one degree-6 class and two degree-3 classes
_TMB_CLOSED = (
    ((-1, -1), (-1, 0), (0, -1), (0, 0), (0, 1), (1, 0), (1, 1)),
    ((-1, 0), (0, -1), (0, 0), (1, 1)),
    ((-1, -1), (0, 0), (0, 1), (1, 0)),
)


def _single_class(row: int, col: int) -> int:
    return 0


def _hex_class(row: int, col: int) -> int:
    return (row + col) % 2


def _tmb_class(row: int, col: int) -> int:
    return (row + col) % 3


_TABLE: Dict[str, Tuple[Tuple[Tuple[Tuple[int, int], ...], ...], Callable[[int, int], int]]] = {
    KING: ((_KING_CLOSED,), _single_class),
    GRID: ((_GRID_CLOSED,), _single_class),
    TRI: ((_TRI_CLOSED,), _single_class),
    HEX: (_HEX_CLOSED, _hex_class),
    TMB: (_TMB_CLOSED, _tmb_class),
}


@dataclass(frozen=True)
class Topology:
    """
    One lattice in one variant (open or closed).

    Attributes:
        family: one of FAMILIES
        is_closed: True if a position is its own neighbour
        offsets: per parity class, the sorted neighbour offsets
        classes: one representative position per parity class
    """
    family: str
    is_closed: bool
    offsets: Tuple[Tuple[Tuple[int, int], ...], ...]
    classes: Tuple[Position, ...]
    classifier: Callable[[int, int], int]

    @property
    def name(self) -> str:
        return f"{'closed' if self.is_closed else 'open'}-{self.family}"

    def classify(self, pos: Position) -> int:
        return self.classifier(pos[0], pos[1])

    def neighbors(self, pos: Position) -> List[Position]:
        r, c = pos
        return [(r + dr, c + dc) for dr, dc in self.offsets[self.classifier(r, c)]]

    @property
    def open(self) -> "Topology":
        return get_topology(self.family, closed=False)

    @property
    def closed(self) -> "Topology":
        return get_topology(self.family, closed=True)

    def __repr__(self) -> str:
        return f"Topology({self.name})"


def _build(family: str, closed: bool) -> Topology:
    closed_offsets, classifier = _TABLE[family]
    if closed:
        offsets = closed_offsets
    else:
        offsets = tuple(tuple(o for o in per_class if o != (0, 0)) for per_class in closed_offsets)
    classes = tuple((0, k) for k in range(len(closed_offsets)))
    return Topology(family, closed, offsets, classes, classifier)


_TOPOLOGIES: Dict[Tuple[str, bool], Topology] = {
    (family, closed): _build(family, closed)
    for family in FAMILIES
    for closed in (False, True)
}


def get_topology(family: str, closed: bool) -> Topology:
    """Look up a topology; raises ValueError for an unknown family."""
    try:
        return _TOPOLOGIES[(family, closed)]
    except KeyError:
        raise ValueError(f"Unknown topology family: {family!r} (expected one of {FAMILIES})")
