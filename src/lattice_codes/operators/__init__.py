"""Operators - neighbour enumeration and code-class policies."""

from .adjacency import (
    Topology,
    get_topology,
    FAMILIES,
    KING,
    GRID,
    TRI,
    HEX,
    TMB,
)

from .codesets import (
    Policy,
    CodeSet,
    DominatingSet,
    ExactDominatingSet,
    LocatingDominatingSet,
    IdentifyingSet,
    RedundantSet,
    DetectionSet,
    ErrorCorrectingSet,
)

from .modes import Mode, MODE_TAGS, UnknownModeError, parse_mode, parse_graph_mode
