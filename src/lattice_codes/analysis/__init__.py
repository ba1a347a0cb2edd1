"""
Analysis - the search engines.

Each engine is a standalone entry point; none of them calls another.
Layering:
    analysis -> builders -> operators -> spec

Includes:
- torus_solver: exact-count placement on a rectangular torus
- tiling_solver: exact-count placement on a tiled shape
- graph_solver: exact-count placement on a finite graph
- discharging: certified density lower bound on the infinite lattice
"""

from .torus_solver import TorusSolver, solve_torus
from .tiling_solver import TilingSolver
from .graph_solver import GraphSolver
from .discharging import LowerBound, LowerBoundSearcher, lower_bound_from_share
