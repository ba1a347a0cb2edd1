"""
LATTICE_CODES - Covering codes on lattices and graphs
=====================================================

Exact search for detector placements (dominating, locating, identifying
and fault-tolerant codes) on periodic lattices and finite graphs, plus a
discharging engine that certifies density lower bounds.

Structure:
    spec/       - Constants, goals, load errors
    operators/  - Topologies (neighbour enumeration), code-class policies, modes
    builders/   - Torus, tiled shapes, finite graphs, printable geometry
    analysis/   - Torus / tiling / graph solvers, discharging lower bound
    cli         - `lattice-codes rect | geo | finite | theo`

Requirements:
    Python >= 3.9
    numpy >= 1.20
    structlog >= 21.5
"""

import sys

# Python version check
if sys.version_info < (3, 9):
    raise ImportError(f"lattice_codes requires Python >= 3.9, got {sys.version}")

# numpy version check
import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"lattice_codes requires numpy >= 1.20, got {np.__version__}")

__version__ = "0.1.0"

from . import spec
from . import operators
from . import builders
from . import analysis
