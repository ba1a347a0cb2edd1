"""
Tessellation builders - turn dimensions, shape files and graph files into
finite structures the solvers can search over.

EXPORTS:
- RectangularTorus: rows x cols torus with boundary phase
- TiledShape, parse_shape, load_shape: periodic tiling of a finite shape
- FiniteGraph, parse_graph, load_graph: explicit simple graphs
- Geometry: normalised printable cell set
"""

from .torus import RectangularTorus
from .tiling import TiledShape, parse_shape, load_shape
from .graph import FiniteGraph, parse_graph, load_graph
from .geometry import Geometry
