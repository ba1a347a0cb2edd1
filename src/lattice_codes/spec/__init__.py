"""Constants, value types and load errors - no dependencies on other layers."""

from .constants import (
    SHARE_LCM,
    BASIS_WINDOW,
    MIN_TORUS_SIDE,
)
from .structures import Goal, Position, reduced_fraction
from .errors import (
    LoadError,
    ShapeLoadError,
    TessellationError,
    GraphLoadError,
    FILE_OPEN,
    INVALID_FORMAT,
    TESSELLATION,
)
