"""
Load Errors
===========

Failures while turning a shape or graph file into a solvable structure.
Each carries a reason tag so callers can report it without string matching.
No partially loaded structure is ever returned alongside one of these.
"""

FILE_OPEN = "file_open"
INVALID_FORMAT = "invalid_format"
TESSELLATION = "tessellation"


class LoadError(ValueError):
    """Base class: `reason` is one of FILE_OPEN, INVALID_FORMAT, TESSELLATION."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class ShapeLoadError(LoadError):
    """Shape file could not be read or parsed."""


class TessellationError(ShapeLoadError):
    """Basis vectors make images overlap, or leave the padded shape uncovered."""

    def __init__(self, message: str):
        super().__init__(TESSELLATION, message)


class GraphLoadError(LoadError):
    """Graph file could not be read or parsed."""
