"""
Global constants for lattice_codes
==================================

All magic numbers in ONE place.
"""

# lcm(1..=9): every share term is 1/k with k <= 9 (king closed neighbourhood),
# so scaling a share by this makes it an integer up to float rounding.
SHARE_LCM = 2520

# Basis combinations i*a + j*b with i, j in -BASIS_WINDOW..=BASIS_WINDOW are
# tried when building the tiling representative map.
# NOTE: empirical, not derived. Large basis vectors may need a wider window.
BASIS_WINDOW = 2

# Smallest torus side supported (1xn has degenerate wraparound)
MIN_TORUS_SIDE = 2

# CLI exit codes
EXIT_OK = 0
EXIT_USAGE = 1
EXIT_TINY_DIMENSIONS = 3
EXIT_UNKNOWN_MODE = 4
EXIT_LOAD_FAILURE = 5
EXIT_INVALID_COUNT = 6
EXIT_INVALID_NUMBER = 7

# Logging defaults (overridable from the CLI)
DEFAULT_LOG_LEVEL = "warning"
LOG_FORMATS = ("console", "json")
