# cube_core/constants.py
"""
Sparse Cube Constants

This module defines constants used throughout the cube engine:

LAYER 1: Encoding Constants
- DEFAULT_DATE_FORMAT / DEFAULT_DATETIME_FORMAT: strptime formats for date codices
- HASH_MASK: 32-bit mask applied by Value.hash_code

LAYER 2: Position Constants
- DIMENSION_NAMES: display names for the first five dimensions

LAYER 3: Operator Constants
- DEFAULT_SEPARATOR: field separator for short strings
- DEFAULT_MELT_SEPARATOR: separator placed between melted coordinates
- DEFAULT_HASH_BASE: modulus used by hash partitioners and samplers
- GRADIENT_RANGE_SEPARATOR: joins the from/to labels of derived ranges
"""


# =============================================================================
# LAYER 1: Encoding Constants
# =============================================================================

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

HASH_MASK = 0xFFFFFFFF          # Java-style 32-bit wrap-around


# =============================================================================
# LAYER 2: Position Constants
# =============================================================================

DIMENSION_NAMES = ("First", "Second", "Third", "Fourth", "Fifth")


# =============================================================================
# LAYER 3: Operator Constants
# =============================================================================

DEFAULT_SEPARATOR = "|"
DEFAULT_MELT_SEPARATOR = "."
DEFAULT_HASH_BASE = 100

# Derived range label: "<from>.to.<to>"
GRADIENT_RANGE_SEPARATOR = ".to."
