"""
Sparsecube - labeled sparse N-dimensional matrix algebra

Cells are addressed by typed coordinate tuples instead of dense indices, so
matrices may be arbitrarily sparse and of any rank. One vocabulary of
operators (slice, reduce, derive, pairwise, squash, melt, partition, join,
fill, transform, ...) works for every rank, with pluggable strategies for
the computation itself.
"""

__version__ = "0.1.0"

from cube_core import (
    CubeError,
    InvalidDimension,
    RankMismatch,
    InvalidContent,
    UnsupportedStrategy,
    CubeSettings,
    get_settings,
    set_settings,
    configure_logging,
    Type,
    ContinuousSchema,
    DiscreteSchema,
    NominalSchema,
    OrdinalSchema,
    DateSchema,
    Content,
    DateCodex,
    Dimension,
    First,
    Second,
    Third,
    Fourth,
    Fifth,
    Position,
    Over,
    Along,
    Cell,
    Pipe,
    ValuePipe,
    Names,
    Matrix,
    Partitions,
)
from .statistics import correlation, mutual_information, gradient_features

__all__ = [
    "CubeError",
    "InvalidDimension",
    "RankMismatch",
    "InvalidContent",
    "UnsupportedStrategy",
    "CubeSettings",
    "get_settings",
    "set_settings",
    "configure_logging",
    "Type",
    "ContinuousSchema",
    "DiscreteSchema",
    "NominalSchema",
    "OrdinalSchema",
    "DateSchema",
    "Content",
    "DateCodex",
    "Dimension",
    "First",
    "Second",
    "Third",
    "Fourth",
    "Fifth",
    "Position",
    "Over",
    "Along",
    "Cell",
    "Pipe",
    "ValuePipe",
    "Names",
    "Matrix",
    "Partitions",
    "correlation",
    "mutual_information",
    "gradient_features",
]
