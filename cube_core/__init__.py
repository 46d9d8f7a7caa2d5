"""
Cube Core - labeled sparse N-dimensional matrix engine.

This package provides the engine behind sparsecube:
- encoding: typed coordinate/content values and their codices
- content: schemas, variable kinds and schema-validated content
- position: dimensions and positions of any rank
- slice: Over / Along decomposition into selected and remainder parts
- cell: the (Position, Content) record
- pipe: lazy bulk-collection primitive (group, join, cross, scan, broadcast)
- names / partitions: position numbering and label → cells registries
- matrix: the operator set, written once for every rank
- strategies: reducers, transformers, derivers, partitioners, squashers,
  pairwise operators and samplers

================================================================================
DATA MODEL
================================================================================

    Matrix ──── Pipe[Cell] + rank
                  │
    Cell ────── (Position, Content)
                  │          │
    Position ── (Value, ...) Content ── (Schema, Value)

    Slice(p) → (selected, remainder)     reconstruct(selected, remainder) == p

A matrix is sparse: absent cells are simply not in the collection, and
values that fail to decode are dropped rather than raised.

Logging goes through loguru and is disabled for this package until
`cube_core.log.configure_logging()` is called.
"""

from loguru import logger

from .errors import CubeError, InvalidDimension, RankMismatch, InvalidContent, UnsupportedStrategy
from .config import CubeSettings, LogSettings, get_settings, set_settings
from .log import configure_logging, disable_logging

from .encoding import (
    Codex,
    StringCodex,
    LongCodex,
    DoubleCodex,
    BooleanCodex,
    DateCodex,
    datetime_codex,
    Value,
    StringValue,
    LongValue,
    DoubleValue,
    BooleanValue,
    DateValue,
    to_value,
)

from .content import (
    Type,
    Schema,
    ContinuousSchema,
    DiscreteSchema,
    NominalSchema,
    OrdinalSchema,
    DateSchema,
    Content,
)

from .position import Dimension, First, Second, Third, Fourth, Fifth, Position, as_position
from .slice import Slice, Over, Along
from .cell import Cell
from .pipe import Pipe, Grouped, ValuePipe
from .names import Names
from .matrix import Matrix
from .partitions import Partitions

logger.disable("cube_core")
