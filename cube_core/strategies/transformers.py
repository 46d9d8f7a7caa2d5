"""
Stock transformers.

Every stock transformer works on the coordinate at `dim`:

    name=None       present keeps the position as is
    name="%s.sq"    present renames coordinate `dim` to name % coordinate

`present_expanded` appends the (formatted) name, or the transformer's
`label` when no name is given, as a new last coordinate.

    Indicator       1 for every cell
    Binarise        one indicator per categorical value ("coord=value")
    Power/SquareRoot numeric power / square root
    Subtract        value - ext[coord]             (with value only)
    Fraction        value / ext[coord]             (with value only)
    Normalise       value / |ext[coord][key]|      (with value only)
    Standardise     (value - mean) / std           (with value only)

With-value transformers take the broadcast value as a dict keyed by the
1D position of the coordinate at `dim`, i.e. the output of
`Matrix.to_map(Over(First))` on a matrix of statistics.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import numpy as np

from ..cell import Cell
from ..content import Content, ContinuousSchema, DiscreteSchema, Type
from ..position import Dimension, Position
from .transformer import (
    Transformer,
    Present,
    PresentWithValue,
    PresentExpanded,
    PresentExpandedWithValue,
)


# =============================================================================
# SECTION 1: Shared plumbing
# =============================================================================

class _CoordinateTransformer(Transformer):
    """Base for transformers that compute one content per cell."""

    label: str = "value"

    def __init__(self, dim: Dimension, name: Optional[str] = None):
        self.dim = dim
        self.name = name

    def _coordinate(self, cell: Cell) -> str:
        return cell.position.get(self.dim).to_short_string()

    def _renamed(self, cell: Cell) -> Position:
        if self.name is None:
            return cell.position
        return cell.position.update(self.dim, self.name % self._coordinate(cell))

    def _expanded(self, cell: Cell) -> Position:
        label = self.label if self.name is None else self.name % self._coordinate(cell)
        return cell.position.append(label)

    def _key(self, cell: Cell) -> Position:
        return Position(cell.position.get(self.dim))

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        raise NotImplementedError

    def _emit(self, position: Position, con: Optional[Content]) -> List[Cell]:
        return [Cell(position, con)] if con is not None else []


class _Plain(_CoordinateTransformer, Present, PresentExpanded):
    def present(self, cell: Cell) -> List[Cell]:
        return self._emit(self._renamed(cell), self._content(cell, None))

    def present_expanded(self, cell: Cell) -> List[Cell]:
        return self._emit(self._expanded(cell), self._content(cell, None))


class _WithValue(_CoordinateTransformer, PresentWithValue, PresentExpandedWithValue):
    def present_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        return self._emit(self._renamed(cell), self._content(cell, ext))

    def present_expanded_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        return self._emit(self._expanded(cell), self._content(cell, ext))

    def _lookup(self, cell: Cell, ext: Optional[Dict]) -> Optional[Any]:
        if not ext:
            return None
        return ext.get(self._key(cell))


def _double(v: Optional[float]) -> Optional[Content]:
    if v is None or not np.isfinite(v):
        return None
    return Content(ContinuousSchema(), float(v))


def _value_of(con: Any) -> Optional[float]:
    return con.value.as_double() if isinstance(con, Content) else None


# =============================================================================
# SECTION 2: Plain transformers
# =============================================================================

class Indicator(_Plain):
    label = "indicator"

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        return Content(DiscreteSchema(), 1)


class Binarise(Transformer, Present):
    """
    Turn categorical content into indicators.

    The coordinate at `dim` becomes "coordinate<separator>value" and the
    content 1. Non-categorical content is dropped.
    """

    def __init__(self, dim: Dimension, separator: str = "="):
        self.dim = dim
        self.separator = separator

    def present(self, cell: Cell) -> List[Cell]:
        if not cell.content.schema.kind.is_specialisation_of(Type.CATEGORICAL):
            return []
        coord = cell.position.get(self.dim).to_short_string()
        name = f"{coord}{self.separator}{cell.content.value.to_short_string()}"
        return [Cell(cell.position.update(self.dim, name), Content(DiscreteSchema(), 1))]


class Power(_Plain):
    label = "power"

    def __init__(self, dim: Dimension, power: float, name: Optional[str] = None):
        super().__init__(dim, name)
        self.power = power

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        v = cell.content.value.as_double()
        return _double(None if v is None else float(np.power(v, self.power)))


class SquareRoot(_Plain):
    label = "sqrt"

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        v = cell.content.value.as_double()
        if v is None or v < 0:
            return None
        return _double(float(np.sqrt(v)))


# =============================================================================
# SECTION 3: With-value transformers
# =============================================================================

class Subtract(_WithValue):
    label = "subtract"

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        v = cell.content.value.as_double()
        s = _value_of(self._lookup(cell, ext))
        if v is None or s is None:
            return None
        return _double(v - s)


class Fraction(_WithValue):
    """Divide by ext[coord]; a zero divisor gives absence."""

    label = "fraction"

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        v = cell.content.value.as_double()
        d = _value_of(self._lookup(cell, ext))
        if v is None or not d:
            return None
        return _double(v / d)


class Normalise(_WithValue):
    """Divide by the absolute value of statistic `key` of the coordinate."""

    label = "normalised"

    def __init__(self, dim: Dimension, key: str = "max.abs", name: Optional[str] = None):
        super().__init__(dim, name)
        self.key = Position(key)

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        stats = self._lookup(cell, ext)
        v = cell.content.value.as_double()
        d = _value_of(stats.get(self.key)) if isinstance(stats, dict) else None
        if v is None or not d:
            return None
        return _double(v / abs(d))


class Standardise(_WithValue):
    """(value - mean) / std using the statistics names produced by Moments."""

    label = "standardised"

    def __init__(self, dim: Dimension, mean: str = "mean", std: str = "std", name: Optional[str] = None):
        super().__init__(dim, name)
        self.mean = Position(mean)
        self.std = Position(std)

    def _content(self, cell: Cell, ext: Any) -> Optional[Content]:
        stats = self._lookup(cell, ext)
        v = cell.content.value.as_double()
        if v is None or not isinstance(stats, dict):
            return None
        m = _value_of(stats.get(self.mean))
        s = _value_of(stats.get(self.std))
        if m is None or not s:
            return None
        return _double((v - m) / s)
