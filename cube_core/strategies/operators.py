"""
Stock pairwise operators.

The output position is the shared remainder with the pair name prepended;
the name is `name % (left key, right key)` using the keys' short strings:

    Times()                    "(a*b)"
    Plus(name="%s,%s")         "a,b"

Numeric operators drop pairs where either side is not numeric (and Divide
drops division by zero).
"""

from __future__ import annotations
from typing import List, Optional, Type

from ..cell import Cell
from ..config import get_settings
from ..content import Content, ContinuousSchema, NominalSchema
from ..position import Position
from ..slice import Slice
from .pairwise import Operator, Compute, Comparer, All


class _PairOperator(Operator, Compute):
    default_name = "(%s,%s)"

    def __init__(self, name: Optional[str] = None, comparer: Type[Comparer] = All,
                 separator: Optional[str] = None):
        self.name = name or self.default_name
        self.comparer = comparer
        self.separator = separator

    def _pair_name(self, left: Cell, right: Cell) -> str:
        sep = get_settings().separator if self.separator is None else self.separator
        return self.name % (left.position.to_short_string(sep), right.position.to_short_string(sep))

    def _content(self, left: Cell, right: Cell) -> Optional[Content]:
        raise NotImplementedError

    def compute(self, slice: Slice, left: Cell, right: Cell, rem: Position) -> List[Cell]:
        if not self.comparer.keep(left.position, right.position):
            return []
        con = self._content(left, right)
        if con is None:
            return []
        return [Cell(rem.prepend(self._pair_name(left, right)), con)]


class _Arithmetic(_PairOperator):
    def _combine(self, l: float, r: float) -> Optional[float]:
        raise NotImplementedError

    def _content(self, left: Cell, right: Cell) -> Optional[Content]:
        l, r = left.content.value.as_double(), right.content.value.as_double()
        if l is None or r is None:
            return None
        v = self._combine(l, r)
        return Content(ContinuousSchema(), v) if v is not None else None


class Plus(_Arithmetic):
    default_name = "(%s+%s)"

    def _combine(self, l: float, r: float) -> Optional[float]:
        return l + r


class Minus(_Arithmetic):
    default_name = "(%s-%s)"

    def _combine(self, l: float, r: float) -> Optional[float]:
        return l - r


class Times(_Arithmetic):
    default_name = "(%s*%s)"

    def _combine(self, l: float, r: float) -> Optional[float]:
        return l * r


class Divide(_Arithmetic):
    default_name = "(%s/%s)"

    def _combine(self, l: float, r: float) -> Optional[float]:
        return l / r if r != 0 else None


class Concatenate(_PairOperator):
    """Join the two values' short strings into nominal content."""

    default_name = "(%s,%s)"

    def __init__(self, name: Optional[str] = None, comparer: Type[Comparer] = All,
                 separator: Optional[str] = None, value_separator: str = ","):
        super().__init__(name, comparer, separator)
        self.value_separator = value_separator

    def _content(self, left: Cell, right: Cell) -> Optional[Content]:
        value = (left.content.value.to_short_string() + self.value_separator
                 + right.content.value.to_short_string())
        return Content(NominalSchema(), value)
