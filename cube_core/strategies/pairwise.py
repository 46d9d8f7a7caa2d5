"""
Pairwise operator type-class.

    compute(slice, left, right, rem) → List[Cell]

`left` and `right` carry the selected positions of the two keys being
paired, `rem` is the shared remainder. Operators decide which pairs to
emit with a Comparer over (left key, right key); using Upper, for example,
computes each unordered pair once.
"""

from __future__ import annotations
from typing import Any, List, Sequence
from abc import ABC, abstractmethod

from ..cell import Cell
from ..position import Position
from ..slice import Slice
from .base import Combination


# =============================================================================
# SECTION 1: Comparers
# =============================================================================

class Comparer(ABC):
    """Which (left, right) key pairs an operator emits."""

    @staticmethod
    @abstractmethod
    def keep(left: Position, right: Position) -> bool:
        ...


class All(Comparer):
    @staticmethod
    def keep(left: Position, right: Position) -> bool:
        return True


class Diagonal(Comparer):
    @staticmethod
    def keep(left: Position, right: Position) -> bool:
        return left == right


class Upper(Comparer):
    @staticmethod
    def keep(left: Position, right: Position) -> bool:
        return left < right


class UpperDiagonal(Comparer):
    @staticmethod
    def keep(left: Position, right: Position) -> bool:
        return left <= right


class Lower(Comparer):
    @staticmethod
    def keep(left: Position, right: Position) -> bool:
        return left > right


class LowerDiagonal(Comparer):
    @staticmethod
    def keep(left: Position, right: Position) -> bool:
        return left >= right


# =============================================================================
# SECTION 2: Operator capabilities
# =============================================================================

class Operator(ABC):
    """Base class for pairwise operators."""


class ComputeWithValue(ABC):
    @abstractmethod
    def compute_with_value(self, slice: Slice, left: Cell, right: Cell, rem: Position, ext: Any) -> List[Cell]:
        ...


class Compute(ComputeWithValue):
    def compute_with_value(self, slice: Slice, left: Cell, right: Cell, rem: Position, ext: Any) -> List[Cell]:
        return self.compute(slice, left, right, rem)

    @abstractmethod
    def compute(self, slice: Slice, left: Cell, right: Cell, rem: Position) -> List[Cell]:
        ...


class CombinationOperator(Combination, Operator, Compute):
    def __init__(self, operators: Sequence[Operator]):
        self.members = list(operators)

    def compute(self, slice: Slice, left: Cell, right: Cell, rem: Position) -> List[Cell]:
        return [c for o in self.members for c in o.compute(slice, left, right, rem)]

    def compute_with_value(self, slice: Slice, left: Cell, right: Cell, rem: Position, ext: Any) -> List[Cell]:
        return [c for o in self.members for c in o.compute_with_value(slice, left, right, rem, ext)]

    def __repr__(self) -> str:
        return f"CombinationOperator({self.members!r})"


def as_operator(operators: Any) -> Operator:
    if isinstance(operators, (list, tuple)):
        return CombinationOperator(operators)
    return operators
