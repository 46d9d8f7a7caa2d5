"""
Squasher type-class and stock squashers.

    reduce(dim, x, y) → survivor       x, y share every coordinate except `dim`

`Matrix.squash` folds all cells of a group with this rule in arbitrary
order, so only commutative and associative squashers give deterministic
results. PreservingMaxPosition and PreservingMinPosition are; KeepSlice is
order-sensitive whenever no cell of a group (or several) match its value.
"""

from __future__ import annotations
from typing import Any
from abc import ABC, abstractmethod

from ..cell import Cell
from ..encoding import to_value
from ..position import Dimension


class Squasher(ABC):
    """Base class for squashers."""


class ReduceWithValue(ABC):
    @abstractmethod
    def reduce_with_value(self, dim: Dimension, x: Cell, y: Cell, ext: Any) -> Cell:
        ...


class Reduce(ReduceWithValue):
    def reduce_with_value(self, dim: Dimension, x: Cell, y: Cell, ext: Any) -> Cell:
        return self.reduce(dim, x, y)

    @abstractmethod
    def reduce(self, dim: Dimension, x: Cell, y: Cell) -> Cell:
        ...


class PreservingMaxPosition(Squasher, Reduce):
    """Keep the cell with the greatest coordinate at `dim`."""

    def reduce(self, dim: Dimension, x: Cell, y: Cell) -> Cell:
        return x if x.position.get(dim) > y.position.get(dim) else y


class PreservingMinPosition(Squasher, Reduce):
    """Keep the cell with the smallest coordinate at `dim`."""

    def reduce(self, dim: Dimension, x: Cell, y: Cell) -> Cell:
        return x if x.position.get(dim) < y.position.get(dim) else y


class KeepSlice(Squasher, Reduce):
    """
    Keep the cell whose coordinate at `dim` equals `value`.

    Order-sensitive: when neither cell matches, the left one survives.
    """

    def __init__(self, value: Any):
        self.value = to_value(value)

    def reduce(self, dim: Dimension, x: Cell, y: Cell) -> Cell:
        if x.position.get(dim) == self.value:
            return x
        if y.position.get(dim) == self.value:
            return y
        return x
