"""
Slices

A Slice splits a position into a *selected* part (the grouping key) and a
*remainder* (the complement, used for ordering and "other axis" work), and
can put the two back together:

    slice.reconstruct(slice.selected(p), slice.remainder(p)) == p

Two canonical strategies:

    Over(d)   selected = coordinate(s) at d      remainder = everything else
    Along(d)  selected = everything except d     remainder = coordinate(s) at d

Both accept one or more distinct dimensions (composite slices). The
`inverse` of Over(d) is Along(d) and vice versa, which lets window ordering
and pairwise computations name the remainder space with the same machinery.

Dimension checks against a rank happen in `check(rank)`, which the matrix
calls when an operation is requested, not when data flows.
"""

from __future__ import annotations
from typing import Tuple
from abc import ABC, abstractmethod

from .position import Dimension, Position, check_distinct
from .errors import InvalidDimension


class Slice(ABC):
    """Strategy splitting positions into selected and remainder parts."""

    def __init__(self, *dimensions: Dimension):
        if not dimensions:
            raise InvalidDimension(None, 0, "a slice needs at least one dimension")
        check_distinct(dimensions)
        self._dimensions: Tuple[Dimension, ...] = tuple(sorted(dimensions))

    @property
    def dimensions(self) -> Tuple[Dimension, ...]:
        return self._dimensions

    @property
    def dimension(self) -> Dimension:
        """The (first) sliced dimension."""
        return self._dimensions[0]

    def check(self, rank: int) -> "Slice":
        for d in self._dimensions:
            d.check(rank)
        return self

    def _inside(self, p: Position) -> Position:
        return p.select(self._dimensions)

    def _outside(self, p: Position) -> Position:
        for d in reversed(self._dimensions):
            p = p.remove(d)
        return p

    def _join(self, inside: Position, outside: Position) -> Position:
        if inside.rank != len(self._dimensions):
            raise InvalidDimension(self._dimensions[-1], inside.rank, "selected part has wrong rank")
        p = outside
        for d, c in zip(self._dimensions, inside.coordinates):
            p = p.insert(d, c)
        return p

    @abstractmethod
    def selected(self, p: Position) -> Position:
        ...

    @abstractmethod
    def remainder(self, p: Position) -> Position:
        ...

    @abstractmethod
    def reconstruct(self, selected: Position, remainder: Position) -> Position:
        """Inverse of (selected, remainder)."""

    @property
    @abstractmethod
    def inverse(self) -> "Slice":
        ...

    @abstractmethod
    def selected_rank(self, rank: int) -> int:
        ...

    def remainder_rank(self, rank: int) -> int:
        return rank - self.selected_rank(rank)

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self._dimensions == other._dimensions

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._dimensions))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(str(d) for d in self._dimensions)})"


class Over(Slice):
    """Select the coordinate(s) at the given dimension(s)."""

    def selected(self, p: Position) -> Position:
        return self._inside(p)

    def remainder(self, p: Position) -> Position:
        return self._outside(p)

    def reconstruct(self, selected: Position, remainder: Position) -> Position:
        return self._join(selected, remainder)

    @property
    def inverse(self) -> "Slice":
        return Along(*self._dimensions)

    def selected_rank(self, rank: int) -> int:
        return len(self._dimensions)


class Along(Slice):
    """Select every coordinate except the given dimension(s)."""

    def selected(self, p: Position) -> Position:
        return self._outside(p)

    def remainder(self, p: Position) -> Position:
        return self._inside(p)

    def reconstruct(self, selected: Position, remainder: Position) -> Position:
        return self._join(remainder, selected)

    @property
    def inverse(self) -> "Slice":
        return Over(*self._dimensions)

    def selected_rank(self, rank: int) -> int:
        return rank - len(self._dimensions)
