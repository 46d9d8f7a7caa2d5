"""
Reducer type-class.

A reduction is a two-phase fold:

    prepare(slice, cell[, ext]) → T        seed per cell, keyed by slice.selected
    reduce(T, T) → T                       associative AND commutative
    present_single(pos, T) → Optional[Cell]
    present_multiple(pos, T) → List[Cell]  positions one rank higher

The reduce contract is the one a reducer author must get right: the fold is
applied in any order and any grouping. `present_*` returning None / [] means
the reducer is not defined for the content it saw (e.g. mean of nominal
data) and is not an error.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence
from abc import ABC, abstractmethod

from ..cell import Cell
from ..content import Content
from ..position import Position
from ..slice import Slice
from .base import Combination


class Reducer(ABC):
    """Base class for reducers."""

    @abstractmethod
    def reduce(self, lt: Any, rt: Any) -> Any:
        """Combine two aggregate states; must be associative and commutative."""


class PrepareWithValue(ABC):
    """Reduction preparation using a user supplied (broadcast) value."""

    @abstractmethod
    def prepare_with_value(self, slice: Slice, cell: Cell, ext: Any) -> Any:
        ...


class Prepare(PrepareWithValue):
    """Reduction preparation; the broadcast value, if any, is ignored."""

    def prepare_with_value(self, slice: Slice, cell: Cell, ext: Any) -> Any:
        return self.prepare(slice, cell)

    @abstractmethod
    def prepare(self, slice: Slice, cell: Cell) -> Any:
        ...


class PresentSingle(ABC):
    @abstractmethod
    def present_single(self, pos: Position, t: Any) -> Optional[Cell]:
        ...


class PresentMultiple(ABC):
    @abstractmethod
    def present_multiple(self, pos: Position, t: Any) -> List[Cell]:
        ...


class PresentSingleAndMultiple(PresentSingle, PresentMultiple):
    """
    Reducers that present one content either in place (single) or under an
    appended `name` coordinate (multiple). Without a name, presenting as
    multiple yields nothing.
    """

    name: Optional[Any] = None

    @abstractmethod
    def content(self, t: Any) -> Optional[Content]:
        ...

    def present_single(self, pos: Position, t: Any) -> Optional[Cell]:
        con = self.content(t)
        return Cell(pos, con) if con is not None else None

    def present_multiple(self, pos: Position, t: Any) -> List[Cell]:
        if self.name is None:
            return []
        con = self.content(t)
        return [Cell(pos.append(self.name), con)] if con is not None else []


class CombinationReducer(Combination, Reducer, Prepare, PresentMultiple):
    """
    Run several reducers in a single pass.

    States are lists, reduced element-wise by reducer position, and the
    presented cells of every member are concatenated.
    """

    def __init__(self, reducers: Sequence[Reducer]):
        self.members = list(reducers)

    def prepare(self, slice: Slice, cell: Cell) -> List[Any]:
        return [r.prepare(slice, cell) for r in self.members]

    def prepare_with_value(self, slice: Slice, cell: Cell, ext: Any) -> List[Any]:
        return [r.prepare_with_value(slice, cell, ext) for r in self.members]

    def reduce(self, lt: List[Any], rt: List[Any]) -> List[Any]:
        return [r.reduce(l, x) for r, l, x in zip(self.members, lt, rt)]

    def present_multiple(self, pos: Position, t: List[Any]) -> List[Cell]:
        cells: List[Cell] = []
        for r, s in zip(self.members, t):
            cells.extend(r.present_multiple(pos, s))
        return cells

    def __repr__(self) -> str:
        return f"CombinationReducer({self.members!r})"


def as_reducer(reducers: Any) -> Reducer:
    """A single reducer passes through; a list becomes a CombinationReducer."""
    if isinstance(reducers, (list, tuple)):
        return CombinationReducer(reducers)
    return reducers
