"""
Deriver type-class.

Derivation is an ordered, stateful scan within each selected key:

    initialise(slice, cell, rem) → T                      first cell of the key
    present(slice, cell, rem, T) → (T, List[Cell])        every later cell

Cells reach the deriver in ascending remainder order, strictly one at a
time per key. The first cell only seeds the state and never produces output.
"""

from __future__ import annotations
from typing import Any, List, Sequence, Tuple
from abc import ABC, abstractmethod

from ..cell import Cell
from ..position import Position
from ..slice import Slice
from .base import Combination


class Deriver(ABC):
    """Base class for derivers."""

    @abstractmethod
    def present(self, slice: Slice, cell: Cell, rem: Position, t: Any) -> Tuple[Any, List[Cell]]:
        """Consume the next cell; return the new state and any derived cells."""


class InitialiseWithValue(ABC):
    @abstractmethod
    def initialise_with_value(self, slice: Slice, cell: Cell, rem: Position, ext: Any) -> Any:
        ...


class Initialise(InitialiseWithValue):
    def initialise_with_value(self, slice: Slice, cell: Cell, rem: Position, ext: Any) -> Any:
        return self.initialise(slice, cell, rem)

    @abstractmethod
    def initialise(self, slice: Slice, cell: Cell, rem: Position) -> Any:
        ...


class CombinationDeriver(Combination, Deriver, Initialise):
    """Run several derivers side by side; states are kept per deriver."""

    def __init__(self, derivers: Sequence[Deriver]):
        self.members = list(derivers)

    def initialise(self, slice: Slice, cell: Cell, rem: Position) -> List[Any]:
        return [d.initialise(slice, cell, rem) for d in self.members]

    def initialise_with_value(self, slice: Slice, cell: Cell, rem: Position, ext: Any) -> List[Any]:
        return [d.initialise_with_value(slice, cell, rem, ext) for d in self.members]

    def present(self, slice: Slice, cell: Cell, rem: Position, t: List[Any]) -> Tuple[List[Any], List[Cell]]:
        states: List[Any] = []
        cells: List[Cell] = []
        for d, s in zip(self.members, t):
            state, out = d.present(slice, cell, rem, s)
            states.append(state)
            cells.extend(out)
        return states, cells

    def __repr__(self) -> str:
        return f"CombinationDeriver({self.members!r})"


def as_deriver(derivers: Any) -> Deriver:
    if isinstance(derivers, (list, tuple)):
        return CombinationDeriver(derivers)
    return derivers
