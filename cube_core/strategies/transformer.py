"""
Transformer type-class.

A transformer remaps content independently of every other cell:

    present(cell) → List[Cell]                   same rank (1:1 or 1:N)
    present_expanded(cell) → List[Cell]          rank + 1

Each has a `*_with_value` variant taking a broadcast value. Plain variants
also satisfy the with-value capability (the value is ignored).
"""

from __future__ import annotations
from typing import Any, List, Sequence
from abc import ABC, abstractmethod

from ..cell import Cell
from .base import Combination


class Transformer(ABC):
    """Base class for transformers."""


class PresentWithValue(ABC):
    @abstractmethod
    def present_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        ...


class Present(PresentWithValue):
    def present_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        return self.present(cell)

    @abstractmethod
    def present(self, cell: Cell) -> List[Cell]:
        ...


class PresentExpandedWithValue(ABC):
    @abstractmethod
    def present_expanded_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        ...


class PresentExpanded(PresentExpandedWithValue):
    def present_expanded_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        return self.present_expanded(cell)

    @abstractmethod
    def present_expanded(self, cell: Cell) -> List[Cell]:
        ...


class CombinationTransformer(Combination, Transformer, Present, PresentExpanded):
    """Apply several transformers to every cell and concatenate their output."""

    def __init__(self, transformers: Sequence[Transformer]):
        self.members = list(transformers)

    def present(self, cell: Cell) -> List[Cell]:
        return [c for t in self.members for c in t.present(cell)]

    def present_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        return [c for t in self.members for c in t.present_with_value(cell, ext)]

    def present_expanded(self, cell: Cell) -> List[Cell]:
        return [c for t in self.members for c in t.present_expanded(cell)]

    def present_expanded_with_value(self, cell: Cell, ext: Any) -> List[Cell]:
        return [c for t in self.members for c in t.present_expanded_with_value(cell, ext)]

    def __repr__(self) -> str:
        return f"CombinationTransformer({self.members!r})"


def as_transformer(transformers: Any) -> Transformer:
    if isinstance(transformers, (list, tuple)):
        return CombinationTransformer(transformers)
    return transformers
