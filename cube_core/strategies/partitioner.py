"""
Partitioner type-class.

    assign(pos) → List[label]           zero, one or many labels per position

A cell may end up in no partition, in exactly one, or in several.
"""

from __future__ import annotations
from typing import Any, List
from abc import ABC, abstractmethod

from ..position import Position


class Partitioner(ABC):
    """Base class for partitioners."""


class AssignWithValue(ABC):
    @abstractmethod
    def assign_with_value(self, pos: Position, ext: Any) -> List[Any]:
        ...


class Assign(AssignWithValue):
    def assign_with_value(self, pos: Position, ext: Any) -> List[Any]:
        return self.assign(pos)

    @abstractmethod
    def assign(self, pos: Position) -> List[Any]:
        ...
