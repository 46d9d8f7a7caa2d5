"""
Stock partitioners.

Hash splits use the stable Value.hash_code() of the coordinate at `dim`:

    h = |hash_code % base|
    BinaryHashSplit     h <= ratio → left, else right
    TernaryHashSplit    h <= lower → left, h <= upper → middle, else right
    HashSplit           every label whose range (l, u] contains h

Date splits compare the coordinate at `dim` with fixed dates using a date
codex; coordinates that are not dates under that codex get no label.

    BinaryDateSplit     coord <= date → left, else right
    TernaryDateSplit    coord <= lower → left, coord <= upper → middle, else right
    DateSplit           every label whose range (lower, upper] contains coord
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import datetime as dt

from ..encoding import Codex, DateCodex
from ..config import get_settings
from ..position import Dimension, Position
from .partitioner import Partitioner, Assign


def _bucket(pos: Position, dim: Dimension, base: int) -> int:
    return abs(pos.get(dim).hash_code()) % base


class BinaryHashSplit(Partitioner, Assign):
    def __init__(self, dim: Dimension, ratio: int, left: Any, right: Any, base: Optional[int] = None):
        self.dim = dim
        self.ratio = ratio
        self.left = left
        self.right = right
        self.base = base or get_settings().hash_base

    def assign(self, pos: Position) -> List[Any]:
        return [self.left if _bucket(pos, self.dim, self.base) <= self.ratio else self.right]


class TernaryHashSplit(Partitioner, Assign):
    def __init__(self, dim: Dimension, lower: int, upper: int, left: Any, middle: Any, right: Any,
                 base: Optional[int] = None):
        self.dim = dim
        self.lower = lower
        self.upper = upper
        self.left = left
        self.middle = middle
        self.right = right
        self.base = base or get_settings().hash_base

    def assign(self, pos: Position) -> List[Any]:
        h = _bucket(pos, self.dim, self.base)
        if h <= self.lower:
            return [self.left]
        if h <= self.upper:
            return [self.middle]
        return [self.right]


class HashSplit(Partitioner, Assign):
    """Assign every label whose (lower, upper] range contains the bucket."""

    def __init__(self, dim: Dimension, ranges: Dict[Any, Tuple[int, int]], base: Optional[int] = None):
        self.dim = dim
        self.ranges = ranges
        self.base = base or get_settings().hash_base

    def assign(self, pos: Position) -> List[Any]:
        h = _bucket(pos, self.dim, self.base)
        return [k for k, (lower, upper) in self.ranges.items() if lower < h <= upper]


class _DateSplit(Partitioner, Assign):
    def __init__(self, dim: Dimension, codex: Optional[Codex] = None):
        self.dim = dim
        self.codex = codex or DateCodex()

    def _compare(self, pos: Position, date: dt.date) -> Optional[int]:
        return self.codex.compare(pos.get(self.dim), self.codex.to_value(date))


class BinaryDateSplit(_DateSplit):
    def __init__(self, dim: Dimension, date: dt.date, left: Any, right: Any, codex: Optional[Codex] = None):
        super().__init__(dim, codex)
        self.date = date
        self.left = left
        self.right = right

    def assign(self, pos: Position) -> List[Any]:
        cmp = self._compare(pos, self.date)
        if cmp is None:
            return []
        return [self.left if cmp <= 0 else self.right]


class TernaryDateSplit(_DateSplit):
    def __init__(self, dim: Dimension, lower: dt.date, upper: dt.date, left: Any, middle: Any, right: Any,
                 codex: Optional[Codex] = None):
        super().__init__(dim, codex)
        self.lower = lower
        self.upper = upper
        self.left = left
        self.middle = middle
        self.right = right

    def assign(self, pos: Position) -> List[Any]:
        lo, up = self._compare(pos, self.lower), self._compare(pos, self.upper)
        if lo is None or up is None:
            return []
        if lo <= 0:
            return [self.left]
        if up <= 0:
            return [self.middle]
        return [self.right]


class DateSplit(_DateSplit):
    def __init__(self, dim: Dimension, ranges: Dict[Any, Tuple[dt.date, dt.date]], codex: Optional[Codex] = None):
        super().__init__(dim, codex)
        self.ranges = ranges

    def assign(self, pos: Position) -> List[Any]:
        labels = []
        for k, (lower, upper) in self.ranges.items():
            lo, up = self._compare(pos, lower), self._compare(pos, upper)
            if lo is not None and up is not None and lo > 0 and up <= 0:
                labels.append(k)
        return labels
