"""
Partitions Registry

The result of `Matrix.partition`: a collection of (label, Cell) pairs. A
cell can sit under any number of labels.

    parts = matrix.partition(BinaryHashSplit(First, 70, "train", "test"))
    parts.keys()                         → "train", "test"
    train = parts.get("train")           → Matrix
    parts.foreach(["train"], lambda k, m: m.transform(...))
"""

from __future__ import annotations
from typing import Any, Callable, Iterator, List, Tuple

from .cell import Cell
from .errors import RankMismatch
from .matrix import Matrix
from .pipe import Pipe


class Partitions:
    """Rich wrapper around a pipe of (label, Cell) pairs."""

    def __init__(self, data: Pipe[Tuple[Any, Cell]], rank: int):
        self.data = data
        self.rank = rank

    def __iter__(self) -> Iterator[Tuple[Any, Cell]]:
        return iter(self.data)

    def keys(self) -> Pipe[Any]:
        return self.data.group_by(lambda tc: tc[0]).keys()

    def get(self, key: Any) -> Matrix:
        """The cells of partition `key` as a matrix."""
        return Matrix(self.data.filter(lambda tc: tc[0] == key).map(lambda tc: tc[1]), self.rank)

    def add(self, key: Any, partition: Matrix) -> "Partitions":
        if partition.rank != self.rank:
            raise RankMismatch(self.rank, partition.rank, "Partitions.add")
        return Partitions(self.data + partition.data.map(lambda c: (key, c)), self.rank)

    def remove(self, key: Any) -> "Partitions":
        return Partitions(self.data.filter(lambda tc: tc[0] != key), self.rank)

    def foreach(self, keys: List[Any], fn: Callable[[Any, Matrix], Matrix]) -> "Partitions":
        """
        Apply `fn` to each partition in `keys` and collect the results.

        The partitions' rank may change under `fn`; all results must share it.
        """
        results = [(k, fn(k, self.get(k))) for k in keys]
        if not results:
            return Partitions(Pipe.empty(), self.rank)

        rank = results[0][1].rank
        data: Pipe = Pipe.empty()
        for k, m in results:
            if m.rank != rank:
                raise RankMismatch(rank, m.rank, "Partitions.foreach")
            data = data + m.data.map(lambda c, k=k: (k, c))
        return Partitions(data, rank)
