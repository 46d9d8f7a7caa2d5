"""
Sampler type-class and stock samplers.

    select(pos) → bool          keep the cell at `pos`?

RandomSample seeds a numpy generator per position and HashSample buckets one
coordinate, so both are deterministic for a given cell.
"""

from __future__ import annotations
from typing import Any, Optional
from abc import ABC, abstractmethod

import numpy as np

from ..config import get_settings
from ..constants import HASH_MASK
from ..position import Dimension, Position


class Sampler(ABC):
    """Base class for samplers."""


class SelectWithValue(ABC):
    @abstractmethod
    def select_with_value(self, pos: Position, ext: Any) -> bool:
        ...


class Select(SelectWithValue):
    def select_with_value(self, pos: Position, ext: Any) -> bool:
        return self.select(pos)

    @abstractmethod
    def select(self, pos: Position) -> bool:
        ...


class RandomSample(Sampler, Select):
    """
    Keep each cell with probability `ratio`.

    The draw for a cell is seeded by `seed` and the cell's coordinate hashes,
    so a sampled matrix holds the same cells every time it is evaluated.
    """

    def __init__(self, ratio: float, seed: Optional[int] = None):
        if not 0.0 <= ratio <= 1.0:
            raise ValueError("ratio must be in [0, 1]")
        self.ratio = ratio
        self.seed = np.random.SeedSequence(seed).entropy

    def select(self, pos: Position) -> bool:
        key = [self.seed] + [coord.hash_code() & HASH_MASK for coord in pos]
        return bool(np.random.default_rng(key).random() < self.ratio)


class HashSample(Sampler, Select):
    """Keep cells whose coordinate at `dim` hashes into the first `ratio` of `base` buckets."""

    def __init__(self, dim: Dimension, ratio: int, base: Optional[int] = None):
        self.dim = dim
        self.ratio = ratio
        self.base = base or get_settings().hash_base

    def select(self, pos: Position) -> bool:
        return abs(pos.get(self.dim).hash_code()) % self.base < self.ratio
