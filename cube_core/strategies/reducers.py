"""
Stock reducers.

    Count       number of cells                         (discrete)
    Sum/Mean    numeric sum / mean                      (continuous)
    Min/Max     numeric extremes                        (continuous)
    Moments     mean, std, skewness, kurtosis           (present_multiple only)
    Entropy     entropy of the value distribution       (continuous)

Numeric reducers seed non-numeric content with NaN; NaN aggregates are
presented as absence.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..cell import Cell
from ..content import Content, ContinuousSchema, DiscreteSchema
from ..position import Position
from ..slice import Slice
from .reducer import Reducer, Prepare, PresentMultiple, PresentSingleAndMultiple


def _as_double(cell: Cell) -> float:
    v = cell.content.value.as_double()
    return float("nan") if v is None else v


def _continuous(v: float) -> Optional[Content]:
    if np.isnan(v):
        return None
    return Content(ContinuousSchema(), float(v))


class Count(Reducer, Prepare, PresentSingleAndMultiple):
    """Count the cells of every key."""

    def __init__(self, name: Optional[Any] = None):
        self.name = name

    def prepare(self, slice: Slice, cell: Cell) -> int:
        return 1

    def reduce(self, lt: int, rt: int) -> int:
        return lt + rt

    def content(self, t: int) -> Optional[Content]:
        return Content(DiscreteSchema(), t)


class Sum(Reducer, Prepare, PresentSingleAndMultiple):
    def __init__(self, name: Optional[Any] = None):
        self.name = name

    def prepare(self, slice: Slice, cell: Cell) -> float:
        return _as_double(cell)

    def reduce(self, lt: float, rt: float) -> float:
        return lt + rt

    def content(self, t: float) -> Optional[Content]:
        return _continuous(t)


class Mean(Reducer, Prepare, PresentSingleAndMultiple):
    """State is (count, sum)."""

    def __init__(self, name: Optional[Any] = None):
        self.name = name

    def prepare(self, slice: Slice, cell: Cell) -> Tuple[int, float]:
        return (1, _as_double(cell))

    def reduce(self, lt: Tuple[int, float], rt: Tuple[int, float]) -> Tuple[int, float]:
        return (lt[0] + rt[0], lt[1] + rt[1])

    def content(self, t: Tuple[int, float]) -> Optional[Content]:
        return _continuous(t[1] / t[0])


class Min(Reducer, Prepare, PresentSingleAndMultiple):
    def __init__(self, name: Optional[Any] = None):
        self.name = name

    def prepare(self, slice: Slice, cell: Cell) -> float:
        return _as_double(cell)

    def reduce(self, lt: float, rt: float) -> float:
        # NaN must win regardless of argument order
        return float(np.fmin(lt, rt)) if not (np.isnan(lt) or np.isnan(rt)) else float("nan")

    def content(self, t: float) -> Optional[Content]:
        return _continuous(t)


class Max(Reducer, Prepare, PresentSingleAndMultiple):
    def __init__(self, name: Optional[Any] = None):
        self.name = name

    def prepare(self, slice: Slice, cell: Cell) -> float:
        return _as_double(cell)

    def reduce(self, lt: float, rt: float) -> float:
        return float(np.fmax(lt, rt)) if not (np.isnan(lt) or np.isnan(rt)) else float("nan")

    def content(self, t: float) -> Optional[Content]:
        return _continuous(t)


class Moments(Reducer, Prepare, PresentMultiple):
    """
    First four moments via a parallel moment merge.

    State is (n, mean, M2, M3, M4) where Mk is the k-th central sum. The
    merge is exact in real arithmetic, so any fold order gives the same
    moments up to floating point rounding. `std` is the population standard
    deviation and `kurtosis` is not excess-corrected.
    """

    def __init__(self, mean: str = "mean", std: str = "std",
                 skewness: str = "skewness", kurtosis: str = "kurtosis"):
        self.names = (mean, std, skewness, kurtosis)

    def prepare(self, slice: Slice, cell: Cell) -> Tuple[int, float, float, float, float]:
        return (1, _as_double(cell), 0.0, 0.0, 0.0)

    def reduce(self, lt, rt):
        na, ma, m2a, m3a, m4a = lt
        nb, mb, m2b, m3b, m4b = rt

        n = na + nb
        delta = mb - ma
        d_n = delta / n

        mean = ma + nb * d_n
        m2 = m2a + m2b + delta * d_n * na * nb
        m3 = (m3a + m3b + delta * d_n ** 2 * na * nb * (na - nb)
              + 3 * d_n * (na * m2b - nb * m2a))
        m4 = (m4a + m4b + delta * d_n ** 3 * na * nb * (na * na - na * nb + nb * nb)
              + 6 * d_n ** 2 * (na * na * m2b + nb * nb * m2a)
              + 4 * d_n * (na * m3b - nb * m3a))
        return (n, mean, m2, m3, m4)

    def present_multiple(self, pos: Position, t) -> List[Cell]:
        n, mean, m2, m3, m4 = t
        if np.isnan(mean):
            return []

        values = [mean, float(np.sqrt(m2 / n))]
        if m2 > 0:
            values += [float(np.sqrt(n) * m3 / m2 ** 1.5), float(n * m4 / m2 ** 2)]

        return [
            Cell(pos.append(name), Content(ContinuousSchema(), v))
            for name, v in zip(self.names, values)
        ]


class Entropy(Reducer, Prepare, PresentSingleAndMultiple):
    """
    Entropy of the distribution of content values within a key.

    Values are counted by short string. `negate` flips the sign (useful when
    entropies are summed into mutual information); `log_base` defaults to 2.
    """

    def __init__(self, name: Optional[Any] = None, negate: bool = False, log_base: float = 2.0):
        self.name = name
        self.negate = negate
        self.log_base = log_base

    def prepare(self, slice: Slice, cell: Cell) -> Dict[str, int]:
        return {cell.content.value.to_short_string(): 1}

    def reduce(self, lt: Dict[str, int], rt: Dict[str, int]) -> Dict[str, int]:
        merged = dict(lt)
        for k, v in rt.items():
            merged[k] = merged.get(k, 0) + v
        return merged

    def content(self, t: Dict[str, int]) -> Optional[Content]:
        counts = np.array(list(t.values()), dtype=float)
        p = counts / counts.sum()
        h = float(-np.sum(p * np.log(p)) / np.log(self.log_base)) + 0.0   # no -0.0
        return Content(ContinuousSchema(), -h if self.negate else h)
