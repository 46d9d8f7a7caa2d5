"""
Stock derivers.

All of them label their output by the remainder range they cover, e.g.
"2020-01-01.to.2020-01-03", appended to the selected position.

    Gradient(dim)       Δvalue / Δdays between consecutive cells
    Delta()             Δvalue between consecutive cells
    MovingAverage(n)    mean of the last n values (including the current one)
"""

from __future__ import annotations
from typing import List, Optional, Tuple

from ..cell import Cell
from ..constants import GRADIENT_RANGE_SEPARATOR
from ..content import Content, ContinuousSchema
from ..position import Dimension, Position
from ..slice import Slice
from .deriver import Deriver, Initialise


def _range_label(previous: Position, current: Position) -> str:
    return previous.to_short_string("") + GRADIENT_RANGE_SEPARATOR + current.to_short_string("")


class Gradient(Deriver, Initialise):
    """
    Gradient over a date-valued remainder.

    `dim` is the dimension of the remainder holding the date. The state is a
    Cell of (previous remainder, previous content). Days are whole days
    between the two dates; cells whose value or date is missing, or that
    fall on the same day as their predecessor, produce nothing.
    """

    def __init__(self, dim: Dimension):
        self.dim = dim

    def initialise(self, slice: Slice, cell: Cell, rem: Position) -> Cell:
        return Cell(rem, cell.content)

    def present(self, slice: Slice, cell: Cell, rem: Position, t: Cell) -> Tuple[Cell, List[Cell]]:
        state = Cell(rem, cell.content)

        current, previous = rem.get(self.dim).as_date(), t.position.get(self.dim).as_date()
        vc, vp = cell.content.value.as_double(), t.content.value.as_double()
        if current is None or previous is None or vc is None or vp is None:
            return state, []

        days = (current - previous).days
        if days == 0:
            return state, []

        grad = Cell(
            cell.position.append(_range_label(t.position, rem)),
            Content(ContinuousSchema(), (vc - vp) / days),
        )
        return state, [grad]


class Delta(Deriver, Initialise):
    """Difference between each value and its predecessor."""

    def initialise(self, slice: Slice, cell: Cell, rem: Position) -> Cell:
        return Cell(rem, cell.content)

    def present(self, slice: Slice, cell: Cell, rem: Position, t: Cell) -> Tuple[Cell, List[Cell]]:
        vc, vp = cell.content.value.as_double(), t.content.value.as_double()
        out: List[Cell] = []
        if vc is not None and vp is not None:
            out.append(Cell(
                cell.position.append(_range_label(t.position, rem)),
                Content(ContinuousSchema(), vc - vp),
            ))
        return Cell(rem, cell.content), out


class MovingAverage(Deriver, Initialise):
    """
    Trailing mean over the last `window` numeric values.

    The output is labelled with the remainder of the current cell. Output
    starts at the second cell, so early windows are partial.
    """

    def __init__(self, window: int):
        if window < 1:
            raise ValueError("window must be >= 1")
        self.window = window

    def _push(self, values: Tuple[float, ...], v: Optional[float]) -> Tuple[float, ...]:
        if v is None:
            return values
        return (values + (v,))[-self.window:]

    def initialise(self, slice: Slice, cell: Cell, rem: Position) -> Tuple[float, ...]:
        return self._push((), cell.content.value.as_double())

    def present(self, slice: Slice, cell: Cell, rem: Position,
                t: Tuple[float, ...]) -> Tuple[Tuple[float, ...], List[Cell]]:
        values = self._push(t, cell.content.value.as_double())
        if not values:
            return values, []
        avg = sum(values) / len(values)
        return values, [Cell(cell.position.append(rem.to_short_string("")), Content(ContinuousSchema(), avg))]
