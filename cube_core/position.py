"""
Dimensions & Positions

A Position is an immutable, ordered tuple of typed coordinates (Values). One
generic class covers every arity; the rank is the number of coordinates and
every dimension argument is checked against it when the call is made:

    p = Position(1, "a", date(2020, 1, 1))     # rank 3
    p.get(Second)                              → StringValue("a")
    p.remove(First)                            → Position("a", date)   rank 2
    p.append("x")                              → rank 4
    p.melt(Third, Second, ".")                 → Position(1, "a.2020-01-01")
    p.get(Fourth)                              → InvalidDimension

Equality and hashing are structural; ordering is lexicographic over the
coordinates (see encoding.Value for the per-coordinate order).
"""

from __future__ import annotations
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from functools import total_ordering

from .constants import DIMENSION_NAMES
from .encoding import Value, StringValue, to_value
from .errors import InvalidDimension
from .config import get_settings


# =============================================================================
# SECTION 1: Dimensions
# =============================================================================

@dataclass(frozen=True, order=True)
class Dimension:
    """
    A dimension of a position.

    `index` is zero based; the display name is one based (First, Second, ...).
    """
    index: int

    def __post_init__(self):
        if self.index < 0:
            raise InvalidDimension(self.index, 0, "dimension index must be >= 0")

    @property
    def name(self) -> str:
        if self.index < len(DIMENSION_NAMES):
            return DIMENSION_NAMES[self.index]
        return f"Dimension{self.index + 1}"

    def check(self, rank: int) -> "Dimension":
        """Return self if it belongs to a position of `rank`, else raise InvalidDimension."""
        if self.index >= rank:
            raise InvalidDimension(self, rank)
        return self

    @staticmethod
    def all(rank: int) -> List["Dimension"]:
        return [Dimension(i) for i in range(rank)]

    def __str__(self) -> str:
        return self.name


First = Dimension(0)
Second = Dimension(1)
Third = Dimension(2)
Fourth = Dimension(3)
Fifth = Dimension(4)


def check_distinct(dims: Sequence[Dimension], rank: Optional[int] = None) -> Tuple[Dimension, ...]:
    """Validate a list of dimensions (no duplicates, optionally within `rank`)."""
    seen = set()
    for d in dims:
        if not isinstance(d, Dimension):
            raise TypeError(f"Expected a Dimension, got {type(d).__name__}")
        if d in seen:
            raise InvalidDimension(d, rank if rank is not None else -1, "dimension given more than once")
        seen.add(d)
        if rank is not None:
            d.check(rank)
    return tuple(dims)


# =============================================================================
# SECTION 2: Position
# =============================================================================

@total_ordering
class Position:
    """Immutable ordered tuple of coordinates."""

    __slots__ = ("_coordinates",)

    def __init__(self, *coordinates: Any):
        object.__setattr__(self, "_coordinates", tuple(to_value(c) for c in coordinates))

    @classmethod
    def of(cls, coordinates: Iterable[Any]) -> "Position":
        return cls(*coordinates)

    def __setattr__(self, key, value):
        raise AttributeError("Position is immutable")

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def coordinates(self) -> Tuple[Value, ...]:
        return self._coordinates

    @property
    def rank(self) -> int:
        return len(self._coordinates)

    def __len__(self) -> int:
        return len(self._coordinates)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._coordinates)

    def get(self, dim: Dimension) -> Value:
        return self._coordinates[dim.check(self.rank).index]

    # -------------------------------------------------------------------------
    # Rewrites
    # -------------------------------------------------------------------------

    def update(self, dim: Dimension, value: Any) -> "Position":
        i = dim.check(self.rank).index
        coords = list(self._coordinates)
        coords[i] = to_value(value)
        return Position(*coords)

    def remove(self, dim: Dimension) -> "Position":
        """Drop coordinate `dim`; rank decreases by one."""
        i = dim.check(self.rank).index
        return Position(*(self._coordinates[:i] + self._coordinates[i + 1:]))

    def insert(self, dim: Dimension, value: Any) -> "Position":
        """Insert `value` so that it becomes coordinate `dim`; rank increases by one."""
        i = dim.check(self.rank + 1).index
        return Position(*(self._coordinates[:i] + (to_value(value),) + self._coordinates[i:]))

    def append(self, value: Any) -> "Position":
        return Position(*(self._coordinates + (to_value(value),)))

    def prepend(self, value: Any) -> "Position":
        return Position(*((to_value(value),) + self._coordinates))

    def select(self, dims: Sequence[Dimension]) -> "Position":
        """Sub-position made of the coordinates at `dims` (in the given order)."""
        return Position(*(self.get(d) for d in dims))

    def melt(self, dim: Dimension, into: Dimension, separator: Optional[str] = None) -> "Position":
        """
        Merge coordinate `dim` into coordinate `into`.

        The merged coordinate is the string `into + separator + dim`; `dim`
        is then removed, so the rank decreases by one.
        """
        separator = get_settings().melt_separator if separator is None else separator
        dim.check(self.rank)
        into.check(self.rank)
        if dim == into:
            raise InvalidDimension(dim, self.rank, "cannot melt a dimension into itself")

        merged = StringValue(
            self.get(into).to_short_string() + separator + self.get(dim).to_short_string()
        )
        return self.update(into, merged).remove(dim)

    def permute(self, order: Sequence[Dimension]) -> "Position":
        """Reorder coordinates: coordinate i of the result is coordinate order[i] of self."""
        if len(order) != self.rank:
            raise InvalidDimension(len(order), self.rank, "permutation must name every dimension")
        check_distinct(order, self.rank)
        return Position(*(self._coordinates[d.index] for d in order))

    # -------------------------------------------------------------------------
    # Equality, ordering, formatting
    # -------------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._coordinates == other._coordinates

    def __hash__(self) -> int:
        return hash(self._coordinates)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def sort_key(self) -> Tuple:
        return tuple(c.sort_key() for c in self._coordinates)

    def to_short_string(self, separator: Optional[str] = None) -> str:
        separator = get_settings().separator if separator is None else separator
        return separator.join(c.to_short_string() for c in self._coordinates)

    def __repr__(self) -> str:
        return f"Position{self.rank}D({', '.join(repr(c) for c in self._coordinates)})"


def as_position(p: Any) -> Position:
    """Adapter for call sites that accept raw coordinates: a tuple or a single literal."""
    if isinstance(p, Position):
        return p
    if isinstance(p, tuple):
        return Position(*p)
    return Position(p)
