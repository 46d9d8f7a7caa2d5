"""
Names Registry

A Names registry is a collection of (Position, index) pairs: a dense,
unique numbering of the distinct positions observed along a slice. It is
what `Matrix.names(slice)` returns and what dictionary encodings are built
from.

    names = matrix.names(Over(Second))       # {("a", 0), ("b", 1), ...}
    names.slice_regex(r"a.*")                # keep matching names, renumbered
    names.move_to_front(Position("b"))       # "b" → 0, others shifted up

Indices are unique within a registry but carry no ordering guarantee
unless the registry has been explicitly renumbered or reordered.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple
import re

from loguru import logger

from .position import Position, as_position
from .pipe import Pipe
from .config import get_settings


class Names:
    """Rich wrapper around a pipe of (Position, index) pairs."""

    def __init__(self, data: Pipe[Tuple[Position, int]]):
        self.data = data

    @staticmethod
    def number(positions: Iterable[Position]) -> "Names":
        """
        Number a collection of positions.

        No ordering is defined on the indices, but each index is unique.
        """
        pipe = positions if isinstance(positions, Pipe) else Pipe.from_iterable(positions)
        numbered = (
            pipe.group_all()
            .map_value_stream(lambda ps: ((p, i) for i, p in enumerate(ps)))
            .map(lambda kv: kv[1])
        )
        return Names(numbered)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Tuple[Position, int]]:
        return iter(self.data)

    def to_list(self) -> List[Tuple[Position, int]]:
        return self.data.to_list()

    def to_dict(self) -> Dict[Position, int]:
        return dict(self.data)

    def positions(self) -> Pipe[Position]:
        return self.data.map(lambda pi: pi[0])

    def to_short_strings(self, separator: Optional[str] = None, descriptive: bool = False) -> Pipe[str]:
        separator = get_settings().separator if separator is None else separator

        def fmt(pi):
            p, i = pi
            name = repr(p) if descriptive else p.to_short_string(separator)
            return f"{name}{separator}{i}"

        return self.data.map(fmt)

    # -------------------------------------------------------------------------
    # Renumbering and selection
    # -------------------------------------------------------------------------

    def renumber(self) -> "Names":
        return Names.number(self.positions())

    def _slice(self, keep: bool, fn: Callable[[Position], bool]) -> "Names":
        return Names.number(self.positions().filter(lambda p: fn(p) == keep))

    def slice(self, positions: Iterable[Any], keep: bool = True) -> "Names":
        """Keep (or remove) the given positions; the result is renumbered."""
        wanted = {as_position(p) for p in positions}
        return self._slice(keep, lambda p: p in wanted)

    def slice_regex(self, regex: str, keep: bool = True, separator: Optional[str] = None) -> "Names":
        """
        Keep (or remove) the names whose short string fully matches `regex`.

        The result is renumbered.
        """
        separator = get_settings().separator if separator is None else separator
        pattern = re.compile(regex)
        return self._slice(keep, lambda p: pattern.fullmatch(p.to_short_string(separator)) is not None)

    # -------------------------------------------------------------------------
    # Index updates
    # -------------------------------------------------------------------------

    def set(self, position: Any, index: int) -> "Names":
        return self.set_many({position: index})

    def set_many(self, mapping: Dict[Any, int]) -> "Names":
        """Set the index of existing positions; positions not in the registry are ignored."""
        converted = {as_position(k): v for k, v in mapping.items()}
        return Names(self.data.map(lambda pi: (pi[0], converted.get(pi[0], pi[1]))))

    def move_to_front(self, position: Any) -> "Names":
        """`position` gets index 0, every other index shifts up by one."""
        target = as_position(position)
        return Names(self.data.map(lambda pi: (pi[0], 0 if pi[0] == target else pi[1] + 1)))

    def move_to_back(self, position: Any) -> "Names":
        """
        Renumber so that `position` is last.

        Entries are ordered by (index, position), the target is moved to the
        end of that order and indices 0..n-1 are reassigned densely. Ties on
        index (e.g. after `set`) are therefore broken by position order. The
        registry is returned unchanged when `position` is absent.
        """
        target = as_position(position)
        logger.debug("names move_to_back {}", target)

        order = self.data.map(lambda pi: [pi]).sum(lambda l, r: l + r).map(
            lambda entries: _back_order(entries, target)
        )

        return Names(self.data.map_with_value(order, lambda pi, o: (pi[0], o[pi[0]] if o else pi[1])))

    def __repr__(self) -> str:
        return f"Names({self.to_list()!r})"


def _back_order(entries: List[Tuple[Position, int]], target: Position) -> Optional[Dict[Position, int]]:
    if not any(p == target for p, _ in entries):
        return None
    ordered = sorted(entries, key=lambda pi: (pi[1], pi[0].sort_key()))
    ordered = [pi for pi in ordered if pi[0] != target] + [pi for pi in ordered if pi[0] == target]
    return {p: i for i, (p, _) in enumerate(ordered)}
