"""
Bulk Collection Primitive

The matrix layer never touches data directly; it describes its work as
declarative collection operations on a Pipe:

    Pipe[T]                      lazy, re-iterable collection
      .map / .flat_map / .filter
      .distinct(key)             dedup on a caller supplied key
      .cross(other)              cartesian product
      .group_by(key) → Grouped   group-by-key
      .sum(plus)     → ValuePipe fold to a single value
      .*_with_value(value, fn)   broadcast-value join

    Grouped[K, V]
      .reduce(fn)                per-key fold (fn associative & commutative)
      .join / .left_join / .outer_join
      .sort_by(key).scan_left    ordered per-key scan
      .map_value_stream(fn)      per-key stream rewrite

    ValuePipe[T]                 at most one value (broadcast side input)

Contract:
    - No operation deduplicates unless it says so (joins keep multiplicity).
    - A broadcast value is fully resolved before the first element it is
      combined with is processed, and is read-only afterwards.
    - Within one key, scan_left runs strictly in sort order; separate keys
      are independent.

This module is the local backend of that contract: every pipe re-runs its
chain of generators on iteration, and grouping materialises one key → list
table per run. A distributed backend only needs to provide the same methods.
"""

from __future__ import annotations
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)
from functools import reduce as fold

from loguru import logger

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K")
V = TypeVar("V")
W = TypeVar("W")


# =============================================================================
# SECTION 1: Pipe
# =============================================================================

class Pipe(Generic[T]):
    """Lazy, re-iterable collection."""

    def __init__(self, source: Callable[[], Iterable[T]]):
        self._source = source

    @classmethod
    def from_iterable(cls, items: Iterable[T]) -> "Pipe[T]":
        data = list(items)
        return cls(lambda: data)

    @classmethod
    def empty(cls) -> "Pipe[T]":
        return cls(lambda: ())

    def __iter__(self) -> Iterator[T]:
        return iter(self._source())

    def to_list(self) -> List[T]:
        return list(self)

    # -------------------------------------------------------------------------
    # Element-wise operations
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[T], U]) -> "Pipe[U]":
        src = self._source
        return Pipe(lambda: (fn(x) for x in src()))

    def flat_map(self, fn: Callable[[T], Iterable[U]]) -> "Pipe[U]":
        src = self._source
        return Pipe(lambda: (y for x in src() for y in fn(x)))

    def filter(self, fn: Callable[[T], bool]) -> "Pipe[T]":
        src = self._source
        return Pipe(lambda: (x for x in src() if fn(x)))

    def concat(self, other: "Pipe[T]") -> "Pipe[T]":
        left, right = self._source, other._source

        def run():
            yield from left()
            yield from right()

        return Pipe(run)

    __add__ = concat

    def distinct(self, key: Optional[Callable[[T], Any]] = None) -> "Pipe[T]":
        """Keep the first element seen for every key (the element itself by default)."""
        src = self._source

        def run():
            seen = set()
            for x in src():
                k = key(x) if key is not None else x
                if k in seen:
                    continue
                seen.add(k)
                yield x

        return Pipe(run)

    def cross(self, other: "Pipe[U]") -> "Pipe[Tuple[T, U]]":
        src = self._source

        def run():
            right = list(other)
            for a in src():
                for b in right:
                    yield (a, b)

        return Pipe(run)

    def cache(self) -> "Pipe[T]":
        """Materialise on first iteration and replay afterwards."""
        src = self._source
        store: List[List[T]] = []

        def run():
            if not store:
                store.append(list(src()))
            return store[0]

        return Pipe(run)

    # -------------------------------------------------------------------------
    # Grouping and folding
    # -------------------------------------------------------------------------

    def group_by(self, key: Callable[[T], K]) -> "Grouped[K, T]":
        return Grouped(self, key)

    def group_all(self) -> "Grouped[Tuple, T]":
        return Grouped(self, lambda _: ())

    def sum(self, plus: Callable[[T, T], T]) -> "ValuePipe[T]":
        """Fold every element with `plus`; empty pipes give an empty ValuePipe."""
        src = self._source

        def run():
            it = iter(src())
            try:
                first = next(it)
            except StopIteration:
                return
            yield fold(plus, it, first)

        return ValuePipe(run)

    def size(self) -> "ValuePipe[int]":
        src = self._source
        return ValuePipe(lambda: (sum(1 for _ in src()),))

    # -------------------------------------------------------------------------
    # Broadcast value operations
    # -------------------------------------------------------------------------

    def map_with_value(self, value: "ValuePipe[W]", fn: Callable[[T, Optional[W]], U]) -> "Pipe[U]":
        src = self._source

        def run():
            v = value.get()
            for x in src():
                yield fn(x, v)

        return Pipe(run)

    def flat_map_with_value(self, value: "ValuePipe[W]",
                            fn: Callable[[T, Optional[W]], Iterable[U]]) -> "Pipe[U]":
        src = self._source

        def run():
            v = value.get()
            for x in src():
                yield from fn(x, v)

        return Pipe(run)

    def filter_with_value(self, value: "ValuePipe[W]", fn: Callable[[T, Optional[W]], bool]) -> "Pipe[T]":
        src = self._source

        def run():
            v = value.get()
            for x in src():
                if fn(x, v):
                    yield x

        return Pipe(run)

    def left_cross(self, value: "ValuePipe[W]") -> "Pipe[Tuple[T, Optional[W]]]":
        return self.map_with_value(value, lambda x, v: (x, v))


# =============================================================================
# SECTION 2: Grouped
# =============================================================================

class Grouped(Generic[K, V]):
    """Elements of a pipe grouped by key (insertion order of first occurrence)."""

    def __init__(self, pipe: Pipe[V], key: Callable[[V], K]):
        self._pipe = pipe
        self._key = key

    def groups(self) -> Dict[K, List[V]]:
        table: Dict[K, List[V]] = {}
        for x in self._pipe:
            table.setdefault(self._key(x), []).append(x)
        logger.trace("grouped {} keys", len(table))
        return table

    def keys(self) -> Pipe[K]:
        return Pipe(lambda: iter(self.groups().keys()))

    def values(self) -> Pipe[V]:
        return Pipe(lambda: (v for vs in self.groups().values() for v in vs))

    def reduce(self, fn: Callable[[V, V], V]) -> Pipe[Tuple[K, V]]:
        """Per-key fold; `fn` must be associative and commutative."""
        return Pipe(lambda: ((k, fold(fn, vs)) for k, vs in self.groups().items()))

    def size(self) -> Pipe[Tuple[K, int]]:
        return Pipe(lambda: ((k, len(vs)) for k, vs in self.groups().items()))

    def map_value_stream(self, fn: Callable[[Iterator[V]], Iterable[U]]) -> Pipe[Tuple[K, U]]:
        def run():
            for k, vs in self.groups().items():
                for u in fn(iter(vs)):
                    yield (k, u)

        return Pipe(run)

    def join(self, other: "Grouped[K, W]") -> Pipe[Tuple[K, Tuple[V, W]]]:
        """Inner join; every matching (left, right) pair is emitted."""
        def run():
            right = other.groups()
            for k, vs in self.groups().items():
                ws = right.get(k)
                if not ws:
                    continue
                for v in vs:
                    for w in ws:
                        yield (k, (v, w))

        return Pipe(run)

    def left_join(self, other: "Grouped[K, W]") -> Pipe[Tuple[K, Tuple[V, Optional[W]]]]:
        def run():
            right = other.groups()
            for k, vs in self.groups().items():
                ws = right.get(k) or [None]
                for v in vs:
                    for w in ws:
                        yield (k, (v, w))

        return Pipe(run)

    def outer_join(self, other: "Grouped[K, W]") -> Pipe[Tuple[K, Tuple[Optional[V], Optional[W]]]]:
        def run():
            left = self.groups()
            right = other.groups()
            for k, vs in left.items():
                ws = right.get(k) or [None]
                for v in vs:
                    for w in ws:
                        yield (k, (v, w))
            for k, ws in right.items():
                if k in left:
                    continue
                for w in ws:
                    yield (k, (None, w))

        return Pipe(run)

    def sort_by(self, fn: Callable[[V], Any]) -> "SortedGrouped[K, V]":
        return SortedGrouped(self._pipe, self._key, fn)


class SortedGrouped(Grouped[K, V]):
    """Grouped collection whose per-key values are (stably) sorted."""

    def __init__(self, pipe: Pipe[V], key: Callable[[V], K], order: Callable[[V], Any]):
        super().__init__(pipe, key)
        self._order = order

    def groups(self) -> Dict[K, List[V]]:
        table = super().groups()
        for vs in table.values():
            vs.sort(key=self._order)
        return table

    def scan_left(self, init: U, fn: Callable[[U, V], U]) -> Pipe[Tuple[K, U]]:
        """
        Ordered per-key scan.

        Emits (key, init) followed by (key, state) after each value, strictly
        in sort order within the key.
        """
        def run():
            for k, vs in self.groups().items():
                state = init
                yield (k, state)
                for v in vs:
                    state = fn(state, v)
                    yield (k, state)

        return Pipe(run)


# =============================================================================
# SECTION 3: ValuePipe
# =============================================================================

class ValuePipe(Pipe[T]):
    """A pipe holding at most one value, used as a broadcast side input."""

    @classmethod
    def of(cls, value: T) -> "ValuePipe[T]":
        return cls(lambda: (value,))

    @classmethod
    def empty(cls) -> "ValuePipe[T]":
        return cls(lambda: ())

    @classmethod
    def wrap(cls, value: Any) -> "ValuePipe":
        """Pass ValuePipes through, wrap anything else with `of`."""
        return value if isinstance(value, ValuePipe) else cls.of(value)

    def get(self) -> Optional[T]:
        for v in self:
            return v
        return None

    def map(self, fn: Callable[[T], U]) -> "ValuePipe[U]":
        src = self._source
        return ValuePipe(lambda: (fn(x) for x in src()))
