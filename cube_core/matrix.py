"""
Matrix Operator Set

A Matrix is a lazy collection of Cells together with its declared rank.
Every operator is written once, for any rank, as a graph of Pipe
operations; nothing runs until the result is iterated.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│  Matrix(data: Pipe[Cell], rank)                                              │
├──────────────────────┬──────────────────────────────────────────────────────┤
│  introspection       │ names, types, size, shape, domain                     │
│  selection           │ slice, which, which_in, which_many, get, refine,      │
│                      │ sample, to_map                                        │
│  reduction           │ reduce, reduce_and_expand                 (Reducer)   │
│  derivation          │ derive                                    (Deriver)   │
│  pairwise            │ pairwise, pairwise_between        (PairwiseOperator)  │
│  reshape             │ squash (Squasher), melt, permute                      │
│  partition / sets    │ partition (Partitioner), join, unique, concat         │
│  mutation            │ fill, fill_along, change, set, set_cells, rename,     │
│                      │ transform, transform_and_expand (Transformer), expand │
└──────────────────────┴──────────────────────────────────────────────────────┘

Contract:
    - Operators never mutate; each returns a new Matrix (or Pipe / Names).
    - Dimension, slice, rank and strategy-capability checks happen when the
      operator is called, never while data flows (InvalidDimension,
      RankMismatch, UnsupportedStrategy).
    - Decode failures and undefined reductions show up as missing cells.
    - `*_with_value` variants take a ValuePipe (or a plain value) that is
      resolved once before any cell is processed.

Positions arguments (slice, which_in, change, ...) accept a Names registry,
a Pipe of positions, or any iterable of positions / raw coordinates; plain
iterables are restricted to the names that exist in the matrix.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from loguru import logger

from .cell import Cell
from .content import Content, DiscreteSchema, Schema, Type
from .errors import InvalidDimension, RankMismatch
from .names import Names
from .pipe import Pipe, ValuePipe
from .position import Dimension, Position, as_position, check_distinct
from .slice import Slice, Over
from .config import get_settings
from .strategies.base import require
from .strategies.reducer import Prepare, PrepareWithValue, PresentSingle, PresentMultiple, as_reducer
from .strategies.transformer import (
    Present,
    PresentWithValue,
    PresentExpanded,
    PresentExpandedWithValue,
    as_transformer,
)
from .strategies.deriver import Initialise, InitialiseWithValue, as_deriver
from .strategies.pairwise import Compute, ComputeWithValue, as_operator
from .strategies.squasher import Reduce, ReduceWithValue
from .strategies.partitioner import Assign, AssignWithValue
from .strategies.sampler import Select, SelectWithValue

Predicate = Callable[[Cell], bool]


def _listed(positions: Any) -> List[Any]:
    if isinstance(positions, (Position, str, bytes)) or not isinstance(positions, Iterable):
        return [positions]
    return list(positions)


def _value(value: Any) -> ValuePipe:
    return ValuePipe.wrap(value)


def _first(kv: Tuple) -> Any:
    return kv[0]


def _merge_map(target: Dict, key: Position, entry: Any) -> None:
    if isinstance(entry, dict):
        target.setdefault(key, {}).update(entry)
    else:
        target[key] = entry


class Matrix:
    """Labeled sparse matrix of declared rank."""

    def __init__(self, data: Iterable[Cell], rank: int):
        if rank < 0:
            raise RankMismatch(0, rank, "matrix construction")
        self.data: Pipe[Cell] = data if isinstance(data, Pipe) else Pipe.from_iterable(data)
        self.rank = rank

    # =========================================================================
    # SECTION 1: Construction
    # =========================================================================

    @classmethod
    def from_cells(cls, cells: Iterable[Cell], rank: Optional[int] = None) -> "Matrix":
        """
        Build a matrix from in-memory cells.

        The rank is taken from the first cell when not given; every cell must
        match it.

        Raises:
            RankMismatch: a cell has a different rank
        """
        cells = list(cells)
        if rank is None:
            rank = cells[0].position.rank if cells else 0
        for c in cells:
            if c.position.rank != rank:
                raise RankMismatch(rank, c.position.rank, "from_cells")
        return cls(Pipe.from_iterable(cells), rank)

    @classmethod
    def from_tuples(cls, rows: Iterable[Tuple]) -> "Matrix":
        """Build a matrix from (coordinate, ..., Content) tuples."""
        return cls.from_cells(Cell(Position(*row[:-1]), row[-1]) for row in rows)

    def _derived(self, data: Pipe[Cell], rank: int) -> "Matrix":
        return Matrix(data, rank)

    def _graph(self, operation: str, *details: Any) -> None:
        logger.debug("{} {} on rank {}", operation, " ".join(str(d) for d in details), self.rank)

    def _check_slice(self, slice: Slice) -> Slice:
        return slice.check(self.rank)

    def _check_rank(self, that: "Matrix", operation: str) -> None:
        if that.rank != self.rank:
            raise RankMismatch(self.rank, that.rank, operation)

    def _names(self, slice: Slice, positions: Any) -> Names:
        if isinstance(positions, Names):
            return positions
        if isinstance(positions, Pipe):
            return Names.number(positions.map(as_position))
        return self.names(slice).slice(_listed(positions), keep=True)

    @staticmethod
    def _position_pipe(positions: Any) -> Pipe[Position]:
        if isinstance(positions, Names):
            return positions.positions()
        if isinstance(positions, Pipe):
            return positions.map(as_position)
        return Pipe.from_iterable(as_position(p) for p in _listed(positions))

    # =========================================================================
    # SECTION 2: Introspection
    # =========================================================================

    def names(self, slice: Slice) -> Names:
        """Distinct selected positions, numbered (no index order is defined)."""
        self._check_slice(slice)
        self._graph("names", slice)
        return Names.number(self.data.map(lambda c: slice.selected(c.position)).distinct())

    def types(self, slice: Slice, specific: bool = False) -> Pipe[Tuple[Position, Type]]:
        """
        Variable kind of the content of every selected position.

        Kinds are merged per key; unless `specific`, the result is
        generalised (e.g. Continuous → Numerical).
        """
        self._check_slice(slice)
        self._graph("types", slice, f"specific={specific}")

        def merge(l, r):
            return (l[0], l[1].merge(r[1], specific))

        return (
            self.data
            .map(lambda c: (slice.selected(c.position), c.content.schema.kind))
            .group_by(_first)
            .reduce(merge)
            .map(lambda kv: (kv[0], kv[1][1] if specific else kv[1][1].generalisation()))
        )

    def size(self, dim: Dimension, distinct: bool = False) -> "Matrix":
        """
        Number of distinct coordinates along `dim`, as one 1D cell.

        Set `distinct` when the coordinates are known to be unique to skip
        deduplication.
        """
        dim.check(self.rank)
        self._graph("size", dim)

        coords = self.data.map(lambda c: c.position.get(dim))
        if not distinct:
            coords = coords.distinct()

        count = coords.map(lambda _: 1).sum(lambda a, b: a + b)
        return self._derived(count.map(lambda n: Cell(Position(dim.name), Content(DiscreteSchema(), n))), 1)

    def shape(self) -> "Matrix":
        """Distinct coordinate count of every dimension, one 1D cell per dimension."""
        self._graph("shape")
        return self._derived(
            self.data
            .flat_map(lambda c: ((coord, i) for i, coord in enumerate(c.position)))
            .distinct()
            .group_by(lambda ci: ci[1])
            .size()
            .map(lambda kv: Cell(Position(Dimension(kv[0]).name), Content(DiscreteSchema(), kv[1]))),
            1,
        )

    def domain(self) -> Pipe[Position]:
        """Cartesian product of the distinct coordinates of every dimension."""
        self._graph("domain")
        dom: Pipe[Tuple] = Pipe.from_iterable([()])
        for d in Dimension.all(self.rank):
            coords = self.names(Over(d)).positions().map(lambda p: p.coordinates[0])
            dom = dom.cross(coords).map(lambda ab: ab[0] + (ab[1],))
        return dom.map(lambda coords: Position(*coords))

    # =========================================================================
    # SECTION 3: Selection
    # =========================================================================

    def slice(self, slice: Slice, positions: Any, keep: bool = True) -> "Matrix":
        """
        Keep (or remove) the cells whose selected position is in `positions`.

        Removal is a set difference against `names(slice)`, not a negated
        predicate, so it also works when `positions` is derived data.
        """
        self._check_slice(slice)
        self._graph("slice", slice, f"keep={keep}")

        pos = self._names(slice, positions).data
        if keep:
            wanted = pos
        else:
            wanted = (
                self.names(slice).data
                .group_by(_first)
                .left_join(pos.group_by(_first))
                .flat_map(lambda kv: [] if kv[1][1] is not None else [kv[1][0]])
            )

        return self._derived(
            self.data
            .group_by(lambda c: slice.selected(c.position))
            .join(wanted.group_by(_first))
            .map(lambda kv: kv[1][0]),
            self.rank,
        )

    def which(self, predicate: Predicate) -> Pipe[Position]:
        """Positions of the cells satisfying `predicate`."""
        return self.data.filter(predicate).map(lambda c: c.position)

    def which_in(self, slice: Slice, positions: Any, predicate: Predicate) -> Pipe[Position]:
        return self.which_many(slice, [(positions, predicate)])

    def which_many(self, slice: Slice, pospreds: Sequence[Tuple[Any, Predicate]]) -> Pipe[Position]:
        """
        Evaluate several (positions, predicate) queries and concatenate matches.

        A position matching more than one query is returned once per query.
        """
        self._check_slice(slice)
        self._graph("which", slice, f"queries={len(pospreds)}")

        queries: Pipe = Pipe.empty()
        for pos, pred in pospreds:
            queries = queries + self._names(slice, pos).positions().map(lambda p, pred=pred: (p, pred))

        def matches(kv):
            cell, (_, pred) = kv[1]
            return [cell.position] if pred(cell) else []

        return (
            self.data
            .group_by(lambda c: slice.selected(c.position))
            .join(queries.group_by(_first))
            .flat_map(matches)
        )

    def get(self, positions: Any) -> "Matrix":
        """Cells at exactly the given positions."""
        self._graph("get")
        return self._derived(
            self.data
            .group_by(lambda c: c.position)
            .join(self._position_pipe(positions).group_by(lambda p: p))
            .map(lambda kv: kv[1][0]),
            self.rank,
        )

    def refine(self, fn: Predicate) -> "Matrix":
        return self._derived(self.data.filter(fn), self.rank)

    def refine_with_value(self, fn: Callable[[Cell, Any], bool], value: Any) -> "Matrix":
        return self._derived(self.data.filter_with_value(_value(value), fn), self.rank)

    def sample(self, sampler: Any) -> "Matrix":
        require(sampler, [Select], "sample")
        return self._derived(self.data.filter(lambda c: sampler.select(c.position)), self.rank)

    def sample_with_value(self, sampler: Any, value: Any) -> "Matrix":
        require(sampler, [SelectWithValue], "sample_with_value")
        return self._derived(
            self.data.filter_with_value(_value(value), lambda c, v: sampler.select_with_value(c.position, v)),
            self.rank,
        )

    def to_map(self, slice: Slice) -> ValuePipe[Dict]:
        """
        In-memory map of the matrix keyed by selected position.

        Values are Content when the remainder is empty, otherwise a dict
        from remainder position to Content. Avoid on large matrices.
        """
        self._check_slice(slice)
        self._graph("to_map", slice)
        nested = slice.remainder_rank(self.rank) > 0

        def entry(c: Cell) -> Any:
            return {slice.remainder(c.position): c.content} if nested else c.content

        def build():
            result: Dict = {}
            for c in self.data:
                _merge_map(result, slice.selected(c.position), entry(c))
            yield result

        return ValuePipe(build)

    # =========================================================================
    # SECTION 4: Reduction
    # =========================================================================

    def _reduce(self, seeds: Pipe, reducer: Any) -> Pipe:
        return (
            seeds
            .group_by(_first)
            .reduce(lambda l, r: (l[0], reducer.reduce(l[1], r[1])))
            .map(lambda kv: kv[1])
        )

    def reduce(self, slice: Slice, reducer: Any) -> "Matrix":
        """Reduce every selected key to at most one cell; the result has the selected rank."""
        self._check_slice(slice)
        require(reducer, [Prepare, PresentSingle], "reduce")
        self._graph("reduce", slice, reducer)

        seeds = self.data.map(lambda c: (slice.selected(c.position), reducer.prepare(slice, c)))
        return self._derived(
            self._reduce(seeds, reducer).flat_map(lambda pt: _opt(reducer.present_single(*pt))),
            slice.selected_rank(self.rank),
        )

    def reduce_with_value(self, slice: Slice, reducer: Any, value: Any) -> "Matrix":
        self._check_slice(slice)
        require(reducer, [PrepareWithValue, PresentSingle], "reduce_with_value")
        self._graph("reduce_with_value", slice, reducer)

        seeds = self.data.map_with_value(
            _value(value), lambda c, v: (slice.selected(c.position), reducer.prepare_with_value(slice, c, v))
        )
        return self._derived(
            self._reduce(seeds, reducer).flat_map(lambda pt: _opt(reducer.present_single(*pt))),
            slice.selected_rank(self.rank),
        )

    def reduce_and_expand(self, slice: Slice, reducers: Any) -> "Matrix":
        """
        Reduce with one or more reducers in a single pass.

        Each reducer presents zero or more cells with a coordinate appended
        to the selected key, so the result has the selected rank + 1.
        """
        self._check_slice(slice)
        reducer = require(as_reducer(reducers), [Prepare, PresentMultiple], "reduce_and_expand")
        self._graph("reduce_and_expand", slice, reducer)

        seeds = self.data.map(lambda c: (slice.selected(c.position), reducer.prepare(slice, c)))
        return self._derived(
            self._reduce(seeds, reducer).flat_map(lambda pt: reducer.present_multiple(*pt)),
            slice.selected_rank(self.rank) + 1,
        )

    def reduce_and_expand_with_value(self, slice: Slice, reducers: Any, value: Any) -> "Matrix":
        self._check_slice(slice)
        reducer = require(as_reducer(reducers), [PrepareWithValue, PresentMultiple], "reduce_and_expand_with_value")
        self._graph("reduce_and_expand_with_value", slice, reducer)

        seeds = self.data.map_with_value(
            _value(value), lambda c, v: (slice.selected(c.position), reducer.prepare_with_value(slice, c, v))
        )
        return self._derived(
            self._reduce(seeds, reducer).flat_map(lambda pt: reducer.present_multiple(*pt)),
            slice.selected_rank(self.rank) + 1,
        )

    # =========================================================================
    # SECTION 5: Derivation
    # =========================================================================

    def _derive(self, slice: Slice, rows: Pipe, step: Callable) -> "Matrix":
        return self._derived(
            rows
            .group_by(lambda row: row[0].position)
            .sort_by(lambda row: row[1])
            .scan_left(None, step)
            .flat_map(lambda kv: kv[1][1] if kv[1] is not None else []),
            slice.selected_rank(self.rank) + 1,
        )

    def derive(self, slice: Slice, derivers: Any) -> "Matrix":
        """
        Ordered, stateful scan per selected key.

        Cells are visited in ascending remainder order; the first cell of a
        key only initialises the state and produces no output.
        """
        self._check_slice(slice)
        deriver = require(as_deriver(derivers), [Initialise], "derive")
        self._graph("derive", slice, deriver)

        def step(state, row):
            cell, rem = row
            if state is None:
                return (deriver.initialise(slice, cell, rem), [])
            return deriver.present(slice, cell, rem, state[0])

        rows = self.data.map(lambda c: (Cell(slice.selected(c.position), c.content), slice.remainder(c.position)))
        return self._derive(slice, rows, step)

    def derive_with_value(self, slice: Slice, derivers: Any, value: Any) -> "Matrix":
        self._check_slice(slice)
        deriver = require(as_deriver(derivers), [InitialiseWithValue], "derive_with_value")
        self._graph("derive_with_value", slice, deriver)

        def step(state, row):
            cell, rem, ext = row
            if state is None:
                return (deriver.initialise_with_value(slice, cell, rem, ext), [])
            return deriver.present(slice, cell, rem, state[0])

        rows = self.data.map_with_value(
            _value(value),
            lambda c, v: (Cell(slice.selected(c.position), c.content), slice.remainder(c.position), v),
        )
        return self._derive(slice, rows, step)

    # =========================================================================
    # SECTION 6: Pairwise
    # =========================================================================

    def _pairs(self, slice: Slice, that: "Matrix") -> Pipe[Tuple[Cell, Cell, Position]]:
        """
        (left, right, remainder) for every pair of keys sharing a remainder.

        Key pairs are the cross product of this matrix's names with `that`'s
        names, crossed with this matrix's remainder names, then joined twice
        against the cell values.
        """
        def by_key(m: "Matrix"):
            return m.data.group_by(lambda c: (slice.selected(c.position), slice.remainder(c.position)))

        left_names = self.names(slice).positions()
        right_names = that.names(slice).positions()
        remainders = self.names(slice.inverse).positions()

        def left_joined(kv):
            (l, r, o), lc = kv[1]
            return (l, r, o, lc)

        def right_joined(kv):
            (l, r, o, lc), rc = kv[1]
            return (Cell(l, lc.content), Cell(r, rc.content), o)

        return (
            left_names.cross(right_names).cross(remainders)
            .map(lambda lro: (lro[0][0], lro[0][1], lro[1]))
            .group_by(lambda t: (t[0], t[2]))
            .join(by_key(self))
            .map(left_joined)
            .group_by(lambda t: (t[1], t[2]))
            .join(by_key(that))
            .map(right_joined)
        )

    def pairwise(self, slice: Slice, operators: Any) -> "Matrix":
        """
        Apply operators to every pair of selected keys sharing a remainder.

        O(keys²) per remainder value; pre-filter to a small key set.
        """
        self._check_slice(slice)
        op = require(as_operator(operators), [Compute], "pairwise")
        self._graph("pairwise", slice, op)
        return self._derived(
            self._pairs(slice, self).flat_map(lambda t: op.compute(slice, *t)),
            slice.remainder_rank(self.rank) + 1,
        )

    def pairwise_with_value(self, slice: Slice, operators: Any, value: Any) -> "Matrix":
        self._check_slice(slice)
        op = require(as_operator(operators), [ComputeWithValue], "pairwise_with_value")
        self._graph("pairwise_with_value", slice, op)
        return self._derived(
            self._pairs(slice, self).flat_map_with_value(
                _value(value), lambda t, v: op.compute_with_value(slice, *t, v)
            ),
            slice.remainder_rank(self.rank) + 1,
        )

    def pairwise_between(self, slice: Slice, that: "Matrix", operators: Any) -> "Matrix":
        """Like pairwise, with left keys from this matrix and right keys from `that`."""
        self._check_slice(slice)
        self._check_rank(that, "pairwise_between")
        op = require(as_operator(operators), [Compute], "pairwise_between")
        self._graph("pairwise_between", slice, op)
        return self._derived(
            self._pairs(slice, that).flat_map(lambda t: op.compute(slice, *t)),
            slice.remainder_rank(self.rank) + 1,
        )

    def pairwise_between_with_value(self, slice: Slice, that: "Matrix", operators: Any, value: Any) -> "Matrix":
        self._check_slice(slice)
        self._check_rank(that, "pairwise_between_with_value")
        op = require(as_operator(operators), [ComputeWithValue], "pairwise_between_with_value")
        self._graph("pairwise_between_with_value", slice, op)
        return self._derived(
            self._pairs(slice, that).flat_map_with_value(
                _value(value), lambda t, v: op.compute_with_value(slice, *t, v)
            ),
            slice.remainder_rank(self.rank) + 1,
        )

    # =========================================================================
    # SECTION 7: Reshape
    # =========================================================================

    def squash(self, dim: Dimension, squasher: Any) -> "Matrix":
        """Remove `dim`, collapsing cells that then share a position with `squasher`."""
        dim.check(self.rank)
        require(squasher, [Reduce], "squash")
        self._graph("squash", dim, squasher)
        return self._derived(
            self.data
            .group_by(lambda c: c.position.remove(dim))
            .reduce(lambda x, y: squasher.reduce(dim, x, y))
            .map(lambda kv: Cell(kv[0], kv[1].content)),
            self.rank - 1,
        )

    def squash_with_value(self, dim: Dimension, squasher: Any, value: Any) -> "Matrix":
        dim.check(self.rank)
        require(squasher, [ReduceWithValue], "squash_with_value")
        self._graph("squash_with_value", dim, squasher)
        return self._derived(
            self.data
            .left_cross(_value(value))
            .group_by(lambda cv: cv[0].position.remove(dim))
            .reduce(lambda x, y: (squasher.reduce_with_value(dim, x[0], y[0], x[1]), x[1]))
            .map(lambda kv: Cell(kv[0], kv[1][0].content)),
            self.rank - 1,
        )

    def melt(self, dim: Dimension, into: Dimension, separator: Optional[str] = None) -> "Matrix":
        """Merge coordinate `dim` into `into` ("into<sep>dim"); one-to-one, rank - 1."""
        dim.check(self.rank)
        into.check(self.rank)
        if dim == into:
            raise InvalidDimension(dim, self.rank, "cannot melt a dimension into itself")
        separator = get_settings().melt_separator if separator is None else separator
        self._graph("melt", dim, into)
        return self._derived(
            self.data.map(lambda c: Cell(c.position.melt(dim, into, separator), c.content)),
            self.rank - 1,
        )

    def permute(self, *order: Dimension) -> "Matrix":
        if len(order) != self.rank:
            raise InvalidDimension(len(order), self.rank, "permutation must name every dimension")
        check_distinct(order, self.rank)
        self._graph("permute", *order)
        return self._derived(self.data.map(lambda c: Cell(c.position.permute(order), c.content)), self.rank)

    # =========================================================================
    # SECTION 8: Partitioning & set operations
    # =========================================================================

    def partition(self, partitioner: Any) -> "Partitions":
        from .partitions import Partitions

        require(partitioner, [Assign], "partition")
        self._graph("partition", partitioner)
        return Partitions(self.data.flat_map(lambda c: [(t, c) for t in partitioner.assign(c.position)]), self.rank)

    def partition_with_value(self, partitioner: Any, value: Any) -> "Partitions":
        from .partitions import Partitions

        require(partitioner, [AssignWithValue], "partition_with_value")
        self._graph("partition_with_value", partitioner)
        return Partitions(
            self.data.flat_map_with_value(
                _value(value), lambda c, v: [(t, c) for t in partitioner.assign_with_value(c.position, v)]
            ),
            self.rank,
        )

    def join(self, slice: Slice, that: "Matrix") -> "Matrix":
        """Cells of both matrices whose selected key exists in both."""
        self._check_slice(slice)
        self._check_rank(that, "join")
        self._graph("join", slice)

        keep = (
            self.names(slice).data.group_by(_first)
            .join(that.names(slice).data.group_by(_first))
            .map(_first)
        )

        def kept(m: "Matrix") -> Pipe[Cell]:
            return (
                m.data.group_by(lambda c: slice.selected(c.position))
                .join(keep.group_by(lambda p: p))
                .map(lambda kv: kv[1][0])
            )

        return self._derived(kept(self) + kept(that), self.rank)

    def unique(self) -> Pipe[Content]:
        """Distinct contents, compared by canonical string."""
        return self.data.map(lambda c: c.content).distinct(str)

    def unique_along(self, slice: Slice) -> "Matrix":
        """Distinct (selected position, content) cells, compared by canonical string."""
        self._check_slice(slice)
        return self._derived(
            self.data
            .map(lambda c: Cell(slice.selected(c.position), c.content))
            .distinct(lambda c: c.to_canonical_string()),
            slice.selected_rank(self.rank),
        )

    def concat(self, that: "Matrix") -> "Matrix":
        self._check_rank(that, "concat")
        return self._derived(self.data + that.data, self.rank)

    __add__ = concat

    # =========================================================================
    # SECTION 9: Mutation
    # =========================================================================

    def fill(self, content: Content) -> "Matrix":
        """Make the matrix dense over `domain()`, using `content` for missing cells."""
        self._graph("fill")
        return self._derived(
            self.domain()
            .group_by(lambda p: p)
            .left_join(self.data.group_by(lambda c: c.position))
            .map(lambda kv: kv[1][1] if kv[1][1] is not None else Cell(kv[0], content)),
            self.rank,
        )

    def fill_along(self, slice: Slice, values: "Matrix") -> "Matrix":
        """
        Make the matrix dense, using per-key contents for missing cells.

        `values` is keyed by `slice.selected` of its positions when it has
        this matrix's rank, otherwise its positions are the keys. Keys with
        no value in `values` are left sparse.
        """
        self._check_slice(slice)
        self._graph("fill_along", slice)

        if values.rank == self.rank:
            def key(c):
                return slice.selected(c.position)
        elif values.rank == slice.selected_rank(self.rank):
            def key(c):
                return c.position
        else:
            raise RankMismatch(slice.selected_rank(self.rank), values.rank, "fill_along")

        dense = (
            self.domain()
            .group_by(lambda p: slice.selected(p))
            .join(values.data.group_by(key))
            .map(lambda kv: Cell(kv[1][0], kv[1][1].content))
        )
        return self._derived(
            dense
            .group_by(lambda c: c.position)
            .outer_join(self.data.group_by(lambda c: c.position))
            .map(lambda kv: kv[1][1] if kv[1][1] is not None else kv[1][0]),
            self.rank,
        )

    def change(self, slice: Slice, positions: Any, schema: Schema) -> "Matrix":
        """
        Re-decode the content of the selected cells under `schema`.

        Cells whose value does not decode under the new schema are dropped.
        """
        self._check_slice(slice)
        self._graph("change", slice, schema)

        def redecode(kv):
            cell, match = kv[1]
            if match is None:
                return [cell]
            con = schema.decode(cell.content.value.to_short_string())
            return [Cell(cell.position, con)] if con is not None else []

        return self._derived(
            self.data
            .group_by(lambda c: slice.selected(c.position))
            .left_join(self._names(slice, positions).data.group_by(_first))
            .flat_map(redecode),
            self.rank,
        )

    def set(self, positions: Any, content: Content) -> "Matrix":
        """Set `content` at every position already in the matrix; other positions are ignored."""
        return self.set_cells(self._position_pipe(positions).map(lambda p: Cell(p, content)))

    def set_cells(self, values: Any) -> "Matrix":
        """Replace existing cells by position; cells at new positions are not added."""
        if isinstance(values, Matrix):
            self._check_rank(values, "set_cells")
            cells = values.data
        elif isinstance(values, Pipe):
            cells = values
        else:
            cells = Pipe.from_iterable([values] if isinstance(values, Cell) else values)
        self._graph("set")
        return self._derived(
            self.data
            .group_by(lambda c: c.position)
            .left_join(cells.group_by(lambda c: c.position))
            .map(lambda kv: kv[1][1] if kv[1][1] is not None else kv[1][0]),
            self.rank,
        )

    def rename(self, dim: Dimension, renamer: Callable[[Dimension, Cell], Position]) -> "Matrix":
        dim.check(self.rank)
        return self._derived(self.data.map(lambda c: Cell(renamer(dim, c), c.content)), self.rank)

    def rename_with_value(self, dim: Dimension, renamer: Callable[[Dimension, Cell, Any], Position],
                          value: Any) -> "Matrix":
        dim.check(self.rank)
        return self._derived(
            self.data.map_with_value(_value(value), lambda c, v: Cell(renamer(dim, c, v), c.content)),
            self.rank,
        )

    def transform(self, transformers: Any) -> "Matrix":
        t = require(as_transformer(transformers), [Present], "transform")
        self._graph("transform", t)
        return self._derived(self.data.flat_map(t.present), self.rank)

    def transform_with_value(self, transformers: Any, value: Any) -> "Matrix":
        t = require(as_transformer(transformers), [PresentWithValue], "transform_with_value")
        self._graph("transform_with_value", t)
        return self._derived(self.data.flat_map_with_value(_value(value), t.present_with_value), self.rank)

    def transform_and_expand(self, transformers: Any) -> "Matrix":
        t = require(as_transformer(transformers), [PresentExpanded], "transform_and_expand")
        self._graph("transform_and_expand", t)
        return self._derived(self.data.flat_map(t.present_expanded), self.rank + 1)

    def transform_and_expand_with_value(self, transformers: Any, value: Any) -> "Matrix":
        t = require(as_transformer(transformers), [PresentExpandedWithValue], "transform_and_expand_with_value")
        self._graph("transform_and_expand_with_value", t)
        return self._derived(
            self.data.flat_map_with_value(_value(value), t.present_expanded_with_value),
            self.rank + 1,
        )

    def expand(self, expander: Callable[[Cell], Any]) -> "Matrix":
        """Append the coordinate `expander(cell)` to every position (rank + 1)."""
        return self._derived(
            self.data.map(lambda c: Cell(c.position.append(expander(c)), c.content)),
            self.rank + 1,
        )

    def expand_with_value(self, expander: Callable[[Cell, Any], Any], value: Any) -> "Matrix":
        return self._derived(
            self.data.map_with_value(_value(value), lambda c, v: Cell(c.position.append(expander(c, v)), c.content)),
            self.rank + 1,
        )

    # =========================================================================
    # SECTION 10: Output
    # =========================================================================

    def to_short_strings(self, separator: Optional[str] = None, descriptive: bool = False) -> Pipe[str]:
        return self.data.map(lambda c: c.to_short_string(separator, descriptive))

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.data)

    def to_list(self) -> List[Cell]:
        return self.data.to_list()

    def __repr__(self) -> str:
        return f"Matrix(rank={self.rank})"


def _opt(cell: Optional[Cell]) -> List[Cell]:
    return [cell] if cell is not None else []
