"""
Tests for the lazy bulk collection primitive
"""

import pytest

from cube_core import Pipe, ValuePipe


class TestPipe:
    def test_lazy_and_reiterable(self):
        calls = []

        def source():
            calls.append(1)
            return [1, 2, 3]

        doubled = Pipe(source).map(lambda x: x * 2)
        assert calls == []
        assert doubled.to_list() == [2, 4, 6]
        assert doubled.to_list() == [2, 4, 6]
        assert len(calls) == 2

    def test_cache_runs_source_once(self):
        calls = []

        def source():
            calls.append(1)
            return [1, 2]

        cached = Pipe(source).cache()
        assert cached.to_list() == [1, 2]
        assert cached.to_list() == [1, 2]
        assert len(calls) == 1

    def test_element_wise(self):
        pipe = Pipe.from_iterable([1, 2, 3, 4])
        assert pipe.filter(lambda x: x % 2 == 0).to_list() == [2, 4]
        assert pipe.flat_map(lambda x: [x] * (x % 2)).to_list() == [1, 3]
        assert (pipe + Pipe.from_iterable([5])).to_list() == [1, 2, 3, 4, 5]

    def test_distinct_keeps_first(self):
        pipe = Pipe.from_iterable([("a", 1), ("b", 2), ("a", 3)])
        assert pipe.distinct(lambda t: t[0]).to_list() == [("a", 1), ("b", 2)]

    def test_cross(self):
        pairs = Pipe.from_iterable([1, 2]).cross(Pipe.from_iterable(["x", "y"])).to_list()
        assert len(pairs) == 4
        assert (2, "y") in pairs

    def test_sum(self):
        assert Pipe.from_iterable([1, 2, 3]).sum(lambda a, b: a + b).get() == 6
        assert Pipe.empty().sum(lambda a, b: a + b).get() is None
        assert Pipe.from_iterable("abc").size().get() == 3


class TestGrouped:
    def test_reduce(self):
        pipe = Pipe.from_iterable([("a", 1), ("b", 2), ("a", 3)])
        totals = dict(pipe.group_by(lambda t: t[0]).reduce(lambda l, r: (l[0], l[1] + r[1])).map(lambda kv: kv[1]))
        assert totals == {"a": 4, "b": 2}

    def test_join_keeps_multiplicity(self):
        left = Pipe.from_iterable([("a", 1), ("a", 2), ("b", 3)]).group_by(lambda t: t[0])
        right = Pipe.from_iterable([("a", 10), ("a", 20)]).group_by(lambda t: t[0])
        assert len(left.join(right).to_list()) == 4

    def test_left_and_outer_join(self):
        left = Pipe.from_iterable(["a", "b"]).group_by(lambda x: x)
        right = Pipe.from_iterable(["b", "c"]).group_by(lambda x: x)

        assert left.left_join(right).to_list() == [("a", ("a", None)), ("b", ("b", "b"))]
        assert left.outer_join(right).to_list() == [
            ("a", ("a", None)),
            ("b", ("b", "b")),
            ("c", (None, "c")),
        ]

    def test_scan_left_emits_init_first(self):
        pipe = Pipe.from_iterable([("k", 3), ("k", 1), ("k", 2)])
        scanned = (
            pipe.group_by(lambda t: t[0])
            .sort_by(lambda t: t[1])
            .scan_left(0, lambda s, t: s * 10 + t[1])
            .to_list()
        )
        assert scanned == [("k", 0), ("k", 1), ("k", 12), ("k", 123)]

    def test_map_value_stream(self):
        pipe = Pipe.from_iterable(["x", "y", "z"])
        numbered = pipe.group_all().map_value_stream(lambda xs: enumerate(xs)).map(lambda kv: kv[1]).to_list()
        assert numbered == [(0, "x"), (1, "y"), (2, "z")]


class TestValuePipe:
    def test_broadcast_resolved_once_per_run(self):
        calls = []

        def value():
            calls.append(1)
            return (10,)

        result = Pipe.from_iterable([1, 2, 3]).map_with_value(ValuePipe(value), lambda x, v: x + v)
        assert result.to_list() == [11, 12, 13]
        assert len(calls) == 1

    def test_empty_value(self):
        result = Pipe.from_iterable([1]).left_cross(ValuePipe.empty()).to_list()
        assert result == [(1, None)]

    def test_wrap(self):
        vp = ValuePipe.of(3)
        assert ValuePipe.wrap(vp) is vp
        assert ValuePipe.wrap({"a": 1}).get() == {"a": 1}
        assert vp.map(lambda x: x + 1).get() == 4


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
