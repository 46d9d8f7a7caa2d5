"""
Tests for reducers: fold laws and presented content
"""

from functools import reduce as fold
import math

import pytest

from cube_core import Cell, Position, Over, First
from cube_core.strategies import (
    Count,
    Sum,
    Mean,
    Min,
    Max,
    Moments,
    Entropy,
    CombinationReducer,
)

from conftest import num, nom

SLICE = Over(First)


def seeds(reducer, contents):
    return [reducer.prepare(SLICE, Cell(Position(i), c)) for i, c in enumerate(contents)]


def presented(reducer, state):
    cell = reducer.present_single(Position("k"), state)
    return None if cell is None else cell.content.value.as_double()


NUMBERS = [num(v) for v in (3.0, 1.0, 4.0, 1.0, 5.0, 9.0)]


class TestFoldLaws:
    @pytest.mark.parametrize("reducer", [Count(), Sum(), Mean(), Min(), Max(), Entropy()])
    def test_order_and_grouping_do_not_matter(self, reducer):
        s = seeds(reducer, NUMBERS)
        left = fold(reducer.reduce, s)
        right = fold(reducer.reduce, list(reversed(s)))
        split = reducer.reduce(fold(reducer.reduce, s[:2]), fold(reducer.reduce, s[2:]))

        assert presented(reducer, left) == pytest.approx(presented(reducer, right))
        assert presented(reducer, left) == pytest.approx(presented(reducer, split))

    def test_moments_merge_is_order_free(self):
        reducer = Moments()
        s = seeds(reducer, NUMBERS)
        forward = fold(reducer.reduce, s)
        backward = fold(reducer.reduce, list(reversed(s)))
        assert forward == pytest.approx(backward)


class TestPresentation:
    def test_count_sum_mean(self):
        assert presented(Count(), fold(Count().reduce, seeds(Count(), NUMBERS))) == 6.0
        assert presented(Sum(), fold(Sum().reduce, seeds(Sum(), NUMBERS))) == 23.0
        assert presented(Mean(), fold(Mean().reduce, seeds(Mean(), NUMBERS))) == pytest.approx(23.0 / 6)

    def test_min_max(self):
        assert presented(Min(), fold(Min().reduce, seeds(Min(), NUMBERS))) == 1.0
        assert presented(Max(), fold(Max().reduce, seeds(Max(), NUMBERS))) == 9.0

    def test_non_numeric_is_absent(self):
        contents = [num(1.0), nom("x")]
        for reducer in (Sum(), Mean(), Min(), Max()):
            assert presented(reducer, fold(reducer.reduce, seeds(reducer, contents))) is None
            assert presented(reducer, fold(reducer.reduce, seeds(reducer, list(reversed(contents))))) is None

    def test_present_multiple_needs_name(self):
        state = fold(Sum().reduce, seeds(Sum(), NUMBERS))
        assert Sum().present_multiple(Position("k"), state) == []
        cells = Sum("total").present_multiple(Position("k"), state)
        assert [c.position for c in cells] == [Position("k", "total")]

    def test_moments(self):
        reducer = Moments()
        state = fold(reducer.reduce, seeds(reducer, [num(v) for v in (1.0, 2.0, 3.0, 4.0)]))
        stats = {c.position: c.content.value.as_double() for c in reducer.present_multiple(Position("k"), state)}

        assert stats[Position("k", "mean")] == pytest.approx(2.5)
        assert stats[Position("k", "std")] == pytest.approx(math.sqrt(1.25))
        assert stats[Position("k", "skewness")] == pytest.approx(0.0, abs=1e-12)
        assert stats[Position("k", "kurtosis")] == pytest.approx(1.64)

    def test_moments_of_constant_values(self):
        reducer = Moments()
        state = fold(reducer.reduce, seeds(reducer, [num(2.0), num(2.0)]))
        names = [c.position for c in reducer.present_multiple(Position("k"), state)]
        assert names == [Position("k", "mean"), Position("k", "std")]

    def test_entropy(self):
        contents = [nom("a"), nom("a"), nom("b"), nom("b")]
        state = fold(Entropy().reduce, seeds(Entropy(), contents))
        assert presented(Entropy(), state) == pytest.approx(1.0)
        assert presented(Entropy(negate=True), state) == pytest.approx(-1.0)
        assert presented(Entropy(), {"a": 4}) == 0.0

    def test_combination(self):
        reducer = CombinationReducer([Count("n"), Max("max")])
        state = fold(reducer.reduce, seeds(reducer, NUMBERS))
        cells = {c.position: c.content.value.as_double() for c in reducer.present_multiple(Position("k"), state)}
        assert cells == {Position("k", "n"): 6.0, Position("k", "max"): 9.0}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
