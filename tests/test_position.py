"""
Tests for dimensions, positions and slices
"""

from datetime import date
from itertools import combinations

import pytest

from cube_core import (
    Dimension,
    First,
    Second,
    Third,
    Fourth,
    Position,
    Over,
    Along,
    InvalidDimension,
    StringValue,
    LongValue,
)


class TestDimension:
    def test_names(self):
        assert First.name == "First"
        assert Dimension(4).name == "Fifth"
        assert Dimension(7).name == "Dimension8"

    def test_negative_index(self):
        with pytest.raises(InvalidDimension):
            Dimension(-1)

    def test_check(self):
        assert Second.check(2) == Second
        with pytest.raises(InvalidDimension):
            Third.check(2)


class TestPosition:
    def test_rank_and_get(self):
        p = Position(1, "a")
        assert p.rank == 2
        assert p.get(First) == LongValue(1)
        assert p.get(Second) == StringValue("a")

    def test_get_out_of_range(self):
        with pytest.raises(InvalidDimension):
            Position(1, "a").get(Third)

    def test_update_remove(self):
        p = Position(1, "a")
        assert p.update(Second, "b") == Position(1, "b")
        assert p.remove(First) == Position("a")
        assert p.remove(First).rank == 1

    def test_insert(self):
        p = Position(1, "a")
        assert p.insert(First, 0) == Position(0, 1, "a")
        assert p.insert(Third, "z") == Position(1, "a", "z")
        with pytest.raises(InvalidDimension):
            p.insert(Fourth, "z")

    def test_append_prepend(self):
        assert Position(1).append("x") == Position(1, "x")
        assert Position(1).prepend("x") == Position("x", 1)

    def test_melt(self):
        p = Position(1, "a", date(2020, 1, 1))
        assert p.melt(Third, Second, ".") == Position(1, "a.2020-01-01")

    def test_melt_into_itself(self):
        with pytest.raises(InvalidDimension):
            Position(1, "a").melt(Second, Second)

    def test_permute(self):
        assert Position(1, "a").permute([Second, First]) == Position("a", 1)
        with pytest.raises(InvalidDimension):
            Position(1, "a").permute([First])
        with pytest.raises(InvalidDimension):
            Position(1, "a").permute([First, First])

    def test_ordering(self):
        assert Position(1, "b") < Position(2, "a")
        assert Position(1, "a") < Position(1, "b")
        assert sorted([Position(2), Position(1)]) == [Position(1), Position(2)]

    def test_structural_equality(self):
        assert len({Position(1, "a"), Position(1, "a"), Position(1, "b")}) == 2

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Position(1).foo = 2

    def test_short_string(self):
        assert Position(1, "a").to_short_string() == "1|a"
        assert Position(1, "a").to_short_string(",") == "1,a"
        assert repr(Position(1, "a")).startswith("Position2D(")


class TestSlice:
    def _slices(self, rank):
        dims = Dimension.all(rank)
        slices = []
        for n in range(1, rank + 1):
            for combo in combinations(dims, n):
                slices += [Over(*combo), Along(*combo)]
        return slices

    def test_reconstruct_inverts_split(self):
        p = Position(1, "a", date(2020, 1, 1))
        for s in self._slices(3):
            assert s.reconstruct(s.selected(p), s.remainder(p)) == p

    def test_over_and_along(self):
        p = Position(1, "a", date(2020, 1, 1))
        assert Over(First).selected(p) == Position(1)
        assert Over(First).remainder(p) == Position("a", date(2020, 1, 1))
        assert Along(Third).selected(p) == Position(1, "a")
        assert Along(Third).remainder(p) == Position(date(2020, 1, 1))

    def test_composite_slice(self):
        p = Position(1, "a", "x")
        assert Over(Third, First).selected(p) == Position(1, "x")
        assert Over(Third, First).remainder(p) == Position("a")

    def test_inverse(self):
        assert Over(Second).inverse == Along(Second)
        assert Along(First, Third).inverse == Over(First, Third)

    def test_ranks(self):
        assert Over(First).selected_rank(3) == 1
        assert Over(First).remainder_rank(3) == 2
        assert Along(First).selected_rank(3) == 2
        assert Along(First).remainder_rank(3) == 1

    def test_invalid_slices(self):
        with pytest.raises(InvalidDimension):
            Over(First, First)
        with pytest.raises(InvalidDimension):
            Over()
        with pytest.raises(InvalidDimension):
            Over(Third).check(2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
