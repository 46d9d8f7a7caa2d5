"""
Tests for squashers
"""

import pytest

from cube_core import Cell, Matrix, Position, Second, Third, InvalidDimension, UnsupportedStrategy
from cube_core.strategies import PreservingMaxPosition, PreservingMinPosition, KeepSlice, Sum

from conftest import num, as_dict


def cell(*coords, value=0.0):
    return Cell(Position(*coords), num(value))


class TestSurvivorRules:
    def test_max_and_min_are_commutative(self):
        x, y = cell(1, "a", value=1), cell(1, "b", value=2)
        for squasher, expected in ((PreservingMaxPosition(), y), (PreservingMinPosition(), x)):
            assert squasher.reduce(Second, x, y) == expected
            assert squasher.reduce(Second, y, x) == expected

    def test_keep_slice(self):
        x, y = cell(1, "a"), cell(1, "b")
        squasher = KeepSlice("b")
        assert squasher.reduce(Second, x, y) == y
        assert squasher.reduce(Second, y, x) == y
        assert KeepSlice("z").reduce(Second, x, y) == x

    def test_with_value_ignores_value(self):
        x, y = cell(1, "a"), cell(1, "b")
        assert PreservingMaxPosition().reduce_with_value(Second, x, y, "ignored") == y


class TestMatrixSquash:
    def test_keeps_latest_date(self, matrix3d):
        latest = as_dict(matrix3d.squash(Third, PreservingMaxPosition()))
        assert latest == {
            Position(1, "x"): 16.0,
            Position(1, "y"): 5.0,
            Position(2, "x"): 7.0,
        }

    def test_keeps_earliest_date(self, matrix3d):
        earliest = as_dict(matrix3d.squash(Third, PreservingMinPosition()))
        assert earliest[Position(2, "x")] == 1.0

    def test_single_survivor_groups_are_unchanged(self):
        m = Matrix.from_tuples([(1, "a", num(1)), (2, "b", num(2))])
        assert as_dict(m.squash(Second, PreservingMaxPosition())) == {Position(1): 1.0, Position(2): 2.0}

    def test_squash_is_idempotent(self, matrix3d):
        once = matrix3d.squash(Third, PreservingMaxPosition())
        twice = once.expand(lambda c: "latest").squash(Third, PreservingMaxPosition())
        assert as_dict(twice) == as_dict(once)

    def test_squash_with_value(self, matrix3d):
        plain = as_dict(matrix3d.squash(Third, PreservingMaxPosition()))
        assert as_dict(matrix3d.squash_with_value(Third, PreservingMaxPosition(), None)) == plain

    def test_checks(self, matrix2d):
        with pytest.raises(InvalidDimension):
            matrix2d.squash(Third, PreservingMaxPosition())
        with pytest.raises(UnsupportedStrategy):
            matrix2d.squash(Second, Sum())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
