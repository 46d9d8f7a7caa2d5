"""
Tests for ordered derivation (gradients, deltas, moving averages)
"""

from datetime import date

import pytest

from cube_core import Matrix, Position, Along, First, Second, Third, Fourth, InvalidDimension, UnsupportedStrategy
from cube_core.strategies import Gradient, Delta, MovingAverage, Sum
from sparsecube import gradient_features

from conftest import num, as_dict


class TestGradient:
    def test_gradient_per_day(self, matrix3d):
        grads = as_dict(matrix3d.derive(Along(Third), Gradient(First)))
        assert grads[Position(1, "x", "2020-01-01.to.2020-01-03")] == 3.0

    def test_first_cell_produces_nothing(self, matrix3d):
        grads = as_dict(matrix3d.derive(Along(Third), Gradient(First)))
        assert not any(p.get(Second).as_string() == "y" for p in grads)
        assert len(grads) == 3

    def test_consecutive_ranges(self, matrix3d):
        grads = as_dict(matrix3d.derive(Along(Third), Gradient(First)))
        assert grads[Position(2, "x", "2020-01-01.to.2020-01-02")] == 2.0
        assert grads[Position(2, "x", "2020-01-02.to.2020-01-06")] == 1.0

    def test_input_order_does_not_matter(self):
        m = Matrix.from_tuples([
            (1, "x", date(2020, 1, 3), num(16)),
            (1, "x", date(2020, 1, 1), num(10)),
        ])
        assert as_dict(m.derive(Along(Third), Gradient(First))) == {
            Position(1, "x", "2020-01-01.to.2020-01-03"): 3.0,
        }

    def test_non_date_remainder_gives_nothing(self, matrix3d):
        assert matrix3d.derive(Along(Second), Gradient(First)).to_list() == []

    def test_result_rank(self, matrix3d):
        assert matrix3d.derive(Along(Third), Gradient(First)).rank == 3

    def test_with_value_variant(self, matrix3d):
        plain = as_dict(matrix3d.derive(Along(Third), Gradient(First)))
        with_value = as_dict(matrix3d.derive_with_value(Along(Third), Gradient(First), None))
        assert plain == with_value

    def test_checks(self, matrix3d):
        with pytest.raises(InvalidDimension):
            matrix3d.derive(Along(Fourth), Gradient(First))
        with pytest.raises(UnsupportedStrategy):
            matrix3d.derive(Along(Third), Sum())


class TestOtherDerivers:
    def test_delta(self, matrix3d):
        deltas = as_dict(matrix3d.derive(Along(Third), Delta()))
        assert deltas == {
            Position(1, "x", "2020-01-01.to.2020-01-03"): 6.0,
            Position(2, "x", "2020-01-01.to.2020-01-02"): 2.0,
            Position(2, "x", "2020-01-02.to.2020-01-06"): 4.0,
        }

    def test_moving_average(self, matrix3d):
        averages = as_dict(matrix3d.derive(Along(Third), MovingAverage(2)))
        assert averages == {
            Position(1, "x", "2020-01-03"): 13.0,
            Position(2, "x", "2020-01-02"): 2.0,
            Position(2, "x", "2020-01-06"): 5.0,
        }

    def test_moving_average_window(self):
        with pytest.raises(ValueError):
            MovingAverage(0)

    def test_combination(self, matrix3d):
        cells = matrix3d.derive(Along(Third), [Gradient(First), Delta()]).to_list()
        values = sorted(c.content.value.as_double() for c in cells if c.position.get(First).as_long() == 1)
        assert values == [3.0, 6.0]


class TestGradientFeatures:
    def test_melted_gradients(self, matrix3d):
        features = gradient_features(matrix3d)
        assert features.rank == 2
        assert as_dict(features)[Position(1, "x.from.2020-01-01.to.2020-01-03")] == 3.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
