"""
Tests for schemas, variable kinds and content
"""

import pytest

from cube_core import (
    Type,
    Schema,
    ContinuousSchema,
    DiscreteSchema,
    NominalSchema,
    OrdinalSchema,
    DateSchema,
    Content,
    InvalidContent,
    DoubleValue,
)


class TestType:
    def test_equal_kinds_pass_through(self):
        assert Type.DATE.merge(Type.DATE) == Type.DATE

    def test_generalising_merge(self):
        assert Type.CONTINUOUS.merge(Type.DISCRETE) == Type.NUMERICAL
        assert Type.NOMINAL.merge(Type.ORDINAL) == Type.CATEGORICAL
        assert Type.CONTINUOUS.merge(Type.NUMERICAL) == Type.NUMERICAL

    def test_specific_merge(self):
        assert Type.CONTINUOUS.merge(Type.DISCRETE, specific=True) == Type.MIXED

    def test_unrelated_kinds_are_mixed(self):
        assert Type.CONTINUOUS.merge(Type.NOMINAL) == Type.MIXED
        assert Type.DATE.merge(Type.NUMERICAL) == Type.MIXED

    def test_merge_is_commutative(self):
        kinds = list(Type)
        for a in kinds:
            for b in kinds:
                assert a.merge(b) == b.merge(a)

    def test_generalisation(self):
        assert Type.DISCRETE.generalisation() == Type.NUMERICAL
        assert Type.DATE.generalisation() == Type.DATE
        assert Type.ORDINAL.is_specialisation_of(Type.CATEGORICAL)


class TestSchema:
    def test_continuous_decode(self):
        con = ContinuousSchema().decode("3.14")
        assert con.value.as_double() == 3.14
        assert ContinuousSchema().decode("abc") is None

    def test_continuous_range(self):
        schema = ContinuousSchema(minimum=0.0, maximum=1.0)
        assert schema.decode("-1") is None
        assert schema.decode("2") is None
        assert schema.decode("0.5") is not None

    def test_discrete_step(self):
        schema = DiscreteSchema(minimum=0, maximum=10, step=2)
        assert schema.decode("4") is not None
        assert schema.decode("5") is None
        assert schema.decode("12") is None

    def test_nominal_domain(self):
        schema = NominalSchema(domain={"a", "b"})
        assert schema.decode("a") is not None
        assert schema.decode("c") is None

    def test_ordinal_kind(self):
        assert OrdinalSchema().kind == Type.ORDINAL

    def test_date_schema(self):
        assert DateSchema().decode("2020-01-01") is not None
        assert DateSchema().decode("not a date") is None

    def test_from_short_string(self):
        assert Schema.from_short_string("continuous", "double") == ContinuousSchema()
        assert Schema.from_short_string("nominal", "string") == NominalSchema()
        assert Schema.from_short_string("weird", "double") is None

    def test_short_string(self):
        assert DiscreteSchema().to_short_string() == "discrete|long"
        assert ContinuousSchema().to_short_string(",") == "continuous,double"


class TestContent:
    def test_raw_value_is_encoded(self):
        assert Content(ContinuousSchema(), 1.5).value == DoubleValue(1.5)
        assert Content(ContinuousSchema(), 2).value == DoubleValue(2.0)

    def test_invalid_content_raises(self):
        with pytest.raises(InvalidContent):
            Content(NominalSchema(domain={"a"}), "z")
        with pytest.raises(InvalidContent):
            Content(DiscreteSchema(), "x")

    def test_fractional_discrete_value_raises(self):
        with pytest.raises(InvalidContent):
            Content(DiscreteSchema(), 3.7)
        assert Content(DiscreteSchema(), 3.0).to_short_string() == "discrete|long|3"

    def test_short_string(self):
        assert Content(DiscreteSchema(), 3).to_short_string() == "discrete|long|3"

    def test_equality_and_hash(self):
        a = Content(ContinuousSchema(), 1.0)
        b = Content(ContinuousSchema(), 1.0)
        assert a == b
        assert len({a, b}) == 1

    def test_canonical_string_distinguishes_schemas(self):
        assert str(Content(NominalSchema(), "1")) != str(Content(DiscreteSchema(), 1))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
