"""
Tests for coordinate and content value encoding
"""

from datetime import date, datetime

import pytest

from cube_core.encoding import (
    StringCodex,
    LongCodex,
    DoubleCodex,
    BooleanCodex,
    DateCodex,
    StringValue,
    LongValue,
    DoubleValue,
    BooleanValue,
    DateValue,
    to_value,
    codex_from_string,
)


class TestCodex:
    def test_long_decode(self):
        assert LongCodex().decode("42") == LongValue(42)
        assert LongCodex().decode(" 7 ") == LongValue(7)
        assert LongCodex().decode("x") is None
        assert LongCodex().decode("1.5") is None

    def test_double_decode(self):
        assert DoubleCodex().decode(" 3.5 ").value == 3.5
        assert DoubleCodex().decode("abc") is None

    def test_boolean_decode(self):
        assert BooleanCodex().decode("TRUE") == BooleanValue(True)
        assert BooleanCodex().decode("false") == BooleanValue(False)
        assert BooleanCodex().decode("yes") is None

    def test_date_decode_default_format(self):
        assert DateCodex().decode("2020-01-03").value == datetime(2020, 1, 3)
        assert DateCodex().decode("03/01/2020") is None

    def test_date_decode_custom_format(self):
        codex = DateCodex("%d/%m/%Y")
        assert codex.decode("03/01/2020").value == datetime(2020, 1, 3)
        assert codex.descriptor() == "date(%d/%m/%Y)"

    def test_long_to_value_rejects_fractions(self):
        assert LongCodex().to_value(3.0) == LongValue(3)
        assert LongCodex().to_value("12") == LongValue(12)
        with pytest.raises(ValueError):
            LongCodex().to_value(3.7)
        with pytest.raises(ValueError):
            LongCodex().to_value(float("nan"))
        with pytest.raises(ValueError):
            LongCodex().to_value("3.7")

    def test_boolean_to_value_parses_strings(self):
        assert BooleanCodex().to_value("false") == BooleanValue(False)
        assert BooleanCodex().to_value(True) == BooleanValue(True)
        with pytest.raises(ValueError):
            BooleanCodex().to_value("maybe")

    def test_string_decode_never_fails(self):
        assert StringCodex().decode("") == StringValue("")

    def test_compare(self):
        assert LongCodex().compare(LongValue(1), LongValue(2)) == -1
        assert LongCodex().compare(LongValue(2), LongValue(2)) == 0
        assert LongCodex().compare(LongValue(1), StringValue("a")) is None

    def test_codex_from_string(self):
        assert codex_from_string("long") == LongCodex()
        assert codex_from_string("date(%Y%m%d)") == DateCodex("%Y%m%d")
        assert codex_from_string("unknown") is None


class TestValue:
    def test_to_value_literals(self):
        assert isinstance(to_value(True), BooleanValue)
        assert isinstance(to_value(1), LongValue)
        assert isinstance(to_value(1.5), DoubleValue)
        assert isinstance(to_value("a"), StringValue)
        assert to_value(date(2020, 1, 1)) == DateValue(datetime(2020, 1, 1))

    def test_to_value_rejects_unknown(self):
        with pytest.raises(TypeError):
            to_value(object())

    def test_short_strings(self):
        assert LongValue(3).to_short_string() == "3"
        assert DoubleValue(2.0).to_short_string() == "2.0"
        assert BooleanValue(True).to_short_string() == "true"
        assert to_value(date(2020, 1, 1)).to_short_string() == "2020-01-01"

    def test_cross_kind_ordering(self):
        values = [
            StringValue("a"),
            BooleanValue(False),
            to_value(date(2020, 1, 1)),
            DoubleValue(1.5),
            LongValue(1),
        ]
        assert sorted(values) == [
            LongValue(1),
            DoubleValue(1.5),
            to_value(date(2020, 1, 1)),
            BooleanValue(False),
            StringValue("a"),
        ]

    def test_numbers_compare_numerically(self):
        assert LongValue(2) < DoubleValue(2.5)
        assert DoubleValue(1.5) < LongValue(2)

    def test_stable_hash_codes(self):
        assert StringValue("a").hash_code() == 97
        assert StringValue("b").hash_code() == 98
        assert StringValue("ab").hash_code() == 97 * 31 + 98
        assert LongValue(1).hash_code() == 1
        assert LongValue(-1).hash_code() == 0
        assert LongValue(2 ** 32).hash_code() == 1
        assert BooleanValue(True).hash_code() == 1231

    def test_dates_equal_across_formats(self):
        plain = DateValue(datetime(2020, 1, 3))
        explicit = DateValue(datetime(2020, 1, 3), DateCodex("%Y-%m-%d"))
        assert plain == explicit
        assert hash(plain) == hash(explicit)
        assert len({plain, explicit}) == 1

    def test_as_accessors(self):
        assert LongValue(3).as_double() == 3.0
        assert StringValue("x").as_double() is None
        assert DoubleValue(1.0).as_long() is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
