"""
Tests for the names registry
"""

import pytest

from cube_core import Names, Pipe, Position, Over, Second


def registry(*entries):
    return Names(Pipe.from_iterable([(Position(p), i) for p, i in entries]))


class TestNumbering:
    def test_indices_are_unique_and_dense(self):
        names = Names.number([Position("a"), Position("b"), Position("c")])
        assert sorted(i for _, i in names) == [0, 1, 2]

    def test_matrix_names(self, matrix2d):
        names = matrix2d.names(Over(Second))
        assert set(names.positions()) == {Position("a"), Position("b")}
        assert sorted(names.to_dict().values()) == [0, 1]

    def test_short_strings(self):
        assert registry(("a", 0)).to_short_strings().to_list() == ["a|0"]


class TestSelection:
    def test_slice_keep_and_remove(self):
        names = registry(("a", 0), ("b", 1), ("c", 2))
        kept = names.slice(["a", "c"])
        removed = names.slice(["a", "c"], keep=False)

        assert set(kept.to_dict()) == {Position("a"), Position("c")}
        assert sorted(kept.to_dict().values()) == [0, 1]
        assert removed.to_dict() == {Position("b"): 0}

    def test_slice_regex_full_match(self):
        names = registry(("ab", 0), ("b", 1), ("cab", 2))
        assert set(names.slice_regex("a.*").to_dict()) == {Position("ab")}
        assert set(names.slice_regex("a.*", keep=False).to_dict()) == {Position("b"), Position("cab")}


class TestIndexUpdates:
    def test_set_ignores_absent_positions(self):
        names = registry(("a", 0), ("b", 1))
        assert names.set("a", 5).to_dict() == {Position("a"): 5, Position("b"): 1}
        assert names.set("z", 5).to_dict() == {Position("a"): 0, Position("b"): 1}

    def test_set_many(self):
        names = registry(("a", 0), ("b", 1)).set_many({"a": 7, "b": 8})
        assert names.to_dict() == {Position("a"): 7, Position("b"): 8}

    def test_move_to_front(self):
        names = registry(("a", 0), ("b", 1), ("c", 2)).move_to_front("c")
        assert names.to_dict() == {Position("a"): 1, Position("b"): 2, Position("c"): 0}

    def test_move_to_back(self):
        names = registry(("a", 0), ("b", 1), ("c", 2)).move_to_back("a")
        assert names.to_dict() == {Position("b"): 0, Position("c"): 1, Position("a"): 2}

    def test_move_to_back_breaks_ties_by_position(self):
        names = registry(("a", 1), ("b", 1), ("c", 0)).move_to_back("b")
        assert names.to_dict() == {Position("c"): 0, Position("a"): 1, Position("b"): 2}

    def test_move_to_back_absent_target(self):
        names = registry(("a", 0), ("b", 3))
        assert names.move_to_back("z").to_dict() == {Position("a"): 0, Position("b"): 3}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
