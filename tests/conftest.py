"""
Shared fixtures for the sparsecube tests.
"""

from datetime import date

import pytest

from cube_core import (
    Cell,
    Content,
    ContinuousSchema,
    CubeSettings,
    Matrix,
    NominalSchema,
    Position,
    set_settings,
)


def num(v):
    return Content(ContinuousSchema(), v)


def nom(v):
    return Content(NominalSchema(), v)


@pytest.fixture(autouse=True)
def default_settings():
    set_settings(CubeSettings())
    yield
    set_settings(CubeSettings())


@pytest.fixture
def matrix2d():
    """{(1,"a")→10, (1,"b")→20, (2,"a")→30}"""
    return Matrix.from_tuples([
        (1, "a", num(10)),
        (1, "b", num(20)),
        (2, "a", num(30)),
    ])


@pytest.fixture
def matrix3d():
    """instance x feature x date"""
    return Matrix.from_tuples([
        (1, "x", date(2020, 1, 1), num(10)),
        (1, "x", date(2020, 1, 3), num(16)),
        (1, "y", date(2020, 1, 1), num(5)),
        (2, "x", date(2020, 1, 1), num(1)),
        (2, "x", date(2020, 1, 2), num(3)),
        (2, "x", date(2020, 1, 6), num(7)),
    ])


@pytest.fixture
def features():
    """instance x feature, numeric, dense"""
    rows = []
    for i, (a, b, c) in enumerate([(1, 2, 4), (2, 4, 3), (3, 6, 2), (4, 8, 1)]):
        rows += [(i, "a", num(a)), (i, "b", num(b)), (i, "c", num(c))]
    return Matrix.from_tuples(rows)


def as_dict(matrix):
    """{position: float value} of a matrix with numeric content."""
    return {c.position: c.content.value.as_double() for c in matrix}


def cell(*coords_and_content):
    return Cell(Position(*coords_and_content[:-1]), coords_and_content[-1])
