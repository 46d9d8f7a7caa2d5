"""
Statistics Module

Composite analyses written purely in terms of the matrix operator set.
They operate on 2D (instance x feature) and 3D (instance x feature x date)
matrices and return ordinary matrices, so results can be sliced, reduced
and joined like any other data.
"""

from typing import Optional

from loguru import logger

from cube_core import (
    Matrix,
    Slice,
    Over,
    Along,
    Dimension,
    First,
    Second,
    Third,
    RankMismatch,
)
from cube_core.strategies import (
    Mean,
    Sum,
    Entropy,
    Subtract,
    Power,
    SquareRoot,
    Fraction,
    Times,
    Plus,
    Concatenate,
    Upper,
    Gradient,
)


def _require_rank(matrix: Matrix, rank: int, analysis: str) -> None:
    if matrix.rank != rank:
        raise RankMismatch(rank, matrix.rank, analysis)


def _key_dimension(slice: Slice) -> Dimension:
    """The dimension holding the selected coordinate of a 2D slice."""
    if isinstance(slice, Over):
        return slice.dimension
    return Dimension(1 - slice.dimension.index)


def correlation(matrix: Matrix, slice: Slice) -> Matrix:
    """
    Pearson correlation between every pair of selected keys.

    For a matrix of instances x features, `correlation(m, Over(Second))`
    correlates every pair of features over the instances they share.

    Args:
        matrix: 2D matrix of numeric content
        slice: which dimension holds the keys to correlate

    Returns:
        1D matrix keyed by "(a*b)" pair names
    """
    _require_rank(matrix, 2, "correlation")
    slice.check(matrix.rank)
    dim = _key_dimension(slice)
    logger.debug("correlation over {}", slice)

    mean = matrix.reduce(slice, Mean()).to_map(Over(First))
    centered = matrix.transform_with_value(Subtract(dim), mean)

    denom = (
        centered
        .transform(Power(dim, 2))
        .reduce(slice, Sum())
        .pairwise(Over(First), Times())
        .transform(SquareRoot(First))
        .to_map(Over(First))
    )

    return (
        centered
        .pairwise(slice, Times())
        .reduce(Over(First), Sum())
        .transform_with_value(Fraction(First), denom)
    )


def mutual_information(matrix: Matrix, slice: Slice, log_base: float = 2.0) -> Matrix:
    """
    Mutual information between every unordered pair of selected keys.

    I(a, b) = H(a) + H(b) - H(a, b), where H is the entropy of the values
    each key takes over the remainder.

    Args:
        matrix: 2D matrix (content is treated as categorical)
        slice: which dimension holds the keys
        log_base: logarithm base of the entropies

    Returns:
        1D matrix keyed by "a,b" pair names (a < b)
    """
    _require_rank(matrix, 2, "mutual_information")
    slice.check(matrix.rank)
    logger.debug("mutual information over {}", slice)

    marginal = (
        matrix
        .reduce_and_expand(slice, Entropy("marginal", log_base=log_base))
        .pairwise(Over(First), Plus(name="%s,%s", comparer=Upper))
    )

    joint = (
        matrix
        .pairwise(slice, Concatenate(name="%s,%s", comparer=Upper))
        .reduce_and_expand(Over(First), Entropy("joint", negate=True, log_base=log_base))
    )

    return (marginal + joint).reduce(Over(First), Sum())


def gradient_features(matrix: Matrix, separator: Optional[str] = ".from.") -> Matrix:
    """
    Gradient features of an instance x feature x date matrix.

    1. derive gradients along the date axis (instance x feature x range)
    2. melt the range into the feature (instance x "feature.from.range")

    Args:
        matrix: 3D matrix whose third coordinate is a date
        separator: placed between feature and date range

    Returns:
        2D matrix of gradients (value change per day)
    """
    _require_rank(matrix, 3, "gradient_features")
    return matrix.derive(Along(Third), Gradient(First)).melt(Third, Second, separator)
