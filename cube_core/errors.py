"""
Error taxonomy for the cube engine.

Only contract violations raise. Values that fail to decode are dropped
(absence), and strategies that are undefined for a content kind return
``None`` or an empty collection instead of raising.
"""


class CubeError(Exception):
    """Base class for all cube engine errors."""


class InvalidDimension(CubeError, ValueError):
    """A dimension does not belong to the arity of the position it is applied to."""

    def __init__(self, dimension, rank: int, reason: str = ""):
        self.dimension = dimension
        self.rank = rank
        message = f"Dimension {dimension} is not valid for a position of rank {rank}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RankMismatch(CubeError, ValueError):
    """Cells or matrices of different declared rank were combined."""

    def __init__(self, expected: int, actual: int, context: str = ""):
        self.expected = expected
        self.actual = actual
        where = f" in {context}" if context else ""
        super().__init__(f"Expected rank {expected} but got {actual}{where}")


class InvalidContent(CubeError, ValueError):
    """Content constructed directly with a value its schema does not accept."""


class UnsupportedStrategy(CubeError, TypeError):
    """A strategy lacks the capability required by the requested operation."""

    def __init__(self, strategy, capability: str, operation: str):
        self.strategy = strategy
        self.capability = capability
        self.operation = operation
        super().__init__(
            f"{type(strategy).__name__} does not implement {capability} required by {operation}"
        )
