"""
Strategy capability checks.

Every strategy family is a small set of capability ABCs (e.g. Prepare,
PresentSingle). Operations declare which capabilities they need and check
them when the operation is requested; combinations of strategies have a
capability only if every member has it.
"""

from __future__ import annotations
from typing import Any, List, Sequence, Type

from ..errors import UnsupportedStrategy


class Combination:
    """Mixin for strategies that fan out over a list of member strategies."""

    members: List[Any]


def has_capability(strategy: Any, capability: Type) -> bool:
    if isinstance(strategy, Combination):
        return all(has_capability(m, capability) for m in strategy.members)
    return isinstance(strategy, capability)


def require(strategy: Any, capabilities: Sequence[Type], operation: str) -> Any:
    """Return `strategy` if it has every capability, else raise UnsupportedStrategy."""
    for capability in capabilities:
        if not has_capability(strategy, capability):
            raise UnsupportedStrategy(strategy, capability.__name__, operation)
    return strategy
