"""Cell: the (Position, Content) record of a matrix."""

from __future__ import annotations
from typing import NamedTuple, Optional

from .position import Position
from .content import Content
from .config import get_settings


class Cell(NamedTuple):
    """
    One datum of a matrix.

    position: where the datum lives
    content:  schema-validated value
    """
    position: Position
    content: Content

    def to_short_string(self, separator: Optional[str] = None, descriptive: bool = False) -> str:
        separator = get_settings().separator if separator is None else separator
        if descriptive:
            return f"{self.position!r}{separator}{self.content}"
        return f"{self.position.to_short_string(separator)}{separator}{self.content.to_short_string(separator)}"

    def to_canonical_string(self) -> str:
        """Injective string form used as a dedup key."""
        return f"Cell({self.position!r},{self.content})"
