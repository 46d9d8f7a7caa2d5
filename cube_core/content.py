"""
Content & Schema

Content is a (Schema, Value) pair: the datum stored in a matrix cell. A
Schema declares the variable kind (continuous, discrete, nominal, ordinal,
date) together with the codex of its values and an optional value domain.

Content can only be created through a schema:

    schema = ContinuousSchema()
    schema.decode("3.14")        → Content(ContinuousSchema, DoubleValue(3.14))
    schema.decode("abc")         → None   (decode failure is absence)
    Content(schema, 3.14)        → validated construction, raises InvalidContent

Kind lattice (generalisation):

    Continuous ─┐            Nominal ─┐
                ├→ Numerical          ├→ Categorical        Date    Event
    Discrete  ──┘            Ordinal ─┘

    Mixed is the sentinel for kinds that cannot be merged.
"""

from __future__ import annotations
from typing import Any, ClassVar, FrozenSet, Optional
from abc import ABC
from dataclasses import dataclass
from enum import Enum

from .encoding import (
    Codex,
    Value,
    StringCodex,
    LongCodex,
    DoubleCodex,
    DateCodex,
    codex_from_string,
)
from .errors import InvalidContent
from .config import get_settings


# =============================================================================
# SECTION 1: Variable Kinds
# =============================================================================

class Type(Enum):
    """Variable kind of a schema."""
    MIXED = "mixed"
    NUMERICAL = "numerical"
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"
    CATEGORICAL = "categorical"
    NOMINAL = "nominal"
    ORDINAL = "ordinal"
    DATE = "date"
    EVENT = "event"

    def generalisation(self) -> "Type":
        return _GENERALISATION.get(self, self)

    def is_specialisation_of(self, other: "Type") -> bool:
        return self == other or self.generalisation() == other

    def merge(self, other: "Type", specific: bool = False) -> "Type":
        """
        Commutative, associative merge of two kinds.

        Equal kinds pass through. Otherwise, unless `specific`, the kinds
        generalise to their common ancestor; with no common ancestor (or when
        `specific`) the result is MIXED.
        """
        if self == other:
            return self
        if specific:
            return Type.MIXED
        if self.is_specialisation_of(other):
            return other
        if other.is_specialisation_of(self):
            return self
        if self.generalisation() == other.generalisation() and self.generalisation() != self:
            return self.generalisation()
        return Type.MIXED


_GENERALISATION = {
    Type.CONTINUOUS: Type.NUMERICAL,
    Type.DISCRETE: Type.NUMERICAL,
    Type.NOMINAL: Type.CATEGORICAL,
    Type.ORDINAL: Type.CATEGORICAL,
}


# =============================================================================
# SECTION 2: Schemas
# =============================================================================

class Schema(ABC):
    """Declares kind, codex and value domain of a variable."""

    kind: ClassVar[Type]
    codex: Codex

    def validate(self, value: Value) -> bool:
        """True if `value` belongs to this schema's domain."""
        return self.codex.from_value(value) is not None

    def decode(self, s: str) -> Optional["Content"]:
        """Decode a short string into content; None if it fails to parse or validate."""
        value = self.codex.decode(s)
        if value is None or not self.validate(value):
            return None
        return Content(self, value)

    def to_short_string(self, separator: Optional[str] = None) -> str:
        separator = get_settings().separator if separator is None else separator
        return f"{self.kind.value}{separator}{self.codex.descriptor()}"

    @staticmethod
    def from_short_string(kind: str, codex: str) -> Optional["Schema"]:
        """Build a default-domain schema from its kind and codex names; None if unknown."""
        cdx = codex_from_string(codex)
        cls = _SCHEMAS.get(kind.strip().lower())
        if cdx is None or cls is None:
            return None
        return cls(codex=cdx)


@dataclass(frozen=True)
class ContinuousSchema(Schema):
    codex: Codex = DoubleCodex()
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    kind: ClassVar[Type] = Type.CONTINUOUS

    def validate(self, value: Value) -> bool:
        v = self.codex.from_value(value)
        if v is None:
            return False
        if self.minimum is not None and v < self.minimum:
            return False
        if self.maximum is not None and v > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class DiscreteSchema(Schema):
    codex: Codex = LongCodex()
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    step: Optional[int] = None
    kind: ClassVar[Type] = Type.DISCRETE

    def validate(self, value: Value) -> bool:
        v = self.codex.from_value(value)
        if v is None:
            return False
        if self.minimum is not None and v < self.minimum:
            return False
        if self.maximum is not None and v > self.maximum:
            return False
        if self.step is not None and (v - (self.minimum or 0)) % self.step != 0:
            return False
        return True


@dataclass(frozen=True)
class NominalSchema(Schema):
    codex: Codex = StringCodex()
    domain: Optional[FrozenSet[Any]] = None
    kind: ClassVar[Type] = Type.NOMINAL

    def __post_init__(self):
        if self.domain is not None and not isinstance(self.domain, frozenset):
            object.__setattr__(self, "domain", frozenset(self.domain))

    def validate(self, value: Value) -> bool:
        v = self.codex.from_value(value)
        if v is None:
            return False
        return self.domain is None or v in self.domain


@dataclass(frozen=True)
class OrdinalSchema(NominalSchema):
    kind: ClassVar[Type] = Type.ORDINAL


@dataclass(frozen=True)
class DateSchema(Schema):
    codex: Codex = DateCodex()
    kind: ClassVar[Type] = Type.DATE


_SCHEMAS = {
    Type.CONTINUOUS.value: ContinuousSchema,
    Type.DISCRETE.value: DiscreteSchema,
    Type.NOMINAL.value: NominalSchema,
    Type.ORDINAL.value: OrdinalSchema,
    Type.DATE.value: DateSchema,
}


# =============================================================================
# SECTION 3: Content
# =============================================================================

@dataclass(frozen=True)
class Content:
    """
    Schema-validated value of a cell.

    `value` may be given as a raw literal; it is converted with the schema's
    codex. Construction with a value outside the schema's domain raises
    InvalidContent (use Schema.decode for absence-on-failure semantics).
    """
    schema: Schema
    value: Value

    def __post_init__(self):
        value = self.value
        if not isinstance(value, Value):
            try:
                value = self.schema.codex.to_value(value)
            except (TypeError, ValueError) as e:
                raise InvalidContent(f"{value!r} cannot be encoded by {self.schema}") from e
            object.__setattr__(self, "value", value)
        if not self.schema.validate(value):
            raise InvalidContent(f"{value!r} is not valid for {self.schema}")

    def to_short_string(self, separator: Optional[str] = None) -> str:
        separator = get_settings().separator if separator is None else separator
        return f"{self.schema.to_short_string(separator)}{separator}{self.value.to_short_string()}"

    def __str__(self) -> str:
        return f"Content({self.schema!r},{self.value!r})"
