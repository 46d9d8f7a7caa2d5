"""
Coordinate & Content Value Encoding

Every coordinate of a position and every content value is a typed, immutable
Value. A Codex knows how to parse a short string into a Value, how to turn a
raw Python literal into one, and how to compare two Values of its kind.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│  Codex          StringCodex │ LongCodex │ DoubleCodex │ BooleanCodex │ Date │
│                 decode(str) → Optional[Value]                                │
│                 to_value(raw) → Value                                        │
│                 compare(Value, Value) → Optional[int]                        │
├─────────────────────────────────────────────────────────────────────────────┤
│  Value          StringValue │ LongValue │ DoubleValue │ BooleanValue │ Date │
│                 to_short_string() / as_double() / as_date() / hash_code()   │
└─────────────────────────────────────────────────────────────────────────────┘

Ordering:
    Values are totally ordered: numbers (numerically) < dates (chronologically)
    < booleans < strings (lexicographically). Positions inherit a lexicographic
    order from this.

Hashing:
    Python's str hash is salted per process, so partitioners and samplers use
    Value.hash_code(): a stable 32-bit hash (integers hash to themselves when
    they fit in 32 bits, strings use the polynomial 31-hash).
"""

from __future__ import annotations
from typing import Any, ClassVar, Optional, Tuple
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import total_ordering
import datetime as dt
import numbers
import struct

from .constants import HASH_MASK
from .config import get_settings


_EPOCH = dt.datetime(1970, 1, 1)


def _to_int32(h: int) -> int:
    h &= HASH_MASK
    return h - (1 << 32) if h >= (1 << 31) else h


def _fold_long(v: int) -> int:
    """Fold a 64-bit integer into 32 bits (v ^ v >>> 32)."""
    v &= 0xFFFFFFFFFFFFFFFF
    return _to_int32(v ^ (v >> 32))


def _epoch_millis(d: dt.datetime) -> int:
    if d.tzinfo is not None:
        d = d.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return int((d - _EPOCH).total_seconds() * 1000)


# =============================================================================
# SECTION 1: Codices
# =============================================================================

class Codex(ABC):
    """Encoder/decoder for one kind of Value."""

    name: ClassVar[str] = ""

    @abstractmethod
    def decode(self, s: str) -> Optional["Value"]:
        """Parse a short string; None when it is not a valid encoding."""

    @abstractmethod
    def to_value(self, raw: Any) -> "Value":
        """Wrap a raw Python value."""

    @abstractmethod
    def from_value(self, value: "Value") -> Optional[Any]:
        """Raw Python value of `value` under this codex, if it has one."""

    @abstractmethod
    def to_short_string(self, raw: Any) -> str:
        ...

    def compare(self, x: "Value", y: "Value") -> Optional[int]:
        """Three-way comparison of two values under this codex; None if either is foreign."""
        a = self.from_value(x)
        b = self.from_value(y)
        if a is None or b is None:
            return None
        return (a > b) - (a < b)

    def descriptor(self) -> str:
        return self.name


@dataclass(frozen=True)
class StringCodex(Codex):
    name: ClassVar[str] = "string"

    def decode(self, s: str) -> Optional["Value"]:
        return StringValue(s, self)

    def to_value(self, raw: Any) -> "Value":
        return StringValue(str(raw), self)

    def from_value(self, value: "Value") -> Optional[Any]:
        return value.as_string()

    def to_short_string(self, raw: Any) -> str:
        return raw


@dataclass(frozen=True)
class LongCodex(Codex):
    name: ClassVar[str] = "long"

    def decode(self, s: str) -> Optional["Value"]:
        try:
            return LongValue(int(s.strip()), self)
        except ValueError:
            return None

    def to_value(self, raw: Any) -> "Value":
        if isinstance(raw, str):
            value = self.decode(raw)
            if value is None:
                raise ValueError(f"'{raw}' is not an integer")
            return value
        if isinstance(raw, numbers.Integral):
            return LongValue(int(raw), self)
        if isinstance(raw, numbers.Real):
            if not float(raw).is_integer():
                raise ValueError(f"{raw!r} is not integral")
            return LongValue(int(raw), self)
        raise TypeError(f"Cannot convert {type(raw).__name__} to a long")

    def from_value(self, value: "Value") -> Optional[Any]:
        return value.as_long()

    def to_short_string(self, raw: Any) -> str:
        return str(raw)


@dataclass(frozen=True)
class DoubleCodex(Codex):
    name: ClassVar[str] = "double"

    def decode(self, s: str) -> Optional["Value"]:
        try:
            return DoubleValue(float(s.strip()), self)
        except ValueError:
            return None

    def to_value(self, raw: Any) -> "Value":
        return DoubleValue(float(raw), self)

    def from_value(self, value: "Value") -> Optional[Any]:
        return value.as_double()

    def to_short_string(self, raw: Any) -> str:
        return repr(float(raw))


@dataclass(frozen=True)
class BooleanCodex(Codex):
    name: ClassVar[str] = "boolean"

    def decode(self, s: str) -> Optional["Value"]:
        t = s.strip().lower()
        if t == "true":
            return BooleanValue(True, self)
        if t == "false":
            return BooleanValue(False, self)
        return None

    def to_value(self, raw: Any) -> "Value":
        if isinstance(raw, str):
            value = self.decode(raw)
            if value is None:
                raise ValueError(f"'{raw}' is not a boolean")
            return value
        return BooleanValue(bool(raw), self)

    def from_value(self, value: "Value") -> Optional[Any]:
        return value.as_boolean()

    def to_short_string(self, raw: Any) -> str:
        return "true" if raw else "false"


@dataclass(frozen=True)
class DateCodex(Codex):
    """
    Date (and time) codex.

    `format` is an strptime/strftime pattern; when None the configured
    `date_format` is used.
    """
    format: Optional[str] = None
    name: ClassVar[str] = "date"

    @property
    def pattern(self) -> str:
        return self.format or get_settings().date_format

    def decode(self, s: str) -> Optional["Value"]:
        try:
            return DateValue(dt.datetime.strptime(s.strip(), self.pattern), self)
        except ValueError:
            return None

    def to_value(self, raw: Any) -> "Value":
        if isinstance(raw, str):
            value = self.decode(raw)
            if value is None:
                raise ValueError(f"'{raw}' does not match date format {self.pattern}")
            return value
        if isinstance(raw, dt.datetime):
            return DateValue(raw, self)
        if isinstance(raw, dt.date):
            return DateValue(dt.datetime(raw.year, raw.month, raw.day), self)
        raise TypeError(f"Cannot convert {type(raw).__name__} to a date")

    def from_value(self, value: "Value") -> Optional[Any]:
        if isinstance(value, StringValue):
            parsed = self.decode(value.value)
            return parsed.value if parsed is not None else None
        return value.as_date()

    def to_short_string(self, raw: Any) -> str:
        return raw.strftime(self.pattern)

    def descriptor(self) -> str:
        return f"{self.name}({self.pattern})"


def datetime_codex() -> DateCodex:
    """Date codex using the configured date-and-time format."""
    return DateCodex(get_settings().datetime_format)


# =============================================================================
# SECTION 2: Values
# =============================================================================

@total_ordering
class Value(ABC):
    """A typed, immutable, totally ordered literal."""

    value: Any
    codex: Codex

    # Ordering group of each value family (numbers < dates < booleans < strings)
    _group: ClassVar[int] = 99

    def to_short_string(self) -> str:
        return self.codex.to_short_string(self.value)

    def as_string(self) -> Optional[str]:
        return None

    def as_double(self) -> Optional[float]:
        return None

    def as_long(self) -> Optional[int]:
        return None

    def as_date(self) -> Optional[dt.datetime]:
        return None

    def as_boolean(self) -> Optional[bool]:
        return None

    @abstractmethod
    def hash_code(self) -> int:
        """Stable (process independent) signed 32-bit hash."""

    @abstractmethod
    def sort_key(self) -> Tuple:
        ...

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() < other.sort_key()


@dataclass(frozen=True)
class StringValue(Value):
    value: str
    codex: Codex = StringCodex()
    _group: ClassVar[int] = 3

    def as_string(self) -> Optional[str]:
        return self.value

    def hash_code(self) -> int:
        h = 0
        for ch in self.value:
            h = (31 * h + ord(ch)) & HASH_MASK
        return _to_int32(h)

    def sort_key(self) -> Tuple:
        return (self._group, self.value)


@dataclass(frozen=True)
class LongValue(Value):
    value: int
    codex: Codex = LongCodex()
    _group: ClassVar[int] = 0

    def as_long(self) -> Optional[int]:
        return self.value

    def as_double(self) -> Optional[float]:
        return float(self.value)

    def hash_code(self) -> int:
        return _fold_long(self.value)

    def sort_key(self) -> Tuple:
        return (self._group, float(self.value), 0, self.value)


@dataclass(frozen=True)
class DoubleValue(Value):
    value: float
    codex: Codex = DoubleCodex()
    _group: ClassVar[int] = 0

    def as_double(self) -> Optional[float]:
        return self.value

    def hash_code(self) -> int:
        bits = struct.unpack(">q", struct.pack(">d", self.value))[0]
        return _fold_long(bits)

    def sort_key(self) -> Tuple:
        return (self._group, self.value, 1, self.value)


@dataclass(frozen=True)
class BooleanValue(Value):
    value: bool
    codex: Codex = BooleanCodex()
    _group: ClassVar[int] = 2

    def as_boolean(self) -> Optional[bool]:
        return self.value

    def hash_code(self) -> int:
        return 1231 if self.value else 1237

    def sort_key(self) -> Tuple:
        return (self._group, self.value)


@dataclass(frozen=True)
class DateValue(Value):
    # The codex only formats; equal instants are the same date.
    value: dt.datetime
    codex: Codex = field(default=DateCodex(), compare=False)
    _group: ClassVar[int] = 1

    def as_date(self) -> Optional[dt.datetime]:
        return self.value

    def hash_code(self) -> int:
        return _fold_long(_epoch_millis(self.value))

    def sort_key(self) -> Tuple:
        return (self._group, _epoch_millis(self.value))


# =============================================================================
# SECTION 3: Literal Adapter
# =============================================================================

def to_value(raw: Any) -> Value:
    """
    Convert a Python literal to a Value.

    bool → BooleanValue, int → LongValue, float → DoubleValue,
    str → StringValue, date/datetime → DateValue. Values pass through.

    Raises:
        TypeError: `raw` has no Value representation
    """
    if isinstance(raw, Value):
        return raw
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, numbers.Integral):
        return LongValue(int(raw))
    if isinstance(raw, numbers.Real):
        return DoubleValue(float(raw))
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, dt.datetime):
        if raw.time() == dt.time(0, 0):
            return DateValue(raw)
        return DateValue(raw, datetime_codex())
    if isinstance(raw, dt.date):
        return DateValue(dt.datetime(raw.year, raw.month, raw.day))
    raise TypeError(f"Cannot convert {type(raw).__name__} to a Value")


CODICES = {
    StringCodex.name: StringCodex(),
    LongCodex.name: LongCodex(),
    DoubleCodex.name: DoubleCodex(),
    BooleanCodex.name: BooleanCodex(),
    DateCodex.name: DateCodex(),
}


def codex_from_string(name: str) -> Optional[Codex]:
    """Look up a codex by its short-string name, e.g. 'long' or 'date(%Y%m%d)'."""
    name = name.strip()
    if name.startswith(f"{DateCodex.name}(") and name.endswith(")"):
        return DateCodex(name[len(DateCodex.name) + 1:-1])
    return CODICES.get(name)
