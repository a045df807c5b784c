"""Range description nodes, field values and gathered range records."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

COMMENT_MARKER = "#"
RANGE_DEFINITION_FIELDS = 4

BITFIELD_RE = re.compile(r"^(?:X(?P<byte>\d*))?(?:x(?P<bit>\d*))?b(?P<width>\d*)$")

FieldFunction = Callable[[bytes, int, int], Any]


@dataclass(frozen=True)
class LiteralField:
    """A range field whose value is known when the description is written."""

    value: Any

    def resolve(self, buffer: bytes, offset: int, remaining: int) -> Any:
        return self.value


@dataclass(frozen=True)
class ComputedField:
    """A range field computed from the buffer at walk time."""

    function: FieldFunction

    def resolve(self, buffer: bytes, offset: int, remaining: int) -> Any:
        return self.function(buffer, offset, remaining)


Field = Union[LiteralField, ComputedField]


def field_of(value: Any) -> Field:
    """Wrap ``value`` as a computed field when callable, literal otherwise."""

    if isinstance(value, (LiteralField, ComputedField)):
        return value
    if callable(value):
        return ComputedField(value)
    return LiteralField(value)


def describe_value(value: Any) -> str:
    if value is None:
        return "undef"
    if callable(value):
        return getattr(value, "__name__", repr(value))
    return str(value)


@dataclass(frozen=True)
class RangeLeaf:
    """One range tuple exactly as written by the caller (0 or more fields)."""

    fields: Tuple[Any, ...]

    def describe(self) -> str:
        return "[" + ", ".join(describe_value(value) for value in self.fields) + "]"


@dataclass(frozen=True)
class RangeSequence:
    """An ordered group of nested range nodes."""

    children: Tuple["RangeNode", ...]


@dataclass(frozen=True)
class RangeGenerator:
    """A callable producing a whole ``(name, size, color)`` range at compile time."""

    function: Callable[[], Any]


RangeNode = Union[RangeLeaf, RangeSequence, RangeGenerator]


@dataclass(frozen=True)
class CanonicalRange:
    """A compiled range: always exactly four fields."""

    name: Field
    size: Field
    color: Field
    user_information: Optional[str] = None


@dataclass(frozen=True)
class BitfieldSpec:
    """Parsed ``[X<n>][x<n>]b<n>`` bit-field definition."""

    offset: int
    width: int

    @classmethod
    def parse(cls, spec: str) -> Optional["BitfieldSpec"]:
        match = BITFIELD_RE.match(spec.strip())
        if match is None:
            return None
        byte_offset = int(match.group("byte") or 0)
        bit_offset = int(match.group("bit") or 0)
        width = int(match.group("width") or 0) or 1
        return cls(offset=byte_offset * 8 + bit_offset, width=width)

    @property
    def last_bit(self) -> int:
        return self.offset + self.width - 1


def is_bitfield_spec(value: Any) -> bool:
    return isinstance(value, str) and BITFIELD_RE.match(value.strip()) is not None


@dataclass
class GatheredRange:
    """A range resolved against the buffer by the walker."""

    name: str
    color: Optional[str]
    offset: int
    data: bytes = b""
    is_bitfield: Union[bool, str] = False
    is_comment: bool = False
    user_information: Optional[str] = None

    @property
    def size(self) -> int:
        if self.is_bitfield or self.is_comment:
            return 0
        return len(self.data)


__all__ = [
    "BITFIELD_RE",
    "BitfieldSpec",
    "COMMENT_MARKER",
    "CanonicalRange",
    "ComputedField",
    "Field",
    "GatheredRange",
    "LiteralField",
    "RANGE_DEFINITION_FIELDS",
    "RangeGenerator",
    "RangeLeaf",
    "RangeNode",
    "RangeSequence",
    "describe_value",
    "field_of",
    "is_bitfield_spec",
]
