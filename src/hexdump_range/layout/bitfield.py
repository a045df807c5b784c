"""Decode bit-field ranges into display rows."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..datatypes import Column, DumpConfig
from ..errors import RangeWalkError
from ..ranges.model import BitfieldSpec, GatheredRange
from .formatting import ascii_char, fit, pad
from .rows import Row

CANVAS_BITS = 32
UNKNOWN = "?"

# Columns that still make sense when the source range is too short to decode.
IDENTITY_COLUMNS = frozenset(
    {
        Column.RANGE_NAME,
        Column.OFFSET,
        Column.CUMULATIVE_OFFSET,
        Column.BITFIELD_SOURCE,
        Column.USER_INFORMATION,
    }
)

Source = Tuple[str, Optional[str]]


@dataclass(frozen=True)
class BitfieldValue:
    """The extracted bits of a bit-field and their 32-bit zero-extended views."""

    bits: str
    dashed: str
    value: int

    @property
    def byte_count(self) -> int:
        length = len(self.bits)
        if length > 24:
            return 4
        if length > 16:
            return 3
        if length > 8:
            return 2
        return 1

    @property
    def canvas_bytes(self) -> bytes:
        return self.value.to_bytes(4, "big")

    @property
    def used_bytes(self) -> bytes:
        return self.canvas_bytes[4 - self.byte_count :]

    @property
    def unused(self) -> int:
        return 4 - self.byte_count


def extract_bits(data: bytes, spec: BitfieldSpec, *, bit_zero_on_left: bool = True) -> BitfieldValue:
    """
    Extract ``spec`` from ``data`` viewed as a big-endian bit string.

    With ``bit_zero_on_left`` bit 0 is the most significant bit of the first
    byte; otherwise bit 0 is the least significant bit of the last byte. The
    dashed view places the extracted span on a 32 character canvas.
    """

    bits = "".join(f"{value:08b}" for value in data)
    offset, width = spec.offset, spec.width
    if bit_zero_on_left:
        binary = bits[offset : offset + width]
        dashed = ("-" * offset + binary + "-" * (CANVAS_BITS - (width + offset)))[-CANVAS_BITS:]
    else:
        end = max(len(bits) - offset, 0)
        binary = bits[max(end - width, 0) : end]
        dashed = ("-" * (CANVAS_BITS - (width + offset)) + binary + "-" * offset)[:CANVAS_BITS]
    canvas = ("0" * CANVAS_BITS + binary)[-CANVAS_BITS:]
    return BitfieldValue(bits=binary, dashed=dashed, value=int(canvas, 2))


def hex_view(value: BitfieldValue) -> str:
    groups = ["--"] * value.unused + [f"{byte:02x}" for byte in value.used_bytes]
    return " ".join(groups) + "    " + value.dashed


def dec_view(value: BitfieldValue) -> str:
    groups = ["---"] * value.unused + [f"{byte:03d}" for byte in value.used_bytes]
    return " ".join(groups) + f" value: {value.value}"


def ascii_view(value: BitfieldValue) -> str:
    chars = "-" * value.unused + "".join(ascii_char(byte) for byte in value.used_bytes)
    return ".bitfield: " + chars


class BitfieldDecoder:
    """Render one row per bit-field from the data of its source range."""

    def __init__(self, config: DumpConfig) -> None:
        self.config = config

    def decode(self, bitfield: GatheredRange, source: Source = ("?", None)) -> List[Row]:
        if not self.config.display_bitfields:
            return []

        config = self.config
        spec = BitfieldSpec.parse(str(bitfield.is_bitfield))
        if spec is None:
            raise RangeWalkError(f"Error: invalid bit-field definition '{bitfield.is_bitfield}'.")

        data = bitfield.data
        not_enough_data = not data or len(data) * 8 < spec.offset + spec.width
        extracted: Optional[BitfieldValue] = None
        if not not_enough_data:
            extracted = extract_bits(data, spec, bit_zero_on_left=config.bit_zero_on_left)

        source_name, source_color = source
        width = config.data_width
        columns: List[Tuple[Column, Callable[[], str], Optional[str], int]] = [
            (
                Column.RANGE_NAME,
                lambda: fit("." + bitfield.name, config.maximum_range_name_size),
                bitfield.color,
                config.maximum_range_name_size,
            ),
            (
                Column.OFFSET,
                lambda: f"{spec.offset:02d} .. {spec.last_bit:02d}",
                bitfield.color,
                config.offset_width,
            ),
            (Column.CUMULATIVE_OFFSET, lambda: "", bitfield.color, config.offset_width),
            (
                Column.BITFIELD_SOURCE,
                lambda: fit(source_name, config.maximum_bitfield_source_size),
                source_color,
                config.maximum_bitfield_source_size,
            ),
            (Column.HEX_DUMP, lambda: hex_view(extracted), bitfield.color, 3 * width),
            (Column.DEC_DUMP, lambda: dec_view(extracted), bitfield.color, 4 * width),
            (Column.ASCII_DUMP, lambda: ascii_view(extracted), bitfield.color, width),
            (
                Column.USER_INFORMATION,
                lambda: fit(bitfield.user_information or "", config.maximum_user_information_size),
                bitfield.color,
                config.maximum_user_information_size,
            ),
        ]

        row = Row(new_line=True)
        for column, producer, color, field_width in columns:
            if not config.is_displayed(column):
                continue
            if not_enough_data and column not in IDENTITY_COLUMNS:
                text = UNKNOWN
            else:
                text = producer()
            row.add(column, pad(text, field_width), color)
        return [row]


__all__ = [
    "BitfieldDecoder",
    "BitfieldValue",
    "IDENTITY_COLUMNS",
    "ascii_view",
    "dec_view",
    "extract_bits",
    "hex_view",
]
