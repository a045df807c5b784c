from __future__ import annotations

from collections.abc import Callable

import pytest

from hexdump_range.datatypes import Column, DumpConfig
from hexdump_range.layout.bitfield import (
    BitfieldDecoder,
    ascii_view,
    dec_view,
    extract_bits,
    hex_view,
)
from hexdump_range.ranges.model import BitfieldSpec, GatheredRange


def _bitfield(spec: str, data: bytes, name: str = "mode") -> GatheredRange:
    return GatheredRange(name=name, color="green", offset=0, data=data, is_bitfield=spec)


@pytest.mark.parametrize(
    ("spec", "offset", "width"),
    [
        ("b", 0, 1),
        ("b5", 0, 5),
        ("x3b2", 3, 2),
        ("X2b8", 16, 8),
        ("X1x4b12", 12, 12),
    ],
)
def test_bitfield_spec_parsing(spec: str, offset: int, width: int) -> None:
    assert BitfieldSpec.parse(spec) == BitfieldSpec(offset=offset, width=width)


def test_bitfield_spec_rejects_other_sizes() -> None:
    assert BitfieldSpec.parse("12") is None
    assert BitfieldSpec.parse("#") is None


def test_extract_bits_from_the_left() -> None:
    # "c" is 0b01100011; bits 2..3 are "10".
    value = extract_bits(b"comm", BitfieldSpec(offset=2, width=2))

    assert value.bits == "10"
    assert value.value == 2
    assert value.dashed == "--10" + "-" * 28
    assert hex_view(value) == "-- -- -- 02    --10" + "-" * 28
    assert dec_view(value) == "--- --- --- 002 value: 2"
    assert ascii_view(value) == ".bitfield: ---."


def test_extract_bits_from_the_right() -> None:
    # last byte "m" is 0b01101101; counting from its lsb, bits 2..3 are "11".
    value = extract_bits(b"comm", BitfieldSpec(offset=2, width=2), bit_zero_on_left=False)

    assert value.bits == "11"
    assert value.value == 3
    assert value.dashed == "-" * 28 + "11--"


def test_wide_bitfield_uses_more_bytes() -> None:
    value = extract_bits(b"\xab\xcd\xef", BitfieldSpec(offset=4, width=16))

    assert value.value == 0xBCDE
    assert value.byte_count == 2
    assert hex_view(value).startswith("-- -- bc de    ")
    assert dec_view(value) == f"--- --- 188 222 value: {0xBCDE}"


def test_decoder_row_columns(plain_config: Callable[..., DumpConfig]) -> None:
    config = plain_config(data_width=8)
    (row,) = BitfieldDecoder(config).decode(_bitfield("x2b2", b"comm"), ("header", "cyan"))

    assert row.new_line
    assert row.text(Column.OFFSET) == "02 .. 03"
    assert row.text(Column.BITFIELD_SOURCE) == "header  "
    assert row.cells[Column.BITFIELD_SOURCE][0].color == "cyan"
    assert row.text(Column.HEX_DUMP).startswith("-- -- -- 02    --10")
    assert row.text(Column.ASCII_DUMP) == ".bitfield: ---."
    assert row.cells[Column.HEX_DUMP][0].color == "green"
    assert not row.has(Column.DEC_DUMP)


def test_decoder_vertical_name_is_nested(plain_config: Callable[..., DumpConfig]) -> None:
    config = plain_config(orientation="vertical", maximum_range_name_size=6)
    (row,) = BitfieldDecoder(config).decode(_bitfield("b", b"\x80", name="enabled"))

    assert row.text(Column.RANGE_NAME) == ".enabl"
    assert row.text(Column.CUMULATIVE_OFFSET) == " " * 8


def test_decoder_short_source_shows_placeholders(plain_config: Callable[..., DumpConfig]) -> None:
    config = plain_config(data_width=4, display_dec_dump=True)
    (row,) = BitfieldDecoder(config).decode(_bitfield("X1b4", b"\x01"), ("one", None))

    assert row.text(Column.HEX_DUMP) == "?" + " " * 11
    assert row.text(Column.DEC_DUMP) == "?" + " " * 15
    assert row.text(Column.ASCII_DUMP) == "?   "
    assert row.text(Column.OFFSET) == "08 .. 11"
    assert row.text(Column.BITFIELD_SOURCE).strip() == "one"


def test_decoder_empty_source_shows_placeholders(plain_config: Callable[..., DumpConfig]) -> None:
    (row,) = BitfieldDecoder(plain_config()).decode(_bitfield("b3", b""))

    assert row.text(Column.HEX_DUMP).strip() == "?"
    assert row.text(Column.BITFIELD_SOURCE).strip() == "?"


def test_decoder_hidden_bitfields(plain_config: Callable[..., DumpConfig]) -> None:
    config = plain_config(display_bitfields=False)

    assert BitfieldDecoder(config).decode(_bitfield("b", b"\x01")) == []
