"""Split gathered ranges into fixed-width display rows."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from ..datatypes import Column, DumpConfig, Orientation
from ..ranges.model import GatheredRange
from .bitfield import BitfieldDecoder, Source
from .formatting import ascii_bytes, dec_bytes, fit, hex_bytes, pad
from .rows import Row

logger = logging.getLogger(__name__)

NAME_SEPARATOR = ", "
INFORMATION_COLOR = "bright_white"

# Characters used per byte by the padded dump columns in horizontal mode.
_PAD_UNITS: Tuple[Tuple[Column, int], ...] = (
    (Column.HEX_DUMP, 3),
    (Column.DEC_DUMP, 4),
    (Column.ASCII_DUMP, 1),
)

_NO_SOURCE: Source = ("?", None)


def _quotes(gathered: GatheredRange) -> Tuple[str, str]:
    return ('"', '"') if gathered.is_comment else ("<", ">")


class LayoutSplitter:
    """
    Lay gathered ranges out as rows for the configured orientation.

    Horizontal mode packs consecutive ranges into rows of ``data_width`` bytes;
    vertical mode gives every range (or every ``data_width`` chunk of it) its own
    row. Bit-field rows are emitted after the row holding their source range.
    """

    def __init__(self, config: DumpConfig, decoder: Optional[BitfieldDecoder] = None) -> None:
        self.config = config
        self.decoder = decoder or BitfieldDecoder(config)

    def split(self, gathered: Sequence[GatheredRange]) -> List[Row]:
        if self.config.orientation is Orientation.HORIZONTAL:
            rows = self._split_horizontal(gathered)
        else:
            rows = self._split_vertical(gathered)
        logger.debug("Split %d ranges into %d rows", len(gathered), len(rows))
        return rows

    def _show_zero_size_name(self, gathered: GatheredRange) -> bool:
        if not self.config.display_range_name:
            return False
        if gathered.is_comment:
            return self.config.display_comment_range
        return self.config.display_zero_size_range

    def _add_fields(
        self,
        row: Row,
        fields: Sequence[Tuple[Column, Callable[[], str], Optional[str]]],
    ) -> None:
        for column, producer, color in fields:
            if self.config.is_displayed(column):
                row.add(column, producer(), color)

    # -- horizontal -----------------------------------------------------------------

    def _close_row(self, row: Row, room_left: int) -> Row:
        for column, unit in _PAD_UNITS:
            row.pad_last(column, room_left * unit)
        row.new_line = True
        return row

    def _split_horizontal(self, gathered: Sequence[GatheredRange]) -> List[Row]:
        config = self.config
        width = config.data_width
        max_name = config.maximum_range_name_size

        rows: List[Row] = []
        row = Row()
        room_left = width
        current_offset = 0
        source = _NO_SOURCE
        pending_bitfields: List[Row] = []

        ordinary = [item for item in gathered if not item.is_bitfield]
        last_range = ordinary[-1] if ordinary else None

        for item in gathered:
            if item.is_bitfield:
                pending_bitfields.extend(self.decoder.decode(item, source))
                continue

            if room_left == width:
                rows.extend(pending_bitfields)
                pending_bitfields = []

            if not item.is_comment:
                source = (item.name, item.color)

            data = item.data
            if not data and self._show_zero_size_name(item):
                start_quote, end_quote = _quotes(item)
                quoted_size = max(max_name - 2, 2)
                row.add(Column.RANGE_NAME, f"{start_quote}{item.name[:quoted_size]}{end_quote}", item.color)
                row.add(Column.RANGE_NAME, NAME_SEPARATOR)

            dumped = 0
            while dumped < len(data):
                size_to_dump = min(room_left, len(data) - dumped)
                room_left -= size_to_dump
                chunk = data[dumped : dumped + size_to_dump]
                offset_text = config.format_offset(current_offset + config.offset_start)

                self._add_fields(
                    row,
                    (
                        (Column.OFFSET, lambda: "" if row.has(Column.OFFSET) else offset_text, None),
                        (
                            Column.BITFIELD_SOURCE,
                            lambda: "" if row.has(Column.BITFIELD_SOURCE) else " " * config.maximum_bitfield_source_size,
                            None,
                        ),
                        (Column.HEX_DUMP, lambda: hex_bytes(chunk), item.color),
                        (Column.DEC_DUMP, lambda: dec_bytes(chunk), item.color),
                        (Column.ASCII_DUMP, lambda: ascii_bytes(chunk), item.color),
                        (Column.RANGE_NAME, lambda: item.name[:max_name], item.color),
                        (Column.RANGE_NAME, lambda: NAME_SEPARATOR, None),
                    ),
                )

                dumped += size_to_dump
                current_offset += size_to_dump

                if room_left == 0 or (item is last_range and dumped == len(data)):
                    rows.append(self._close_row(row, room_left))
                    row = Row()
                    room_left = width
                    rows.extend(pending_bitfields)
                    pending_bitfields = []

        if row:
            rows.append(self._close_row(row, room_left))
        rows.extend(pending_bitfields)
        return rows

    # -- vertical -------------------------------------------------------------------

    def _split_vertical(self, gathered: Sequence[GatheredRange]) -> List[Row]:
        config = self.config
        width = config.data_width
        max_name = config.maximum_range_name_size
        info_size = config.maximum_user_information_size
        offset_width = config.offset_width

        rows: List[Row] = []
        total_dumped = 0
        source = _NO_SOURCE

        for item in gathered:
            if item.is_bitfield:
                rows.extend(self.decoder.decode(item, source))
                continue

            data = item.data
            if not data and self._show_zero_size_name(item):
                start_quote, end_quote = _quotes(item)
                row = Row(new_line=True)
                row.add(Column.RANGE_NAME, f"{start_quote}{item.name}{end_quote}", item.color)
                rows.append(row)

            dumped = 0
            while dumped < len(data):
                size_to_dump = min(width, len(data) - dumped)
                chunk = data[dumped : dumped + size_to_dump]
                range_offset = dumped
                absolute_offset = total_dumped
                row = Row(new_line=True)

                self._add_fields(
                    row,
                    (
                        (Column.RANGE_NAME, lambda: fit(item.name, max_name), item.color),
                        (
                            Column.OFFSET,
                            lambda: pad(config.format_offset(absolute_offset + config.offset_start), offset_width),
                            None,
                        ),
                        (
                            Column.CUMULATIVE_OFFSET,
                            lambda: pad(config.format_offset(range_offset), offset_width),
                            None,
                        ),
                        (
                            Column.BITFIELD_SOURCE,
                            lambda: " " * config.maximum_bitfield_source_size,
                            None,
                        ),
                        (Column.HEX_DUMP, lambda: pad(hex_bytes(chunk), 3 * width), item.color),
                        (Column.DEC_DUMP, lambda: pad(dec_bytes(chunk), 4 * width), item.color),
                        (Column.ASCII_DUMP, lambda: pad(ascii_bytes(chunk), width), item.color),
                        (
                            Column.USER_INFORMATION,
                            lambda: fit(item.user_information or "", info_size),
                            item.color,
                        ),
                    ),
                )

                dumped += size_to_dump
                total_dumped += size_to_dump
                rows.append(row)

            if not item.is_comment:
                source = (item.name, item.color)

        return rows


def add_information(rows: List[Row], config: DumpConfig) -> List[Row]:
    """
    Prepend the optional column-name header and ruler rows.

    Only columns present in the first row are described. Each column name and
    blank ruler cell is cut or padded to the length of that column's text in
    the first row, so the header lines up with the data below it.
    """

    if not rows:
        return rows
    first = rows[0]
    columns = [column for column in config.fields_to_display if first.has(column)]
    information: List[Row] = []

    if config.display_column_names:
        header = "".join(
            fit(column.value, len(first.text(column))) + " " for column in columns
        )
        row = Row(new_line=True)
        row.add(Column.INFORMATION, header, INFORMATION_COLOR)
        information.append(row)

    if config.display_ruler:
        width = config.data_width
        ruler = ""
        for column in columns:
            if column is Column.HEX_DUMP:
                ruler += "".join(f"{index % 16:x}  " for index in range(width)) + " "
            elif column is Column.DEC_DUMP:
                ruler += "".join(f"{index % 10:d}   " for index in range(width)) + " "
            elif column is Column.ASCII_DUMP:
                ruler += "".join(str(index % 10) for index in range(width)) + " "
            else:
                ruler += " " * len(first.text(column)) + " "
        row = Row(new_line=True)
        row.add(Column.RULER, ruler, INFORMATION_COLOR)
        information.append(row)

    return information + rows


__all__ = ["LayoutSplitter", "NAME_SEPARATOR", "add_information"]
