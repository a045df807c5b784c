"""Configuration dataclasses for the range dumper."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class OutputFormat(str, Enum):
    """Text presentation produced by the renderer."""

    ASCII = "ascii"
    ANSI = "ansi"
    HTML = "html"


class ColorMode(str, Enum):
    """Policy used for ranges declared without a color."""

    BLACK_AND_WHITE = "bw"
    CYCLE = "cycle"


class Orientation(str, Enum):
    """Row layout: ranges packed across rows or one range per row."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class OffsetFormat(str, Enum):
    """Base used when printing offsets."""

    HEX = "hex"
    DEC = "dec"


class Column(str, Enum):
    """Columns a layout row can carry."""

    INFORMATION = "INFORMATION"
    RULER = "RULER"
    OFFSET = "OFFSET"
    CUMULATIVE_OFFSET = "CUMULATIVE_OFFSET"
    BITFIELD_SOURCE = "BITFIELD_SOURCE"
    HEX_DUMP = "HEX_DUMP"
    DEC_DUMP = "DEC_DUMP"
    ASCII_DUMP = "ASCII_DUMP"
    RANGE_NAME = "RANGE_NAME"
    USER_INFORMATION = "USER_INFORMATION"


HORIZONTAL_FIELDS = (
    Column.OFFSET,
    Column.BITFIELD_SOURCE,
    Column.HEX_DUMP,
    Column.DEC_DUMP,
    Column.ASCII_DUMP,
    Column.RANGE_NAME,
)

VERTICAL_FIELDS = (
    Column.RANGE_NAME,
    Column.OFFSET,
    Column.CUMULATIVE_OFFSET,
    Column.BITFIELD_SOURCE,
    Column.HEX_DUMP,
    Column.DEC_DUMP,
    Column.ASCII_DUMP,
    Column.USER_INFORMATION,
)

DEFAULT_PALETTES: Dict[OutputFormat, List[str]] = {
    OutputFormat.ASCII: [],
    OutputFormat.ANSI: ["white", "green", "bright_yellow", "cyan", "red"],
    OutputFormat.HTML: ["white", "green", "bright_yellow", "cyan", "red"],
}


def _default_color_names() -> Dict[str, Dict[str, str]]:
    return {
        OutputFormat.HTML.value: {
            "white": "style='color:#fff;'",
            "green": "style='color:#0f0;'",
            "bright_yellow": "style='color:#ff0;'",
            "yellow": "style='color:#ff0;'",
            "cyan": "style='color:#0ff;'",
            "red": "style='color:#f00;'",
        },
    }


@dataclass
class DumpConfig:
    """Options controlling how gathered ranges are laid out and rendered."""

    name: str = "Anonymous"
    verbose: bool = False
    format: OutputFormat = OutputFormat.ANSI
    color: ColorMode = ColorMode.BLACK_AND_WHITE
    orientation: Orientation = Orientation.HORIZONTAL
    offset_format: OffsetFormat = OffsetFormat.HEX
    offset_start: int = 0
    data_width: int = 16
    display_column_names: bool = False
    display_ruler: bool = False
    display_offset: bool = True
    display_cumulative_offset: bool = True
    display_hex_dump: bool = True
    display_dec_dump: bool = False
    display_ascii_dump: bool = True
    display_range_name: bool = True
    maximum_range_name_size: int = 16
    display_range_size: bool = False
    display_user_information: bool = False
    maximum_user_information_size: int = 20
    display_bitfields: bool = True
    display_bitfield_source: bool = True
    maximum_bitfield_source_size: int = 8
    bit_zero_on_left: bool = True
    display_comment_range: bool = True
    display_zero_size_range: bool = True
    display_zero_size_range_warning: bool = True
    color_names: Dict[str, Dict[str, str]] = field(default_factory=_default_color_names)

    @property
    def fields_to_display(self) -> tuple[Column, ...]:
        if self.orientation is Orientation.HORIZONTAL:
            return HORIZONTAL_FIELDS
        return VERTICAL_FIELDS

    @property
    def offset_width(self) -> int:
        return 8 if self.offset_format is OffsetFormat.HEX else 10

    def format_offset(self, value: int) -> str:
        if self.offset_format is OffsetFormat.HEX:
            return f"{value:08x}"
        return f"{value:010d}"

    def is_displayed(self, column: Column) -> bool:
        """Return True when the display toggle for ``column`` is enabled."""

        if column in (Column.INFORMATION, Column.RULER):
            return True
        return bool(getattr(self, f"display_{column.value.lower()}"))

    def palette(self) -> List[str]:
        return list(DEFAULT_PALETTES[self.format])

    def color_name_table(self) -> Dict[str, str]:
        """Return the user palette for the active format, matched case-insensitively."""

        for key, table in self.color_names.items():
            if str(key).lower() == self.format.value:
                return table
        return {}

    def lookup_color_name(self, color: Optional[str]) -> Optional[str]:
        if color is None:
            return None
        return self.color_name_table().get(color) or color
