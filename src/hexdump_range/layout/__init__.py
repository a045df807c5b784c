"""Row layout, bit-field decoding and text rendering."""

from .bitfield import BitfieldDecoder, extract_bits
from .renderer import Renderer, render
from .rows import Fragment, Row
from .splitter import LayoutSplitter, add_information
from .terminal import AnsiColorizer, ColorCycler, html_style, strip_ansi

__all__ = [
    "AnsiColorizer",
    "BitfieldDecoder",
    "ColorCycler",
    "Fragment",
    "LayoutSplitter",
    "Renderer",
    "Row",
    "add_information",
    "extract_bits",
    "html_style",
    "render",
    "strip_ansi",
]
