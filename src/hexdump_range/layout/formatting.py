"""Text helpers shared by the splitter and the bit-field decoder."""
from __future__ import annotations

from typing import Iterable

# Bytes below this value are shown as "." in ASCII dumps.
PRINTABLE_THRESHOLD = 30


def hex_bytes(data: Iterable[int]) -> str:
    return "".join(f"{value:02x} " for value in data)


def dec_bytes(data: Iterable[int]) -> str:
    return "".join(f"{value:03d} " for value in data)


def ascii_char(value: int) -> str:
    return "." if value < PRINTABLE_THRESHOLD else chr(value)


def ascii_bytes(data: Iterable[int]) -> str:
    return "".join(ascii_char(value) for value in data)


def fit(text: str, width: int) -> str:
    """Left-justify ``text`` in ``width`` columns, truncating when longer."""

    return f"{text[:width]:<{width}}"


def pad(text: str, width: int) -> str:
    """Left-justify ``text`` in ``width`` columns without truncating."""

    return text.ljust(width)


__all__ = ["PRINTABLE_THRESHOLD", "ascii_bytes", "ascii_char", "dec_bytes", "fit", "hex_bytes", "pad"]
