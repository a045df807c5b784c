"""Row and fragment containers produced by the layout splitter."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..datatypes import Column


@dataclass(frozen=True)
class Fragment:
    """A piece of text rendered in a single color."""

    text: str
    color: Optional[str] = None


def _empty_cells() -> Dict[Column, List[Fragment]]:
    return {}


@dataclass
class Row:
    """One display row: ordered fragments per column plus a line terminator flag."""

    cells: Dict[Column, List[Fragment]] = field(default_factory=_empty_cells)
    new_line: bool = False

    def add(self, column: Column, text: str, color: Optional[str] = None) -> None:
        self.cells.setdefault(column, []).append(Fragment(text, color))

    def has(self, column: Column) -> bool:
        return column in self.cells

    def text(self, column: Column) -> str:
        """Concatenated uncolored text of ``column`` (empty when absent)."""

        return "".join(fragment.text for fragment in self.cells.get(column, []))

    def pad_last(self, column: Column, count: int) -> None:
        """Append ``count`` spaces to the last fragment of ``column``."""

        fragments = self.cells.get(column)
        if not fragments or count <= 0:
            return
        last = fragments[-1]
        fragments[-1] = Fragment(last.text + " " * count, last.color)

    def __bool__(self) -> bool:
        return bool(self.cells)


__all__ = ["Fragment", "Row"]
