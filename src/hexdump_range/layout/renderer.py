"""Render layout rows to plain, ANSI or HTML text."""
from __future__ import annotations

import html
from typing import Callable, Iterable, List, Optional, Tuple

from ..datatypes import Column, DumpConfig, OutputFormat
from .rows import Row
from .terminal import AnsiColorizer, html_style

HTML_HEADER = '<pre style ="font-family: monospace; background-color: #000 ;">\n'
HTML_FOOTER = "\n</pre>\n"

Colorizer = Callable[[str, Optional[str]], str]


def _plain(text: str, color: Optional[str]) -> str:
    return text


def _html(text: str, color: Optional[str]) -> str:
    return f"<span {html_style(color)}>{html.escape(text, quote=False)}</span>"


class Renderer:
    """Walk the row grid and emit text in the configured format."""

    def __init__(self, config: DumpConfig, *, ansi: Optional[AnsiColorizer] = None) -> None:
        self.config = config
        self._ansi = ansi or AnsiColorizer()

    def colorizer_data(self) -> Tuple[str, str, Colorizer]:
        """Return the header, footer and fragment colorizer for the output format."""

        output_format = self.config.format
        if output_format is OutputFormat.HTML:
            return HTML_HEADER, HTML_FOOTER, _html
        if output_format is OutputFormat.ANSI:
            return "", "", self._ansi.apply
        return "", "", _plain

    def columns(self) -> List[Column]:
        return [Column.INFORMATION, Column.RULER, *self.config.fields_to_display]

    def render(self, rows: Iterable[Row]) -> str:
        header, footer, colorizer = self.colorizer_data()
        columns = self.columns()
        parts: List[str] = []

        for row in rows:
            for column in columns:
                fragments = row.cells.get(column)
                if fragments is None:
                    continue
                for fragment in fragments:
                    color = self.config.lookup_color_name(fragment.color)
                    parts.append(colorizer(fragment.text, color))
                parts.append(" ")
            if row.new_line:
                parts.append("\n")

        return header + "".join(parts) + footer


def render(rows: Iterable[Row], config: DumpConfig) -> str:
    return Renderer(config).render(rows)


__all__ = ["HTML_FOOTER", "HTML_HEADER", "Renderer", "render"]
