"""Terminal and HTML color handling."""
from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from typing import List, Optional, Sequence

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

logger = logging.getLogger(__name__)

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")
HTML_DEFAULT_STYLE = "style='color:#fff;'"

# Tokens may spell backgrounds as "on_<color>"; rich wants "on <color>".
_BACKGROUND_TOKEN_RE = re.compile(r"\bon_(?=\S)")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def normalize_color_token(token: str) -> str:
    return _BACKGROUND_TOKEN_RE.sub("on ", token.strip())


@lru_cache(maxsize=256)
def parse_style(token: str) -> Optional[Style]:
    """
    Parse a color token such as ``"bright_yellow"`` or ``"blue on_yellow"``.

    Returns:
        The rich :class:`Style`, or ``None`` when the token is empty or unknown.
    """

    normalized = normalize_color_token(token)
    if not normalized:
        return None
    try:
        return Style.parse(normalized)
    except StyleSyntaxError:
        logger.debug("Unknown color token %r", token)
        return None


class AnsiColorizer:
    """Wrap text in ANSI SGR sequences for a color token."""

    def __init__(self, *, no_color: bool = False, color_system: ColorSystem = ColorSystem.TRUECOLOR) -> None:
        env_no_color = bool(os.environ.get("NO_COLOR"))
        self.no_color = no_color or env_no_color
        self.color_system = color_system

    def apply(self, text: str, token: Optional[str]) -> str:
        """
        Apply the style represented by ``token`` to ``text``.

        Returns:
            ``text`` wrapped with the SGR sequence and a reset, or ``text`` unchanged
            when it is empty, the token is unknown, or colors are disabled.
        """

        if not text or not token or self.no_color:
            return text
        style = parse_style(token)
        if style is None:
            return text
        return style.render(text, color_system=self.color_system)


def html_style(token: Optional[str]) -> str:
    """
    Return a ``style='...'`` attribute for ``token``.

    Tokens that already are style attributes are used verbatim; color names
    understood by rich are converted to CSS colors; anything else is white.
    """

    if not token:
        return HTML_DEFAULT_STYLE
    stripped = token.strip()
    if stripped.startswith("style="):
        return stripped
    style = parse_style(stripped)
    if style is None or style.color is None:
        return HTML_DEFAULT_STYLE
    declarations = [f"color:{style.color.get_truecolor().hex};"]
    if style.bgcolor is not None:
        declarations.append(f"background-color:{style.bgcolor.get_truecolor().hex};")
    return "style='" + "".join(declarations) + "'"


class ColorCycler:
    """
    Cyclic fallback palette for ranges declared without a color.

    The index advances before each pick, so the first color handed out is the
    second palette entry. The state belongs to one engine and is never shared.
    """

    def __init__(self, palette: Sequence[str]) -> None:
        self._palette: List[str] = list(palette)
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def next_color(self) -> Optional[str]:
        if not self._palette:
            return None
        self._index += 1
        if self._index >= len(self._palette):
            self._index = 0
        return self._palette[self._index]

    def reset(self) -> None:
        self._index = 0


__all__ = [
    "ANSI_ESCAPE_RE",
    "AnsiColorizer",
    "ColorCycler",
    "HTML_DEFAULT_STYLE",
    "html_style",
    "normalize_color_token",
    "parse_style",
    "strip_ansi",
]
