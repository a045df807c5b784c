"""Dump engine: compile, walk, split and render in one place."""
from __future__ import annotations

import logging
import sys
import warnings
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Mapping, NoReturn, Optional, Tuple, Union

from .config_loader import build_config
from .datatypes import ColorMode, DumpConfig
from .errors import HexDumpRangeError, RangeDumpWarning, RangeWalkError
from .layout.renderer import Renderer
from .layout.splitter import LayoutSplitter, add_information
from .layout.terminal import AnsiColorizer, ColorCycler
from .ranges.model import GatheredRange
from .ranges.walker import RangeWalker

logger = logging.getLogger(__name__)

BufferLike = Union[bytes, bytearray, memoryview, str]


def _write_info(message: str) -> None:
    sys.stdout.write(message)


def _emit_warning(message: str) -> None:
    warnings.warn(message.rstrip(), RangeDumpWarning, stacklevel=4)


def _raise_fatal(error: HexDumpRangeError) -> NoReturn:
    raise error


@dataclass
class Interaction:
    """Notification callbacks used to report to the user."""

    info: Callable[[str], None] = _write_info
    warn: Callable[[str], None] = _emit_warning
    fatal: Callable[[HexDumpRangeError], Any] = _raise_fatal


def _empty_gathered() -> List[GatheredRange]:
    return []


@dataclass
class DumpSession:
    """Accumulates gathered ranges across several gather calls until reset."""

    gathered: List[GatheredRange] = field(default_factory=_empty_gathered)

    def reset(self) -> None:
        self.gathered = []

    def __len__(self) -> int:
        return len(self.gathered)


def _as_bytes(buffer: BufferLike) -> bytes:
    if isinstance(buffer, str):
        try:
            return buffer.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise RangeWalkError(
                f"Error: string buffer holds {exc.object[exc.start]!r} at index {exc.start}, "
                "only characters up to U+00FF map to bytes."
            ) from exc
    return bytes(buffer)


class DumpEngine:
    """
    Create annotated dumps of binary data from range descriptions.

    The engine owns its configuration, the notification callbacks, a default
    session for accumulated dumps and the cyclic color state used for ranges
    without an explicit color.
    """

    def __init__(
        self,
        config: Optional[DumpConfig] = None,
        *,
        interaction: Optional[Interaction] = None,
        ansi: Optional[AnsiColorizer] = None,
        **options: Any,
    ) -> None:
        self.interaction = interaction or Interaction()
        with self._fatal_guard():
            self.config = build_config(options, base=config)
        self.colors = ColorCycler(self.config.palette())
        self.session = DumpSession()
        self._renderer = Renderer(self.config, ansi=ansi)
        self._splitter = LayoutSplitter(self.config)
        self._walker = RangeWalker(
            warn=self.interaction.warn,
            default_color=self.default_color,
            display_range_size=self.config.display_range_size,
            display_zero_size_range_warning=self.config.display_zero_size_range_warning,
        )
        if self.config.verbose:
            self.interaction.info(f"Creating {type(self).__name__} '{self.config.name}'.\n")

    @contextmanager
    def _fatal_guard(self) -> Iterator[None]:
        try:
            yield
        except HexDumpRangeError as exc:
            logger.debug("Fatal dump error: %s", exc)
            self.interaction.fatal(exc)
            raise

    def default_color(self) -> Optional[str]:
        """Color for a range declared without one, per the configured color mode."""

        if self.config.color is ColorMode.CYCLE:
            return self.colors.next_color()
        palette = self.config.palette()
        return palette[0] if palette else None

    def reset_colors(self) -> None:
        self.colors.reset()

    def new_session(self) -> DumpSession:
        return DumpSession()

    def _gather(
        self,
        collector: Optional[List[GatheredRange]],
        description: Any,
        buffer: BufferLike,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> Tuple[List[GatheredRange], int]:
        return self._walker.gather(description, _as_bytes(buffer), offset, size, collector)

    def _render(self, gathered: List[GatheredRange]) -> str:
        rows = add_information(self._splitter.split(gathered), self.config)
        return self._renderer.render(rows)

    def dump(
        self,
        description: Any,
        buffer: BufferLike,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> str:
        """
        Compile ``description``, walk ``buffer`` and render the result.

        Parameters:
            description: Range description (nested tuples, string or pull callable).
            buffer: Data to dump.
            offset: Position in ``buffer`` to start at.
            size: Maximum number of bytes to dump, ``None`` for the rest of the buffer.

        Returns:
            str: The rendered dump.
        """

        with self._fatal_guard():
            gathered, _ = self._gather(None, description, buffer, offset, size)
            return self._render(gathered)

    def dump_with_consumed_size(
        self,
        description: Any,
        buffer: BufferLike,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> Tuple[str, int]:
        """Like :meth:`dump` but also return the position the walk stopped at."""

        with self._fatal_guard():
            gathered, used = self._gather(None, description, buffer, offset, size)
            return self._render(gathered), used

    def gather_into(
        self,
        session: Optional[DumpSession],
        description: Any,
        buffer: BufferLike,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> int:
        """Walk ``buffer`` and append the gathered ranges to ``session`` (default session when ``None``)."""

        target = session if session is not None else self.session
        with self._fatal_guard():
            _, used = self._gather(target.gathered, description, buffer, offset, size)
        return used

    def gather(
        self,
        description: Any,
        buffer: BufferLike,
        offset: int = 0,
        size: Optional[int] = None,
    ) -> int:
        return self.gather_into(None, description, buffer, offset, size)

    def render_accumulated(self, session: Optional[DumpSession] = None) -> str:
        target = session if session is not None else self.session
        with self._fatal_guard():
            return self._render(target.gathered)

    def reset_accumulated(self, session: Optional[DumpSession] = None) -> None:
        target = session if session is not None else self.session
        target.reset()


def create_engine(
    options: Optional[Mapping[str, Any]] = None,
    *,
    interaction: Optional[Interaction] = None,
    **kwargs: Any,
) -> DumpEngine:
    """Build a :class:`DumpEngine` from an options mapping and/or keyword options."""

    merged = dict(options or {})
    merged.update(kwargs)
    return DumpEngine(interaction=interaction, **merged)


__all__ = ["DumpEngine", "DumpSession", "Interaction", "create_engine"]
