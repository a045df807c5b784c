"""Walk a byte buffer against compiled ranges, producing gathered ranges."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple

from ..errors import RangeWalkError
from .compiler import compile_ranges
from .model import COMMENT_MARKER, CanonicalRange, GatheredRange, describe_value, is_bitfield_spec

logger = logging.getLogger(__name__)

WarnCallback = Callable[[str], None]
DefaultColor = Callable[[], Optional[str]]


def _log_warning(message: str) -> None:
    logger.warning(message.rstrip())


def _coerce_size(value: Any) -> Optional[int]:
    """Return a non-negative integer size or ``None`` when ``value`` is not one."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class RangeWalker:
    """
    Consumes a buffer sequentially against a range provider.

    Every range pulled from the provider becomes a :class:`GatheredRange`.
    Comments and bit-fields never advance the cursor; bit-fields carry the data
    of the most recent ordinary range so the bit-field decoder can re-view it.
    A range asking for more data than is left is truncated and ends the walk.
    """

    def __init__(
        self,
        *,
        warn: Optional[WarnCallback] = None,
        default_color: Optional[DefaultColor] = None,
        display_range_size: bool = False,
        display_zero_size_range_warning: bool = True,
    ) -> None:
        self._warn = warn or _log_warning
        self._default_color = default_color or (lambda: None)
        self.display_range_size = display_range_size
        self.display_zero_size_range_warning = display_zero_size_range_warning

    def gather(
        self,
        description: Any,
        buffer: bytes,
        offset: int = 0,
        size: Optional[int] = None,
        collector: Optional[List[GatheredRange]] = None,
    ) -> Tuple[List[GatheredRange], int]:
        """
        Gather ranges from ``buffer`` starting at ``offset``.

        Parameters:
            description: Range description or :class:`RangeProvider`.
            buffer: Data to walk.
            offset: Start position in ``buffer``; must not be negative.
            size: Maximum number of bytes to consume, ``None`` for the rest of the buffer.
            collector: List the gathered ranges are appended to; a new list when ``None``.

        Returns:
            The collector and the cursor position after the last consumed byte.

        Raises:
            RangeWalkError: If ``offset`` is negative or a range size is invalid.
        """

        provider = compile_ranges(description)
        collected: List[GatheredRange] = [] if collector is None else collector

        used = offset or 0
        if used < 0:
            raise RangeWalkError(f"Error: invalid negative offset {used}.")

        available = max(len(buffer) - used, 0)
        remaining = available if size is None else max(min(size, available), 0)
        last_data = b""

        while True:
            canonical = provider.next_range(buffer, used)
            if canonical is None:
                break
            gathered, consumed, truncated = self._gather_one(
                canonical, buffer, used, remaining, last_data
            )
            collected.append(gathered)
            if not (gathered.is_bitfield or gathered.is_comment):
                last_data = gathered.data
            used += consumed
            remaining -= consumed
            if truncated:
                logger.debug("Stopping walk at offset %d after short range %r", used, gathered.name)
                break

        return collected, used

    def _gather_one(
        self,
        canonical: CanonicalRange,
        buffer: bytes,
        used: int,
        remaining: int,
        last_data: bytes,
    ) -> Tuple[GatheredRange, int, bool]:
        name = canonical.name.resolve(buffer, used, remaining)
        size_value = canonical.size.resolve(buffer, used, remaining)
        color = canonical.color.resolve(buffer, used, remaining)
        name = "" if name is None else str(name)

        is_comment = isinstance(size_value, str) and size_value.strip() == COMMENT_MARKER
        bitfield: Any = False
        if not is_comment and is_bitfield_spec(size_value):
            bitfield = size_value.strip()

        if color is None:
            color = self._default_color()

        if is_comment or bitfield:
            return (
                GatheredRange(
                    name=name,
                    color=color,
                    offset=used,
                    data=last_data if bitfield else b"",
                    is_bitfield=bitfield,
                    is_comment=is_comment,
                    user_information=canonical.user_information,
                ),
                0,
                False,
            )

        range_size = _coerce_size(size_value)
        if range_size is None:
            raise RangeWalkError(
                f"Error: size '{describe_value(size_value)}' doesn't look like a number in range '{name}'."
            )

        if self.display_range_size:
            name = f"{range_size}:{name}"

        if range_size == 0 and self.display_zero_size_range_warning:
            self._warn(f"Warning: range '{name}' requires zero bytes.\n")

        truncated = False
        if range_size > remaining:
            self._warn(
                f"Warning: not enough data for range '{name}', "
                f"{range_size} needed but only {remaining} available.\n"
            )
            name = f"-{range_size - remaining}:{name}"
            range_size = remaining
            truncated = True

        gathered = GatheredRange(
            name=name,
            color=color,
            offset=used,
            data=bytes(buffer[used : used + range_size]),
            user_information=canonical.user_information,
        )
        return gathered, range_size, truncated


def gather(
    description: Any,
    buffer: bytes,
    offset: int = 0,
    size: Optional[int] = None,
    collector: Optional[List[GatheredRange]] = None,
    **options: Any,
) -> Tuple[List[GatheredRange], int]:
    """Convenience wrapper running a :class:`RangeWalker` with keyword options."""

    return RangeWalker(**options).gather(description, buffer, offset, size, collector)


__all__ = ["RangeWalker", "gather"]
