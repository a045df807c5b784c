"""Compile range descriptions into canonical four-field ranges."""
from __future__ import annotations

import inspect
import logging
from collections import deque
from typing import Any, Callable, Deque, Iterable, Iterator, List, Optional, Sequence

from ..errors import RangeCompileError
from .model import (
    RANGE_DEFINITION_FIELDS,
    CanonicalRange,
    RangeGenerator,
    RangeLeaf,
    RangeNode,
    RangeSequence,
    describe_value,
    field_of,
)

logger = logging.getLogger(__name__)

RANGE_SEPARATOR = ":"
FIELD_SEPARATOR = ","

PullFunction = Callable[..., Any]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def build_tree(description: Any) -> RangeNode:
    """
    Convert a caller description (nested lists/tuples or a string) into a RangeNode tree.

    A sequence that holds no nested sequence is a leaf describing a single range;
    a one-element leaf holding a callable is a whole-range generator. Any other
    sequence is a group whose elements must all be sequences themselves.

    Raises:
        RangeCompileError: If a group mixes bare values with nested ranges or the
            description has an unsupported type.
    """

    if isinstance(description, (RangeLeaf, RangeSequence, RangeGenerator)):
        return description
    if isinstance(description, str):
        return parse_range_string(description)
    if not _is_sequence(description):
        raise RangeCompileError(
            f"Error: unsupported range description {describe_value(description)!r}."
        )
    if not any(_is_sequence(item) for item in description):
        if len(description) == 1 and callable(description[0]):
            return RangeGenerator(description[0])
        return RangeLeaf(tuple(description))

    children: List[RangeNode] = []
    for item in description:
        if not _is_sequence(item):
            raise RangeCompileError(
                f"Error: unexpected element {describe_value(item)!r} among nested range descriptions."
            )
        children.append(build_tree(item))
    return RangeSequence(tuple(children))


def parse_range_string(description: str) -> RangeSequence:
    """
    Parse the ``name,size[,color[,info]]:name,size...`` mini-language.

    Ranges are separated by ``:`` and fields by ``,``; surrounding whitespace is
    trimmed from every field. Blank ranges are skipped and blank color or user
    information fields are treated as absent.
    """

    leaves: List[RangeNode] = []
    for chunk in description.split(RANGE_SEPARATOR):
        if not chunk.strip():
            continue
        values: List[Optional[str]] = [item.strip() for item in chunk.split(FIELD_SEPARATOR)]
        for index in range(2, len(values)):
            if values[index] == "":
                values[index] = None
        leaves.append(RangeLeaf(tuple(values)))
    return RangeSequence(tuple(leaves))


def _canonical_leaf(leaf: RangeLeaf) -> CanonicalRange:
    fields = list(leaf.fields)
    if len(fields) < 2:
        raise RangeCompileError(
            f"Error: too few elements in range description {leaf.describe()}."
        )
    if len(fields) > RANGE_DEFINITION_FIELDS:
        raise RangeCompileError(
            f"Error: too many elements in range description {leaf.describe()}."
        )
    fields.extend([None] * (RANGE_DEFINITION_FIELDS - len(fields)))
    name, size, color, user_information = fields
    return CanonicalRange(
        name=field_of(name),
        size=field_of(size),
        color=field_of(color),
        user_information=None if user_information is None else str(user_information),
    )


def _expand_generator(node: RangeGenerator) -> RangeLeaf:
    produced = node.function()
    values = tuple(produced) if _is_sequence(produced) else (produced,)
    if len(values) != 3:
        raise RangeCompileError(
            "Error: single sub range definition returned "
            f"{RangeLeaf(values).describe()}, expected (name, size, color)."
        )
    return RangeLeaf(values)


def iter_canonical(node: RangeNode) -> Iterator[CanonicalRange]:
    """Yield canonical ranges depth-first, left to right."""

    if isinstance(node, RangeSequence):
        for child in node.children:
            yield from iter_canonical(child)
    elif isinstance(node, RangeGenerator):
        yield _canonical_leaf(_expand_generator(node))
    else:
        yield _canonical_leaf(node)


def flatten(description: Any) -> List[CanonicalRange]:
    """Compile ``description`` eagerly into its ordered list of canonical ranges."""

    return list(iter_canonical(build_tree(description)))


class RangeProvider:
    """Pull interface the walker consumes canonical ranges from."""

    def next_range(self, buffer: bytes, offset: int) -> Optional[CanonicalRange]:
        raise NotImplementedError


class ListRangeProvider(RangeProvider):
    """Serves a pre-compiled list of ranges in order."""

    def __init__(self, ranges: Iterable[CanonicalRange]) -> None:
        self._ranges: Deque[CanonicalRange] = deque(ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def next_range(self, buffer: bytes, offset: int) -> Optional[CanonicalRange]:
        if not self._ranges:
            return None
        return self._ranges.popleft()


def _accepts_position(function: PullFunction) -> bool:
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        # No introspectable signature (some builtins); assume the full form.
        return True
    try:
        signature.bind(b"", 0)
    except TypeError:
        pass
    else:
        return True
    try:
        signature.bind()
    except TypeError:
        raise RangeCompileError(
            f"Error: range provider {describe_value(function)} must accept (buffer, offset) or no arguments."
        ) from None
    return False


class PullRangeProvider(RangeProvider):
    """
    Wraps a caller function returning a description or ``None``.

    The function is called as ``function(buffer, offset)`` when its signature
    accepts two positional arguments and as ``function()`` otherwise. Each
    description it returns is compiled on demand; when it expands to several
    ranges they are served before the function is called again.
    """

    def __init__(self, function: PullFunction) -> None:
        self._function = function
        self._takes_position = _accepts_position(function)
        self._pending: Deque[CanonicalRange] = deque()
        self._exhausted = False

    def next_range(self, buffer: bytes, offset: int) -> Optional[CanonicalRange]:
        while not self._pending:
            if self._exhausted:
                return None
            if self._takes_position:
                description = self._function(buffer, offset)
            else:
                description = self._function()
            if description is None:
                self._exhausted = True
                return None
            self._pending.extend(flatten(description))
        return self._pending.popleft()


def compile_ranges(description: Any) -> RangeProvider:
    """
    Compile a range description into a :class:`RangeProvider`.

    Parameters:
        description: Nested lists/tuples of range tuples, a range string, a
            provider, or a callable taking ``(buffer, offset)`` or no
            arguments, pulled until it returns ``None``.

    Returns:
        RangeProvider: The provider the walker pulls canonical ranges from.

    Raises:
        RangeCompileError: If the description is malformed.
    """

    if isinstance(description, RangeProvider):
        return description
    if callable(description) and not isinstance(description, (str, Sequence)):
        logger.debug("Using pull-based range provider %s", describe_value(description))
        return PullRangeProvider(description)
    ranges = flatten(description)
    logger.debug("Compiled %d ranges", len(ranges))
    return ListRangeProvider(ranges)


__all__ = [
    "ListRangeProvider",
    "PullRangeProvider",
    "RangeProvider",
    "build_tree",
    "compile_ranges",
    "flatten",
    "iter_canonical",
    "parse_range_string",
]
