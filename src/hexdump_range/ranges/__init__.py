"""Range descriptions: compilation into canonical ranges and buffer walking."""

from .compiler import (
    ListRangeProvider,
    PullRangeProvider,
    RangeProvider,
    build_tree,
    compile_ranges,
    flatten,
    parse_range_string,
)
from .model import (
    BitfieldSpec,
    CanonicalRange,
    ComputedField,
    GatheredRange,
    LiteralField,
    RangeGenerator,
    RangeLeaf,
    RangeSequence,
    field_of,
)
from .walker import RangeWalker, gather

__all__ = [
    "BitfieldSpec",
    "CanonicalRange",
    "ComputedField",
    "GatheredRange",
    "ListRangeProvider",
    "LiteralField",
    "PullRangeProvider",
    "RangeGenerator",
    "RangeLeaf",
    "RangeProvider",
    "RangeSequence",
    "RangeWalker",
    "build_tree",
    "compile_ranges",
    "field_of",
    "flatten",
    "gather",
    "parse_range_string",
]
