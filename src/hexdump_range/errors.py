"""Exception and warning types raised by the dump pipeline."""

from __future__ import annotations


class HexDumpRangeError(RuntimeError):
    """Base class for fatal pipeline failures."""


class RangeCompileError(HexDumpRangeError):
    """Raised when a range description cannot be compiled into ranges."""


class RangeWalkError(HexDumpRangeError):
    """Raised when the buffer cannot be walked against the compiled ranges."""


class ConfigError(HexDumpRangeError, ValueError):
    """Raised when engine options are unknown or fail validation."""


class RangeDumpWarning(UserWarning):
    """Advisory emitted for zero-size ranges and ranges running past the data."""


__all__ = [
    "ConfigError",
    "HexDumpRangeError",
    "RangeCompileError",
    "RangeDumpWarning",
    "RangeWalkError",
]
