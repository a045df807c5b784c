"""Annotated hex dumps of binary data driven by range descriptions."""

from .config_loader import build_config, load_config
from .datatypes import ColorMode, Column, DumpConfig, OffsetFormat, Orientation, OutputFormat
from .engine import DumpEngine, DumpSession, Interaction, create_engine
from .errors import ConfigError, HexDumpRangeError, RangeCompileError, RangeDumpWarning, RangeWalkError

__all__ = [
    "ColorMode",
    "Column",
    "ConfigError",
    "DumpConfig",
    "DumpEngine",
    "DumpSession",
    "HexDumpRangeError",
    "Interaction",
    "OffsetFormat",
    "Orientation",
    "OutputFormat",
    "RangeCompileError",
    "RangeDumpWarning",
    "RangeWalkError",
    "build_config",
    "create_engine",
    "load_config",
]
