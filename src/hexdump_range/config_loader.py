"""Configuration loader that validates engine options and user-provided TOML."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .datatypes import ColorMode, DumpConfig, OffsetFormat, Orientation, OutputFormat
from .errors import ConfigError

logger = logging.getLogger(__name__)

_ENUM_ALIASES: Dict[type[Enum], Dict[str, str]] = {
    OutputFormat: {"plain": "ascii", "text": "ascii"},
    ColorMode: {
        "blackandwhite": "bw",
        "black_and_white": "bw",
        "cyclic": "cycle",
    },
    Orientation: {"hor": "horizontal", "ver": "vertical"},
    OffsetFormat: {"decimal": "dec", "hexadecimal": "hex"},
}

_MIN_DATA_WIDTH = 1
_MIN_RANGE_NAME_SIZE = 2


def _coerce_bool(value: Any, key: str) -> bool:
    """Return a bool, coercing simple 0/1 representations when necessary."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"0", "1"}:
            return normalized == "1"
        if normalized in {"true", "false"}:
            return normalized == "true"
    raise ConfigError(f"{key} must be a boolean (use true/false).")


def _coerce_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ConfigError(f"{key} must be an integer")


def _coerce_enum(value: Any, key: str, enum_type: type[Enum]) -> Enum:
    """Return an enum member, coercing string values case-insensitively."""

    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        normalized = _ENUM_ALIASES.get(enum_type, {}).get(normalized, normalized)
        for member in enum_type:
            if normalized == str(member.value).lower():
                return member
        # Orientation accepts any prefix ("hor", "vert", ...).
        if enum_type is Orientation and normalized:
            for member in enum_type:
                if str(member.value).startswith(normalized[:3]):
                    return member
    raise ConfigError(
        f"{key} must be one of: {', '.join(str(member.value) for member in enum_type)}"
    )


def _coerce_color_names(value: Any, key: str) -> Dict[str, Dict[str, str]]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{key}] must be a table")
    tables: Dict[str, Dict[str, str]] = {}
    for format_name, table in value.items():
        if not isinstance(table, Mapping):
            raise ConfigError(f"[{key}.{format_name}] must be a table")
        tables[str(format_name).lower()] = {
            str(name): str(token) for name, token in table.items()
        }
    return tables


def build_config(
    options: Optional[Mapping[str, Any]] = None,
    *,
    base: Optional[DumpConfig] = None,
) -> DumpConfig:
    """
    Build a validated :class:`DumpConfig` from loosely typed options.

    Option names are matched case-insensitively so both ``data_width`` and
    ``DATA_WIDTH`` are accepted. Values are coerced to the field types, then
    ``data_width`` is clamped to at least 1 and ``maximum_range_name_size`` to
    at least 2.

    Parameters:
        options: Mapping of option names to values. ``None`` yields the defaults.
        base: Configuration to start from instead of the defaults.

    Returns:
        DumpConfig: The normalized configuration.

    Raises:
        ConfigError: If an option name is unknown or a value cannot be coerced.
    """

    config = DumpConfig() if base is None else _copy_config(base)
    cls_fields = {item.name: item for item in fields(DumpConfig)}
    enum_types: Dict[str, type[Enum]] = {
        "format": OutputFormat,
        "color": ColorMode,
        "orientation": Orientation,
        "offset_format": OffsetFormat,
    }

    for raw_key, value in (options or {}).items():
        key = str(raw_key).strip().lower()
        if key not in cls_fields:
            raise ConfigError(f"{config.name}: Invalid Option '{raw_key}'")
        default_value = getattr(DumpConfig(), key)
        if key in enum_types:
            coerced: Any = _coerce_enum(value, key, enum_types[key])
        elif key == "color_names":
            coerced = _coerce_color_names(value, key)
        elif isinstance(default_value, bool):
            coerced = _coerce_bool(value, key)
        elif isinstance(default_value, int):
            coerced = _coerce_int(value, key)
        else:
            coerced = str(value)
        setattr(config, key, coerced)

    return _normalize(config)


def _copy_config(config: DumpConfig) -> DumpConfig:
    values = {item.name: getattr(config, item.name) for item in fields(DumpConfig)}
    values["color_names"] = {
        key: dict(table) for key, table in config.color_names.items()
    }
    return DumpConfig(**values)


def _normalize(config: DumpConfig) -> DumpConfig:
    if config.data_width < _MIN_DATA_WIDTH:
        logger.debug("data_width %d clamped to %d", config.data_width, _MIN_DATA_WIDTH)
        config.data_width = _MIN_DATA_WIDTH
    if config.maximum_range_name_size <= _MIN_RANGE_NAME_SIZE:
        config.maximum_range_name_size = _MIN_RANGE_NAME_SIZE
    if config.maximum_user_information_size < 0:
        raise ConfigError("maximum_user_information_size must be >= 0")
    if config.maximum_bitfield_source_size < 0:
        raise ConfigError("maximum_bitfield_source_size must be >= 0")
    if config.offset_start < 0:
        raise ConfigError("offset_start must be >= 0")
    return config


def load_config(path: Union[str, Path]) -> DumpConfig:
    """
    Load engine options from a TOML file.

    Top-level keys are engine options; ``[color_names.<FORMAT>]`` tables map
    symbolic color names to concrete tokens. An optional ``[hexdump]`` table is
    read the same way, so options can live beside other tools' sections.

    Raises:
        ConfigError: If the file is not UTF-8, TOML parsing fails, or an option is invalid.
    """

    with open(path, "rb") as handle:
        raw_bytes = handle.read()
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        raw_bytes = raw_bytes[3:]
    try:
        raw = tomllib.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError("Configuration file must be UTF-8 encoded") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse TOML: {exc}") from exc

    section = raw.pop("hexdump", None)
    if section is not None:
        if not isinstance(section, dict):
            raise ConfigError("[hexdump] must be a table")
        raw.update(section)
    return build_config(raw)


__all__ = ["build_config", "load_config"]
