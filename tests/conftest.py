from __future__ import annotations

from collections.abc import Callable
from typing import Any, List

import pytest
from click.testing import CliRunner

from hexdump_range import DumpConfig, DumpEngine, Interaction, build_config


@pytest.fixture(autouse=True)
def _clear_no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ANSI assertions independent from the caller's NO_COLOR setting."""

    monkeypatch.delenv("NO_COLOR", raising=False)


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click runner configured for CLI smoke tests."""

    return CliRunner()


@pytest.fixture
def plain_config() -> Callable[..., DumpConfig]:
    """Return a factory for uncolored configurations (ASCII output) with overrides."""

    def _build(**options: Any) -> DumpConfig:
        merged: dict[str, Any] = {"format": "ascii"}
        merged.update(options)
        return build_config(merged)

    return _build


@pytest.fixture
def warnings_seen() -> List[str]:
    """Collect messages routed through an engine's warn callback."""

    return []


@pytest.fixture
def plain_engine(warnings_seen: List[str]) -> Callable[..., DumpEngine]:
    """Return a factory for ASCII engines whose warnings land in ``warnings_seen``."""

    def _build(**options: Any) -> DumpEngine:
        merged: dict[str, Any] = {"format": "ascii"}
        merged.update(options)
        return DumpEngine(interaction=Interaction(warn=warnings_seen.append), **merged)

    return _build
