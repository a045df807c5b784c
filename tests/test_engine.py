from __future__ import annotations

from collections.abc import Callable
from typing import List

import pytest

from hexdump_range import (
    ColorMode,
    ConfigError,
    DumpEngine,
    HexDumpRangeError,
    Interaction,
    RangeCompileError,
    RangeDumpWarning,
    RangeWalkError,
    create_engine,
)
from hexdump_range.layout.terminal import strip_ansi

ABCD_ROW = "00000000 " + " " * 9 + "61 62 63 64  " + "abcd " + "a, b,  " + "\n"


def test_end_to_end_horizontal_dump(plain_engine: Callable[..., DumpEngine]) -> None:
    engine = plain_engine(data_width=4)

    assert engine.dump([("a", 2), ("b", 2)], b"abcd") == ABCD_ROW


@pytest.mark.parametrize("buffer", [b"abcd", bytearray(b"abcd"), memoryview(b"abcd"), "abcd"])
def test_buffer_types_and_string_ranges(plain_engine: Callable[..., DumpEngine], buffer: object) -> None:
    engine = plain_engine(data_width=4)

    assert engine.dump("a,2:b,2", buffer) == ABCD_ROW


def test_zero_argument_provider_dumps(plain_engine: Callable[..., DumpEngine]) -> None:
    pending = iter([("a", 2), ("b", 2)])

    def provider() -> object:
        return next(pending, None)

    assert plain_engine(data_width=4).dump(provider, b"abcd") == ABCD_ROW


def test_end_to_end_vertical_dump(plain_engine: Callable[..., DumpEngine]) -> None:
    engine = plain_engine(orientation="vertical", data_width=4)

    expected = (
        "ab" + " " * 14 + " "
        + "00000000 " + "00000000 "
        + " " * 8 + " "
        + "61 62 " + " " * 6 + " "
        + "ab  " + " "
        + "\n"
    )
    assert engine.dump([("ab", 2)], b"ab") == expected


def test_default_ansi_output_is_white() -> None:
    engine = create_engine(data_width=4)
    text = engine.dump([("a", 2), ("b", 2)], b"abcd")

    assert "\x1b[37m61 62 \x1b[0m" in text
    assert strip_ansi(text) == ABCD_ROW


def test_html_output(plain_engine: Callable[..., DumpEngine]) -> None:
    text = plain_engine(format="html", data_width=4).dump([("a", 4, "red")], b"a<cd")

    assert text.startswith("<pre ")
    assert "<span style='color:#f00;'>a&lt;cd</span>" in text


def test_cycle_mode_assigns_palette_colors_in_order() -> None:
    engine = create_engine(color="cycle", format="ansi")
    engine.gather([("a", 1), ("b", 1), ("c", 1, "red"), ("d", 1)], b"abcd")

    assert [item.color for item in engine.session.gathered] == ["green", "bright_yellow", "red", "cyan"]
    engine.reset_colors()
    assert engine.default_color() == "green"


def test_color_state_is_per_engine() -> None:
    first = create_engine(color="cycle")
    second = create_engine(color="cycle")
    first.default_color()
    first.default_color()

    assert second.default_color() == "green"


def test_ascii_has_no_default_color(plain_engine: Callable[..., DumpEngine]) -> None:
    engine = plain_engine(color="cycle")

    assert engine.config.color is ColorMode.CYCLE
    assert engine.default_color() is None


def test_rerender_is_idempotent() -> None:
    engine = create_engine(color="cycle", data_width=4)
    engine.gather([("a", 2), ("b", 3)], b"abcde")

    assert engine.render_accumulated() == engine.render_accumulated()


def test_accumulated_gathers_render_as_one_dump(plain_engine: Callable[..., DumpEngine]) -> None:
    engine = plain_engine(data_width=4)
    assert engine.gather_into(None, [("a", 2)], b"ab") == 2
    assert engine.gather_into(None, [("b", 2)], b"cd") == 2

    assert engine.render_accumulated() == ABCD_ROW
    engine.reset_accumulated()
    assert engine.render_accumulated() == ""


def test_sessions_are_independent(plain_engine: Callable[..., DumpEngine]) -> None:
    engine = plain_engine()
    session = engine.new_session()
    engine.gather_into(session, [("a", 1)], b"a")

    assert len(session) == 1
    assert len(engine.session) == 0
    engine.reset_accumulated(session)
    assert len(session) == 0


def test_dump_with_consumed_size(plain_engine: Callable[..., DumpEngine]) -> None:
    engine = plain_engine()
    text, used = engine.dump_with_consumed_size([("a", 2)], b"abcd", offset=1)

    assert used == 3
    assert "62 63" in text


def test_short_data_is_reported_and_rendered(
    plain_engine: Callable[..., DumpEngine], warnings_seen: List[str]
) -> None:
    text, used = plain_engine().dump_with_consumed_size([("a", 4), ("never", 1)], b"ab")

    assert used == 2
    assert "-2:a, " in text
    assert "never" not in text
    assert len(warnings_seen) == 1


def test_default_warning_callback_emits_warning() -> None:
    engine = create_engine(format="ascii")

    with pytest.warns(RangeDumpWarning, match="requires zero bytes"):
        engine.dump([("empty", 0)], b"")


def test_fatal_callback_sees_error_before_unwinding() -> None:
    seen: List[HexDumpRangeError] = []
    engine = DumpEngine(interaction=Interaction(fatal=seen.append), format="ascii")

    with pytest.raises(RangeCompileError):
        engine.dump([("lonely",)], b"a")
    with pytest.raises(RangeWalkError):
        engine.dump([("a", 1)], b"a", offset=-1)

    assert [type(error) for error in seen] == [RangeCompileError, RangeWalkError]


def test_wide_string_buffer_is_fatal() -> None:
    seen: List[HexDumpRangeError] = []
    engine = DumpEngine(interaction=Interaction(fatal=seen.append), format="ascii")

    with pytest.raises(RangeWalkError, match="only characters up to U\\+00FF"):
        engine.dump([("a", 1)], "€")
    assert [type(error) for error in seen] == [RangeWalkError]


def test_unknown_option_is_fatal() -> None:
    seen: List[HexDumpRangeError] = []

    with pytest.raises(ConfigError, match="Anonymous: Invalid Option 'bogus'"):
        create_engine(bogus=True, interaction=Interaction(fatal=seen.append))
    assert len(seen) == 1


def test_options_mapping_is_case_insensitive() -> None:
    engine = create_engine({"DATA_WIDTH": 4, "Format": "plain"}, name="mapped")

    assert engine.config.data_width == 4
    assert engine.config.name == "mapped"


def test_verbose_engine_reports_creation() -> None:
    lines: List[str] = []
    create_engine(name="inspector", verbose=True, interaction=Interaction(info=lines.append))

    assert lines == ["Creating DumpEngine 'inspector'.\n"]
