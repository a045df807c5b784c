"""Click CLI wiring and entry point for hexdump_range."""

from __future__ import annotations

import logging
from typing import IO, Any, Dict, Optional, Tuple

import click

from .config_loader import load_config
from .datatypes import DumpConfig, OutputFormat
from .engine import DumpEngine, Interaction
from .errors import HexDumpRangeError
from .layout.terminal import AnsiColorizer

logger = logging.getLogger(__name__)


def _echo_stderr(message: str) -> None:
    click.echo(message, nl=False, err=True)


def _cli_overrides(**values: Any) -> Dict[str, Any]:
    """Keep only the options given on the command line."""

    return {key: value for key, value in values.items() if value is not None and value is not False}


def _run_cli_entry(
    *,
    data_file: IO[bytes],
    ranges: str,
    config_path: Optional[str],
    offset: int,
    size: Optional[int],
    no_color: bool,
    verbose: bool,
    overrides: Dict[str, Any],
) -> Tuple[str, DumpConfig]:
    base: Optional[DumpConfig] = load_config(config_path) if config_path else None
    if verbose:
        overrides["verbose"] = True
    engine = DumpEngine(
        base,
        interaction=Interaction(info=_echo_stderr, warn=_echo_stderr),
        ansi=AnsiColorizer(no_color=no_color),
        **overrides,
    )
    data = data_file.read()
    logger.debug("Read %d bytes from %s", len(data), getattr(data_file, "name", "<stream>"))
    text, used = engine.dump_with_consumed_size(ranges, data, offset, size)
    logger.debug("Consumed up to offset %d", used)
    return text, engine.config


@click.command(name="hdr")
@click.argument("data_file", metavar="FILE", type=click.File("rb"), default="-")
@click.option(
    "-r",
    "--ranges",
    required=True,
    help="Range description, e.g. 'header,4,green:payload,12'.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TOML file with default engine options.",
)
@click.option(
    "-o",
    "--orientation",
    type=click.Choice(["horizontal", "vertical"], case_sensitive=False),
    default=None,
    help="Pack ranges across rows or give each range its own row.",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["ascii", "ansi", "html"], case_sensitive=False),
    default=None,
    help="Output format.",
)
@click.option(
    "-c",
    "--color",
    type=click.Choice(["bw", "cycle"], case_sensitive=False),
    default=None,
    help="Color policy for ranges declared without a color.",
)
@click.option("-w", "--data-width", type=click.IntRange(min=1), default=None, help="Bytes per row.")
@click.option(
    "--offset-format",
    type=click.Choice(["hex", "dec"], case_sensitive=False),
    default=None,
    help="Base used when printing offsets.",
)
@click.option("--offset-start", type=click.IntRange(min=0), default=None, help="Value added to printed offsets.")
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True, help="Start position in FILE.")
@click.option("--size", type=click.IntRange(min=0), default=None, help="Maximum number of bytes to dump.")
@click.option("--ruler", is_flag=True, help="Show a ruler above the dump.")
@click.option("--column-names", is_flag=True, help="Show column names above the dump.")
@click.option("--dec-dump", is_flag=True, help="Show the decimal dump column.")
@click.option("--user-info", is_flag=True, help="Show the user information column (vertical mode).")
@click.option("--range-size", is_flag=True, help="Prefix range names with their size.")
@click.option("--verbose", is_flag=True, help="Show additional diagnostic output.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colour output.")
def main(
    data_file: IO[bytes],
    ranges: str,
    config_path: Optional[str],
    orientation: Optional[str],
    output_format: Optional[str],
    color: Optional[str],
    data_width: Optional[int],
    offset_format: Optional[str],
    offset_start: Optional[int],
    offset: int,
    size: Optional[int],
    ruler: bool,
    column_names: bool,
    dec_dump: bool,
    user_info: bool,
    range_size: bool,
    verbose: bool,
    no_color: bool,
) -> None:
    """Dump FILE (or stdin when FILE is '-') annotated with RANGES."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    overrides = _cli_overrides(
        orientation=orientation,
        format=output_format,
        color=color,
        data_width=data_width,
        offset_format=offset_format,
        offset_start=offset_start,
        display_ruler=ruler,
        display_column_names=column_names,
        display_dec_dump=dec_dump,
        display_user_information=user_info,
        display_range_size=range_size,
    )
    try:
        text, config = _run_cli_entry(
            data_file=data_file,
            ranges=ranges,
            config_path=config_path,
            offset=offset,
            size=size,
            no_color=no_color,
            verbose=verbose,
            overrides=overrides,
        )
    except HexDumpRangeError as exc:
        raise click.ClickException(str(exc)) from exc

    # click strips escape sequences from non-terminal output unless told otherwise.
    keep_escapes = config.format is OutputFormat.ANSI and not no_color
    click.echo(text, nl=False, color=True if keep_escapes else None)


cli = main

__all__ = ["cli", "main"]
