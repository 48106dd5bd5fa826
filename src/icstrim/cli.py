"""icstrim CLI - trim calendar files to a date range."""

import logging
import sys
from pathlib import Path

import click
from click.core import ParameterSource

from .adapters.file_store import read_calendar
from .config import Config, load_config, parse_date_bound, parse_newline, parse_weekday
from .core.errors import ParseError
from .core.trim import describe_decision, trim
from .workflows import run_trim


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


def _apply_overrides(config: Config, overrides: dict) -> Config:
    """Overwrite config fields with the CLI options that were actually given."""
    ctx = click.get_current_context()
    for key, value in overrides.items():
        if ctx.get_parameter_source(key) is not ParameterSource.DEFAULT:
            setattr(config, key, value)
    return config


def _weekday_name(value: str) -> str:
    parse_weekday(value)
    return value


def _validate(parser):
    """Adapt a config parser into a click callback."""
    def callback(ctx, param, value):
        if value is None:
            return None
        try:
            return parser(value)
        except ValueError as e:
            raise click.BadParameter(str(e))
    return callback


@click.group()
@click.version_option()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to icstrim.conf")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, config_path: str | None, debug: bool):
    """icstrim - trim calendar files to a date range."""
    _setup_logging(debug)
    ctx.obj = load_config(config_path)


@main.command("trim")
@click.option("--start", "start_date", default=None, callback=_validate(parse_date_bound),
              help="Window start (YYYY-MM-DD or ISO timestamp)")
@click.option("--end", "end_date", default=None,
              callback=_validate(lambda v: parse_date_bound(v, end=True)),
              help="Window end, inclusive (YYYY-MM-DD or ISO timestamp)")
@click.option("--week-start", default=None, callback=_validate(_weekday_name),
              help="First day of the week for the default window")
@click.option("--input", "-i", "input_directory", default=None, help="Directory to read calendars from")
@click.option("--output", "-o", "output_directory", default=None, help="Directory to write trimmed calendars to")
@click.option("--extension", default=None, help="Calendar file extension")
@click.option("--newline", "new_line", default=None, callback=_validate(parse_newline),
              help="Line terminator: crlf, lf or cr")
@click.option("--keep-recurring/--drop-recurring", "keep_recurring_events", default=True,
              help="Keep recurring events outside the window")
@click.option("--ignore-invalid-timezones/--strict-timezones", "ignore_invalid_time_zones", default=True,
              help="Parse dates with unknown TZIDs without a zone instead of failing")
@click.option("--reject-unterminated", "reject_unterminated_events", is_flag=True,
              help="Fail on files that end inside an event")
@click.option("--verbose", "-v", "verbose_logs", is_flag=True, help="Log every keep/remove decision")
@click.option("--fail-fast", is_flag=True, help="Write nothing if any file fails to parse")
@click.pass_obj
def trim_command(config: Config, **overrides):
    """Trim every calendar in the input directory."""
    config = _apply_overrides(config, overrides)

    if not Path(config.input_directory).expanduser().is_dir():
        click.echo(f"Error: input directory {config.input_directory} does not exist", err=True)
        sys.exit(1)

    report = run_trim(config)

    for name, error in report.failures.items():
        click.echo(f"Error: {name}: {error}", err=True)

    if report.aborted:
        click.echo("Nothing written.", err=True)
        sys.exit(1)

    if len(report.written) == 1:
        click.echo(f"Wrote {config.output_directory}/{report.written[0].name}")
    else:
        click.echo(f"Wrote {len(report.written)} files")

    if not report.ok:
        sys.exit(1)


@main.command()
@click.pass_obj
def window(config: Config):
    """Show the trim window that would be used."""
    click.echo(config.window().format())


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--start", "start_date", default=None, callback=_validate(parse_date_bound),
              help="Window start (YYYY-MM-DD or ISO timestamp)")
@click.option("--end", "end_date", default=None,
              callback=_validate(lambda v: parse_date_bound(v, end=True)),
              help="Window end, inclusive (YYYY-MM-DD or ISO timestamp)")
@click.pass_obj
def check(config: Config, files: tuple[str, ...], **overrides):
    """Show the keep/remove decision for every event in FILES, without writing anything."""
    config = _apply_overrides(config, overrides)
    window = config.window()
    options = config.trim_options()
    failed = False

    click.echo(f"Window: {window.format()}")
    for file in files:
        path = Path(file)
        decisions = []
        try:
            trim(
                read_calendar(path),
                window,
                options,
                on_decision=lambda block, kept: decisions.append((block, kept)),
            )
        except ParseError as e:
            click.echo(f"Error: {path.name}: {e}", err=True)
            failed = True
            continue

        kept = sum(1 for _, was_kept in decisions if was_kept)
        click.echo(f"{path.name}: {len(decisions)} events, {kept} kept, {len(decisions) - kept} removed")
        for block, was_kept in decisions:
            click.echo(f"  {describe_decision(block, was_kept)}")

    if failed:
        sys.exit(1)
