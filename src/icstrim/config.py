"""Configuration management for icstrim."""

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path

from .core.trim import CRLF, TrimOptions, TrimWindow, default_window

logger = logging.getLogger(__name__)

ICSTRIM_HOME = Path(os.environ.get("ICSTRIM_HOME", Path.home() / ".config" / "icstrim"))
CONFIG_FILE = ICSTRIM_HOME / "icstrim.conf"

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
NEWLINES = {"crlf": "\r\n", "lf": "\n", "cr": "\r"}


@dataclass
class Config:
    """icstrim configuration."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    week_start: str = "Sunday"
    new_line: str = CRLF
    keep_recurring_events: bool = True
    ignore_invalid_time_zones: bool = True
    reject_unterminated_events: bool = False
    input_directory: str = "./input"
    output_directory: str = "./output"
    extension: str = ".ics"
    verbose_logs: bool = False
    fail_fast: bool = False

    def window(self, today: date | None = None) -> TrimWindow:
        """Resolve the trim window, filling unset bounds from the default week range."""
        default = default_window(today, week_start=parse_weekday(self.week_start))
        return TrimWindow(
            start=self.start_date or default.start,
            end=self.end_date or default.end,
        )

    def trim_options(self) -> TrimOptions:
        return TrimOptions(
            keep_recurring_events=self.keep_recurring_events,
            ignore_invalid_time_zones=self.ignore_invalid_time_zones,
            verbose_logs=self.verbose_logs,
            newline=self.new_line,
            reject_unterminated_events=self.reject_unterminated_events,
        )


def parse_bool(value: str) -> bool:
    """Parse a yes/no style config value."""
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {value}")


def parse_newline(value: str) -> str:
    """Parse a line terminator: crlf, lf, cr, or an escaped literal like \\r\\n."""
    if value.lower() in NEWLINES:
        return NEWLINES[value.lower()]
    newline = value.replace("\\r", "\r").replace("\\n", "\n")
    if not newline or newline.strip("\r\n"):
        raise ValueError(f"Not a line terminator: {value}")
    return newline


def parse_weekday(value: str) -> int:
    """Parse a weekday name into a weekday() number (Monday=0)."""
    try:
        return WEEKDAYS.index(value.strip().lower())
    except ValueError:
        raise ValueError(f"Not a weekday: {value}") from None


def parse_date_bound(value: str, end: bool = False) -> datetime:
    """
    Parse a window bound.

    A bare date (2024-01-31) means the start of that day, or its last
    microsecond when end is set. Full timestamps are used as given.
    """
    value = value.strip()
    try:
        if len(value) in (8, 10) and "T" not in value:
            day = date.fromisoformat(value)
            if end:
                return datetime.combine(day + timedelta(days=1), time()) - timedelta(microseconds=1)
            return datetime.combine(day, time())
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Not a date: {value}") from None


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from icstrim.conf file."""
    config = Config()
    config_file = Path(path).expanduser() if path else CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value[:1] in ('"', "'"):
            end_quote = value.find(value[0], 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        try:
            _apply(config, key, value)
        except ValueError as e:
            logger.warning(f"Ignoring {key.upper()} in {config_file}: {e}")

    return config


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "start_date":
            config.start_date = parse_date_bound(value)
        case "end_date":
            config.end_date = parse_date_bound(value, end=True)
        case "week_start":
            parse_weekday(value)
            config.week_start = value
        case "new_line":
            config.new_line = parse_newline(value)
        case "keep_recurring_events":
            config.keep_recurring_events = parse_bool(value)
        case "ignore_invalid_time_zones":
            config.ignore_invalid_time_zones = parse_bool(value)
        case "reject_unterminated_events":
            config.reject_unterminated_events = parse_bool(value)
        case "input_directory":
            config.input_directory = value
        case "output_directory":
            config.output_directory = value
        case "extension":
            config.extension = value
        case "verbose_logs":
            config.verbose_logs = parse_bool(value)
        case "fail_fast":
            config.fail_fast = parse_bool(value)
        case _:
            logger.debug(f"Unknown config key: {key}")
