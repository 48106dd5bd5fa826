"""Batch workflow layer between the CLI and the trimming core.

Reads every calendar from a store, trims each one on a worker pool, and
writes the results back. A file that fails to parse is reported and left
out of the output; with fail_fast nothing is written at all.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .adapters.file_store import FileCalendarStore
from .config import Config
from .core.errors import ParseError
from .core.trim import TrimOptions, TrimWindow, trim
from .ports.calendar_store import CalendarStore

logger = logging.getLogger(__name__)


@dataclass
class TrimReport:
    """Outcome of a batch run."""

    window: TrimWindow
    trimmed: dict[str, str] = field(default_factory=dict)
    failures: dict[str, ParseError] = field(default_factory=dict)
    written: list[Path] = field(default_factory=list)
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures


def get_store(config: Config) -> FileCalendarStore:
    """Build the file store described by config."""
    return FileCalendarStore(
        config.input_directory,
        config.output_directory,
        extension=config.extension,
    )


def _trim_file(name: str, content: str, window: TrimWindow, options: TrimOptions) -> str:
    logger.info(f"Trimming {name}")
    return trim(content, window, options)


def trim_calendars(
    contents: dict[str, str],
    window: TrimWindow,
    options: TrimOptions,
    max_workers: int | None = None,
) -> tuple[dict[str, str], dict[str, ParseError]]:
    """
    Trim many calendars in parallel.

    Returns:
        (trimmed, failures) - name -> content for files that trimmed cleanly,
        name -> error for files that didn't
    """
    trimmed: dict[str, str] = {}
    failures: dict[str, ParseError] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            name: pool.submit(_trim_file, name, content, window, options)
            for name, content in contents.items()
        }
        for name, future in futures.items():
            try:
                trimmed[name] = future.result()
            except ParseError as e:
                logger.error(f"Failed to trim {name}: {e}")
                failures[name] = e

    return trimmed, failures


def run_trim(
    config: Config,
    store: CalendarStore | None = None,
    today: date | None = None,
) -> TrimReport:
    """Read, trim and write every calendar described by config."""
    store = store or get_store(config)
    report = TrimReport(window=config.window(today))

    contents = store.read_all()
    if not contents:
        logger.warning("No calendar files found")
        return report

    report.trimmed, report.failures = trim_calendars(contents, report.window, config.trim_options())

    if report.failures and config.fail_fast:
        logger.error(f"Aborting: {len(report.failures)} file(s) failed to parse")
        report.aborted = True
        return report

    report.written = store.write_all(report.trimmed)
    return report
