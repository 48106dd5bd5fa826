"""Event filtering for iCalendar content - no I/O dependencies."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta

from .errors import UnterminatedEvent
from .lines import (
    ClassifiedLine,
    EndDate,
    EventEnd,
    EventStart,
    Recurring,
    StartDate,
    Timestamp,
    classify_line,
)

logger = logging.getLogger(__name__)

CRLF = "\r\n"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M"
SUNDAY = 6


def to_instant(value: Timestamp) -> datetime:
    """Convert a timestamp to an aware datetime; naive values are local time."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    if value.tzinfo is None:
        return value.astimezone()
    return value


@dataclass(frozen=True)
class TrimWindow:
    """Closed range of time an event must fall within to be kept."""

    start: Timestamp
    end: Timestamp

    def contains(self, start: Timestamp, end: Timestamp) -> bool:
        """Check if an event from start to end lies entirely inside the window."""
        return (
            to_instant(start) >= to_instant(self.start)
            and to_instant(end) <= to_instant(self.end)
        )

    def format(self) -> str:
        return f"{format_timestamp(self.start)} - {format_timestamp(self.end)}"


@dataclass(frozen=True)
class TrimOptions:
    """Knobs for a trim run."""

    keep_recurring_events: bool = True
    ignore_invalid_time_zones: bool = True
    verbose_logs: bool = False
    newline: str = CRLF
    reject_unterminated_events: bool = False


@dataclass(frozen=True)
class EventBlock:
    """The lines of one VEVENT plus what we've learned about it so far."""

    lines: tuple[str, ...]
    start: Timestamp | None = None
    end: Timestamp | None = None
    recurring: bool = False

    def add(self, line: str, classified: ClassifiedLine) -> "EventBlock":
        """Return a new block with the line appended and its payload recorded."""
        block = replace(self, lines=self.lines + (line,))
        match classified:
            case StartDate(value=value):
                return replace(block, start=value)
            case EndDate(value=value):
                return replace(block, end=value)
            case Recurring():
                return replace(block, recurring=True)
        return block


@dataclass(frozen=True)
class Idle:
    """Outside any event."""


@dataclass(frozen=True)
class InEvent:
    """Between BEGIN:VEVENT and END:VEVENT."""

    block: EventBlock


State = Idle | InEvent

# Called with each completed event and whether it was kept
DecisionHook = Callable[[EventBlock, bool], None]


def format_timestamp(value: Timestamp | None) -> str:
    """Format a timestamp for decision logs, in local time."""
    if value is None:
        return "<null>"
    return to_instant(value).astimezone().strftime(DISPLAY_FORMAT)


def should_keep(block: EventBlock, window: TrimWindow, keep_recurring_events: bool = True) -> bool:
    """
    Decide whether a completed event stays in the output.

    Events without both a start and an end are always kept, since there's
    nothing to judge them by.
    """
    if block.start is None or block.end is None:
        return True
    if window.contains(block.start, block.end):
        return True
    return keep_recurring_events and block.recurring


def describe_decision(block: EventBlock, kept: bool) -> str:
    """Human-readable log line for a retention decision."""
    date_range = f"{format_timestamp(block.start)} - {format_timestamp(block.end)}"
    if kept:
        return f"Keep: {date_range}{' (recurring)' if block.recurring else ''}"
    return f"Remove: {date_range}"


def step(
    state: State,
    line: str,
    classified: ClassifiedLine,
    window: TrimWindow,
    options: TrimOptions,
    on_decision: DecisionHook | None = None,
) -> tuple[State, tuple[str, ...]]:
    """
    Advance the state machine by one line.

    Returns:
        The next state and the lines to append to the output
    """
    match state, classified:
        case Idle(), EventStart():
            return InEvent(EventBlock((line,))), ()
        case Idle(), _:
            return state, (line,)
        case InEvent(block=block), EventStart():
            # BEGIN without a matching END: the open block goes out as-is
            logger.warning("Event started before the previous one ended")
            return InEvent(EventBlock((line,))), block.lines
        case InEvent(block=block), EventEnd():
            block = block.add(line, classified)
            kept = should_keep(block, window, options.keep_recurring_events)
            if options.verbose_logs:
                logger.info(describe_decision(block, kept))
            if on_decision:
                on_decision(block, kept)
            return Idle(), block.lines if kept else ()
        case InEvent(block=block), _:
            return InEvent(block.add(line, classified)), ()

    raise TypeError(f"Unknown trim state: {state!r}")


def trim(
    content: str,
    window: TrimWindow,
    options: TrimOptions | None = None,
    on_decision: DecisionHook | None = None,
) -> str:
    """
    Remove events that fall outside the window from one calendar file.

    Pure function - no I/O. Lines outside events are always kept, and kept
    lines stay in their original order.

    Args:
        content: Full text of an .ics file
        window: Range events must fall within
        options: Trim options (defaults: keep recurring events, tolerate
            unknown time zones, CRLF line endings)
        on_decision: Called with each completed event and whether it was kept

    Returns:
        The trimmed file content

    Raises:
        ParseError: A date field could not be parsed, or the input ended
            inside an event while reject_unterminated_events is set
    """
    options = options or TrimOptions()
    output: list[str] = []
    state: State = Idle()

    for line in content.split(options.newline):
        classified = classify_line(line, options.ignore_invalid_time_zones)
        state, emitted = step(state, line, classified, window, options, on_decision)
        output.extend(emitted)

    if isinstance(state, InEvent):
        if options.reject_unterminated_events:
            raise UnterminatedEvent(f"Input ended inside an event: {state.block.lines[0]}")
        logger.warning(f"Input ended inside an event, keeping {len(state.block.lines)} lines unfiltered")
        output.extend(state.block.lines)

    return options.newline.join(output)


def default_window(today: date | None = None, week_start: int = SUNDAY) -> TrimWindow:
    """
    Window from the start of last week through the end of this week.

    Args:
        today: Reference date (defaults to today)
        week_start: First day of the week as a weekday() number (Monday=0)

    Returns:
        TrimWindow with aware local-time bounds
    """
    today = today or date.today()
    this_week = today - timedelta(days=(today.weekday() - week_start) % 7)
    start = datetime.combine(this_week - timedelta(weeks=1), time())
    end = datetime.combine(this_week + timedelta(weeks=1), time()) - timedelta(microseconds=1)
    return TrimWindow(start=start.astimezone(), end=end.astimezone())
