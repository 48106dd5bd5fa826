"""Functional core - pure trimming logic with no I/O."""

from .errors import (
    ParseError,
    MalformedTimestamp,
    UnrecognizedTimeZone,
    UnsupportedDateEncoding,
    UnterminatedEvent,
)
from .lines import (
    EventStart,
    EventEnd,
    StartDate,
    EndDate,
    Recurring,
    Other,
    classify_line,
)
from .trim import TrimWindow, TrimOptions, EventBlock, default_window, describe_decision, should_keep, trim

__all__ = [
    # Errors
    "ParseError",
    "MalformedTimestamp",
    "UnrecognizedTimeZone",
    "UnsupportedDateEncoding",
    "UnterminatedEvent",
    # Lines
    "EventStart",
    "EventEnd",
    "StartDate",
    "EndDate",
    "Recurring",
    "Other",
    "classify_line",
    # Trim
    "TrimWindow",
    "TrimOptions",
    "EventBlock",
    "default_window",
    "should_keep",
    "trim",
    "describe_decision",
]
