"""Line classification for iCalendar content - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import MalformedTimestamp, UnrecognizedTimeZone, UnsupportedDateEncoding

logger = logging.getLogger(__name__)

EVENT_BEGIN = "BEGIN:VEVENT"
EVENT_END = "END:VEVENT"
START_FIELD = "DTSTART"
END_FIELD = "DTEND"
RECURRENCE_PREFIX = "RRULE:"

# A timed value is a datetime, an all-day value is a plain date
Timestamp = datetime | date


@dataclass(frozen=True)
class EventStart:
    pass


@dataclass(frozen=True)
class EventEnd:
    pass


@dataclass(frozen=True)
class StartDate:
    value: Timestamp


@dataclass(frozen=True)
class EndDate:
    value: Timestamp


@dataclass(frozen=True)
class Recurring:
    pass


@dataclass(frozen=True)
class Other:
    pass


ClassifiedLine = EventStart | EventEnd | StartDate | EndDate | Recurring | Other


def classify_line(line: str, ignore_invalid_time_zones: bool = True) -> ClassifiedLine:
    """
    Classify a single line of calendar content.

    Pure function - no I/O.

    Args:
        line: One raw line, without its terminator
        ignore_invalid_time_zones: Fall back to a zone-less parse when a
            TZID cannot be resolved instead of raising

    Returns:
        The line's tag, with the parsed timestamp for date fields

    Raises:
        ParseError: A date field's payload could not be parsed
    """
    if line == EVENT_BEGIN:
        return EventStart()
    if line == EVENT_END:
        return EventEnd()

    for field_name, tag in ((START_FIELD, StartDate), (END_FIELD, EndDate)):
        if line.startswith(f"{field_name}:"):
            return tag(parse_iso_timestamp(line[len(field_name) + 1:]))
        if line.startswith(f"{field_name};"):
            return tag(parse_complex_date(line[len(field_name) + 1:], ignore_invalid_time_zones))

    if line.startswith(RECURRENCE_PREFIX):
        return Recurring()

    return Other()


def parse_iso_timestamp(value: str) -> datetime:
    """Parse a bare ISO-8601 timestamp such as 20240101T100000Z."""
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise MalformedTimestamp(f"String is not a valid ISO date: {value}") from None


def parse_complex_date(field: str, ignore_invalid_time_zones: bool = True) -> Timestamp:
    """
    Parse a date field that carries parameters, e.g. TZID=Europe/Berlin:20240101T100000.

    Args:
        field: Everything after "DTSTART;" or "DTEND;"
        ignore_invalid_time_zones: See classify_line

    Returns:
        An aware datetime for TZID values, a date for VALUE=DATE values
    """
    params_str, sep, value = field.partition(":")
    if not sep:
        raise MalformedTimestamp(f"Date field has no value: {field}")

    params = {}
    for param in params_str.split(";"):
        key, _, param_value = param.partition("=")
        key = key.strip().upper()
        if key not in ("TZID", "VALUE"):
            raise UnsupportedDateEncoding(f"Unhandled complex date: {field}")
        params[key] = param_value.strip()

    if "VALUE" in params:
        if params["VALUE"].upper() != "DATE":
            raise UnsupportedDateEncoding(f"Unhandled date with value: {field}")
        return parse_all_day_date(value)

    return parse_zoned_timestamp(value, params["TZID"].strip('"'), ignore_invalid_time_zones)


def parse_all_day_date(value: str) -> date:
    """Parse a yyyymmdd all-day date."""
    value = value.strip()
    if len(value) != 8 or not value.isdigit():
        raise MalformedTimestamp(f"Full-day date is not valid: {value}")
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError:
        raise MalformedTimestamp(f"Full-day date is not valid: {value}") from None


def parse_zoned_timestamp(value: str, zone: str, ignore_invalid_time_zones: bool = True) -> datetime:
    """Parse a timestamp that is local to the named zone."""
    parsed = parse_iso_timestamp(value)

    # Directory names such as "America" raise IsADirectoryError rather than ZoneInfoNotFoundError
    try:
        tz = ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        if not ignore_invalid_time_zones:
            raise UnrecognizedTimeZone(zone, value) from None
        logger.warning(f"Time zone {zone} is invalid")
        return parsed

    # An explicit offset in the value wins over the TZID parameter
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed
