"""Errors raised while trimming calendar content."""


class ParseError(ValueError):
    """A calendar file could not be processed."""


class MalformedTimestamp(ParseError):
    """A date field's payload is not a valid timestamp."""


class UnrecognizedTimeZone(ParseError):
    """A TZID parameter names a zone that cannot be resolved."""

    def __init__(self, zone: str, value: str):
        self.zone = zone
        self.value = value
        super().__init__(f"String is not a valid ISO date: {value} (time zone: {zone})")


class UnsupportedDateEncoding(ParseError):
    """A date field uses a parameter or VALUE type we don't handle."""


class UnterminatedEvent(ParseError):
    """Input ended inside an event block."""
