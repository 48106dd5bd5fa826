"""icstrim - trim iCalendar files to a date range."""

__version__ = "0.1.0"
