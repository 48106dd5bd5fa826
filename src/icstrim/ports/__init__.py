"""Ports - interfaces/protocols for external dependencies."""

from .calendar_store import CalendarStore

__all__ = [
    "CalendarStore",
]
