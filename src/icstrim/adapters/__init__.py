"""Adapters - I/O implementations of ports."""

from .file_store import FileCalendarStore

__all__ = [
    "FileCalendarStore",
]
