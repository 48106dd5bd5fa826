"""Calendar store interface."""

from pathlib import Path
from typing import Protocol


class CalendarStore(Protocol):
    """Interface for reading source calendars and writing trimmed ones."""

    def read_all(self) -> dict[str, str]:
        """Read every calendar file. Returns a file name -> content mapping."""
        ...

    def write_all(self, files: dict[str, str]) -> list[Path]:
        """Write file name -> content pairs. Returns the written paths."""
        ...
