"""Shared fixtures for building calendar content."""

from datetime import datetime, timezone

import pytest

from icstrim.core.trim import TrimOptions, TrimWindow

CRLF = "\r\n"


@pytest.fixture
def make_event():
    """Factory for the lines of one VEVENT."""
    def _make(
        summary: str = "Meeting",
        start: str | None = "DTSTART:20240101T100000Z",
        end: str | None = "DTEND:20240101T110000Z",
        rrule: str | None = None,
    ) -> list[str]:
        lines = ["BEGIN:VEVENT", f"UID:{summary.lower().replace(' ', '-')}@example.com"]
        if start:
            lines.append(start)
        if end:
            lines.append(end)
        if rrule:
            lines.append(rrule)
        lines.append(f"SUMMARY:{summary}")
        lines.append("END:VEVENT")
        return lines
    return _make


@pytest.fixture
def make_calendar():
    """Factory for a full calendar file from event line lists."""
    def _make(*events: list[str], newline: str = CRLF) -> str:
        lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//Example//Test//EN"]
        for event in events:
            lines.extend(event)
        lines.append("END:VCALENDAR")
        lines.append("")
        return newline.join(lines)
    return _make


@pytest.fixture
def january():
    return TrimWindow(
        start=datetime(2024, 1, 1, tzinfo=timezone.utc),
        end=datetime(2024, 1, 31, tzinfo=timezone.utc),
    )


@pytest.fixture
def february():
    return TrimWindow(
        start=datetime(2024, 2, 1, tzinfo=timezone.utc),
        end=datetime(2024, 2, 28, tzinfo=timezone.utc),
    )


@pytest.fixture
def options():
    return TrimOptions()
