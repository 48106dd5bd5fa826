"""Tests for the batch workflow layer."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from icstrim.adapters.file_store import FileCalendarStore
from icstrim.config import Config
from icstrim.core.errors import MalformedTimestamp
from icstrim.core.trim import TrimOptions
from icstrim.workflows import get_store, run_trim, trim_calendars

MID_JANUARY_START = "DTSTART:20240115T100000Z"
MID_JANUARY_END = "DTEND:20240115T110000Z"


class MemoryStore:
    """In-memory CalendarStore."""

    def __init__(self, files: dict[str, str]):
        self.files = files
        self.written: dict[str, str] = {}

    def read_all(self) -> dict[str, str]:
        return dict(self.files)

    def write_all(self, files: dict[str, str]) -> list[Path]:
        self.written.update(files)
        return [Path(name) for name in files]


@pytest.fixture
def config(tmp_path):
    return Config(
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2024, 1, 31, 23, 59),
        input_directory=str(tmp_path / "input"),
        output_directory=str(tmp_path / "output"),
    )


@pytest.fixture
def files(make_calendar, make_event):
    return {
        "work.ics": make_calendar(
            make_event("in", start=MID_JANUARY_START, end=MID_JANUARY_END),
            make_event("out", start="DTSTART:20230101T100000Z", end="DTEND:20230101T110000Z"),
        ),
        "bad.ics": make_calendar(make_event(start="DTSTART:not-a-date")),
    }


class TestTrimCalendars:
    def test_splits_results_and_failures(self, files, make_calendar, make_event, config):
        trimmed, failures = trim_calendars(files, config.window(), TrimOptions())

        expected = make_calendar(make_event("in", start=MID_JANUARY_START, end=MID_JANUARY_END))
        assert trimmed == {"work.ics": expected}
        assert list(failures) == ["bad.ics"]
        assert isinstance(failures["bad.ics"], MalformedTimestamp)

    def test_single_worker(self, files, config):
        trimmed, failures = trim_calendars(files, config.window(), TrimOptions(), max_workers=1)
        assert set(trimmed) == {"work.ics"}
        assert set(failures) == {"bad.ics"}

    def test_logs_progress(self, files, config, caplog):
        with caplog.at_level("INFO", logger="icstrim.workflows"):
            trim_calendars(files, config.window(), TrimOptions())
        assert "Trimming work.ics" in caplog.messages
        assert "Trimming bad.ics" in caplog.messages


class TestRunTrim:
    def test_writes_good_files_and_reports_bad(self, files, config):
        store = MemoryStore(files)

        report = run_trim(config, store)

        assert set(store.written) == {"work.ics"}
        assert report.written == [Path("work.ics")]
        assert set(report.failures) == {"bad.ics"}
        assert report.ok is False
        assert report.aborted is False

    def test_fail_fast_writes_nothing(self, files, config):
        config.fail_fast = True
        store = MemoryStore(files)

        report = run_trim(config, store)

        assert store.written == {}
        assert report.aborted is True
        assert report.written == []

    def test_no_files(self, config):
        report = run_trim(config, MemoryStore({}))
        assert report.ok is True
        assert report.written == []

    def test_uses_config_window(self, config):
        report = run_trim(config, MemoryStore({}))
        assert report.window.start == datetime(2024, 1, 1)
        assert report.window.end == datetime(2024, 1, 31, 23, 59)

    @patch("icstrim.workflows.get_store")
    def test_builds_store_from_config(self, mock_get_store, files, config):
        store = MemoryStore({"work.ics": files["work.ics"]})
        mock_get_store.return_value = store

        report = run_trim(config)

        mock_get_store.assert_called_once_with(config)
        assert report.ok is True
        assert set(store.written) == {"work.ics"}

    def test_end_to_end_on_disk(self, files, config):
        input_dir = Path(config.input_directory)
        input_dir.mkdir()
        for name, content in files.items():
            (input_dir / name).write_bytes(content.encode())

        report = run_trim(config)

        output_dir = Path(config.output_directory)
        assert (output_dir / "work.ics").exists()
        assert not (output_dir / "bad.ics").exists()
        assert b"SUMMARY:out" not in (output_dir / "work.ics").read_bytes()
        assert b"SUMMARY:in\r\n" in (output_dir / "work.ics").read_bytes()
        assert set(report.failures) == {"bad.ics"}

    def test_latin1_file_does_not_stop_batch(self, make_calendar, make_event, config):
        input_dir = Path(config.input_directory)
        input_dir.mkdir()
        good = make_calendar(make_event("in", start=MID_JANUARY_START, end=MID_JANUARY_END))
        latin1 = make_calendar(make_event("caf\xe9", start=MID_JANUARY_START, end=MID_JANUARY_END))
        (input_dir / "good.ics").write_bytes(good.encode())
        (input_dir / "latin1.ics").write_bytes(latin1.encode("latin-1"))

        report = run_trim(config)

        output_dir = Path(config.output_directory)
        assert report.ok is True
        assert (output_dir / "good.ics").read_bytes() == good.encode()
        assert (output_dir / "latin1.ics").read_bytes() == latin1.encode("latin-1")


def test_get_store(config):
    store = get_store(config)
    assert isinstance(store, FileCalendarStore)
    assert store.input_dir == Path(config.input_directory)
    assert store.output_dir == Path(config.output_directory)
    assert store.extension == ".ics"
