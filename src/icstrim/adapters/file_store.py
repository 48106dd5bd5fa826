"""File-based calendar storage adapter."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

logger = logging.getLogger(__name__)


def read_calendar(path: Path) -> str:
    """
    Read a calendar file without newline translation.

    Bytes that aren't valid UTF-8 are kept as surrogates and written back
    unchanged by FileCalendarStore.write.
    """
    with path.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


class FileCalendarStore:
    """
    File-based calendar storage.

    Implements CalendarStore protocol. Reads every file with the given
    extension from one directory and writes trimmed copies, under the same
    names, to another. Line endings are preserved byte for byte.
    """

    def __init__(
        self,
        input_dir: Path | str,
        output_dir: Path | str,
        extension: str = ".ics",
        max_workers: int | None = None,
    ):
        self.input_dir = Path(input_dir).expanduser()
        self.output_dir = Path(output_dir).expanduser()
        self.extension = extension if extension.startswith(".") else f".{extension}"
        self.max_workers = max_workers

    def list_files(self) -> list[Path]:
        """List calendar files in the input directory."""
        return sorted(
            path for path in self.input_dir.iterdir()
            if path.is_file() and path.suffix == self.extension
        )

    def read(self, name: str) -> str:
        """Read one calendar file by name."""
        return read_calendar(self.input_dir / name)

    def read_all(self) -> dict[str, str]:
        """Read every calendar file. Returns a file name -> content mapping."""
        return {path.name: self.read(path.name) for path in self.list_files()}

    def write(self, name: str, content: str) -> Path:
        """Write/overwrite one output file."""
        path = self.output_dir / name
        with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(content)
        logger.debug(f"Wrote {path}")
        return path

    def write_all(self, files: dict[str, str]) -> list[Path]:
        """Write file name -> content pairs, creating the output directory if needed."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self.write, name, content) for name, content in files.items()]
            return [future.result() for future in futures]
