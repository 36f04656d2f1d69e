from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import (
    FILE_LEVEL_SHEET,
    SHEET_READ_ERROR,
    WORKBOOK_OPEN_ERROR,
    ErrorRecord,
)

"""Extraction error log.

Two failure kinds end up here, both at row=-1 since no single row is at fault:

- WORKBOOK_OPEN_ERROR: the container could not be opened (sheet=<FILE_LEVEL>)
- SHEET_READ_ERROR: rows of one sheet could not be read, the sheet was skipped

Records stay in memory until ``flush``; the first flush that has something to
write fixes the ``errors-YYYYMMDD-HHMMSS.log`` (UTC) path for the rest of the
run or request. Nothing is created on disk for a clean run.
"""

__all__ = [
    "ErrorLogBuffer",
    "ErrorRecord",
]

DEFAULT_LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Per-run (CLI) or per-request (HTTP) collector of extraction failures."""

    def __init__(self, logs_dir: Path | str = DEFAULT_LOGS_DIR) -> None:
        self.logs_dir = Path(logs_dir)
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path | None:
        """Log file of this buffer; None until something has been flushed."""
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def workbook_failed(self, file_name: str, message: str) -> None:
        self.append(ErrorRecord.create(file_name, FILE_LEVEL_SHEET, -1, WORKBOOK_OPEN_ERROR, message))

    def sheet_failed(self, file_name: str, sheet_name: str, message: str) -> None:
        self.append(ErrorRecord.create(file_name, sheet_name, -1, SHEET_READ_ERROR, message))

    def counts(self) -> dict[str, int]:
        """Pending records per error type."""
        return dict(Counter(r.error_type for r in self._records))

    def __len__(self) -> int:
        return len(self._records)

    def _target(self) -> Path:
        if self._file_path is None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def flush(self) -> Path | None:
        """Append pending records as JSON Lines.

        Returns:
            the log path, or None when there was nothing to write
        """
        if not self._records:
            return None
        target = self._target()
        lines = "".join(r.to_json_line() + "\n" for r in self._records)
        with target.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._records.clear()
        return target
