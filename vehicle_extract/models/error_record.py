from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Supports row=-1 as a sentinel for workbook/sheet level errors where no single
row is at fault.
"""

__all__ = [
    "ErrorRecord",
    "WORKBOOK_OPEN_ERROR",
    "SHEET_READ_ERROR",
    "FILE_LEVEL_SHEET",
]

WORKBOOK_OPEN_ERROR = "WORKBOOK_OPEN_ERROR"
SHEET_READ_ERROR = "SHEET_READ_ERROR"
FILE_LEVEL_SHEET = "<FILE_LEVEL>"  # sheet column of workbook-level errors


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook filename being processed
        sheet: sheet name ("<FILE_LEVEL>" for workbook errors)
        row: row number (1-based), -1 when unknown
        error_type: classification in UPPER_SNAKE_CASE
        message: error description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
