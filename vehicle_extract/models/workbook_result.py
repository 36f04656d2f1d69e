from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from .record import OutputRow
from .sheet_result import SheetResult

"""Workbook-level result models.

A WorkbookResult is what the workbook extraction driver returns for one file:
the concatenated rows (sheet order, then row order) plus per-sheet details.
"""

__all__ = [
    "FileStatus",
    "WorkbookResult",
]


class FileStatus(Enum):
    """Outcome of one file in a batch run (failed = workbook could not be opened)."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkbookResult:
    name: str  # file name (or caller supplied label)
    sheets: list[SheetResult] = field(default_factory=list)
    path: Path | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def rows(self) -> list[OutputRow]:
        out: list[OutputRow] = []
        for sheet in self.sheets:
            out.extend(sheet.rows)
        return out

    @property
    def total_rows(self) -> int:
        return sum(len(s.rows) for s in self.sheets)

    @property
    def skipped_sheets(self) -> int:
        return sum(1 for s in self.sheets if s.skipped)
