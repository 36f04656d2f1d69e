from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .record import OutputRow

"""Batch processing result models (CLI multi-file mode)."""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    extracted_rows: int
    sheets: int
    skipped_sheets: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for a batch of files.

    ``rows`` keeps file order, then sheet order, then row order.
    """
    success_files: int
    failed_files: int
    total_rows: int
    total_sheets: int
    skipped_sheets: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    rows: list[OutputRow] = field(default_factory=list)
    file_stats: list[FileStat] | None = None
