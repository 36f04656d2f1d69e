from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import SheetReadError, WorkbookOpenError, WorkbookSource, open_workbook
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ExtractionConfig
from ..models.fields import FIELD_DICTIONARY, FieldSpec
from ..models.processing_result import FileStat, ProcessingResult
from ..models.record import OutputRow
from ..models.sheet_result import SheetResult, SheetStatus
from ..models.workbook_result import FileStatus, WorkbookResult
from .progress import ProgressTracker, SheetProgressIndicator
from .sheet_extractor import extract_sheet

"""Workbook extraction orchestration.

- extract_workbook: every sheet of one source, in source order, each with a
  fresh sheet driver; an unreadable sheet is logged and skipped
- extract_file: open + extract + close for one path; container failures raise
  WorkbookOpenError
- process_all: several files (CLI batch mode) with progress display; a file
  that cannot be opened is counted as failed and processing continues
"""

__all__ = [
    "ProcessingError",
    "WorkbookOpenError",
    "extract_file",
    "extract_rows",
    "extract_workbook",
    "process_all",
    "scan_input_files",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal batch-level error (bad input directory etc.)."""


def extract_workbook(
    source: WorkbookSource,
    settings: ExtractionConfig | None = None,
    *,
    error_log: ErrorLogBuffer | None = None,
    file_name: str = "",
    dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY,
    sheet_progress: SheetProgressIndicator | None = None,
) -> WorkbookResult:
    """Extract all sheets of ``source`` into one WorkbookResult.

    Sheets never share header state. Rows are concatenated in sheet order.

    Args:
        source: opened workbook source
        settings: extraction tunables (defaults when None)
        error_log: receives SHEET_READ_ERROR records
        file_name: label used in logs and error records
        dictionary: field dictionary (shared, read-only)
        sheet_progress: optional TTY progress indicator

    Returns:
        WorkbookResult; ``rows`` is empty when nothing matched
    """
    settings = settings or ExtractionConfig()
    start_time = datetime.now(UTC)
    sheets: list[SheetResult] = []

    for sheet_name in source.sheet_names():
        if sheet_progress is not None:
            sheet_progress.start_sheet(sheet_name)
        try:
            result = extract_sheet(sheet_name, source.iter_rows(sheet_name), settings, dictionary)
        except SheetReadError as e:
            logger.warning("sheet skipped file=%s sheet=%s: %s", file_name, sheet_name, e)
            if error_log is not None:
                error_log.sheet_failed(file_name, sheet_name, str(e))
            result = SheetResult(sheet_name=sheet_name, status=SheetStatus.READ_ERROR, error=str(e))
        sheets.append(result)
        if sheet_progress is not None:
            sheet_progress.finish_sheet(success=result.status is not SheetStatus.READ_ERROR, rows_processed=len(result.rows))
        logger.debug(
            "sheet done file=%s sheet=%s status=%s rows=%d rejected=%d",
            file_name, sheet_name, result.status.value, len(result.rows), result.rejected_rows,
        )

    return WorkbookResult(
        name=file_name,
        sheets=sheets,
        start_time=start_time,
        end_time=datetime.now(UTC),
    )


def extract_rows(source: WorkbookSource, settings: ExtractionConfig | None = None) -> list[OutputRow]:
    """Ordered nine-field rows of a workbook; empty list when nothing matched."""
    return extract_workbook(source, settings).rows


def extract_file(
    path: Path,
    settings: ExtractionConfig | None = None,
    *,
    mode: str | None = None,
    error_log: ErrorLogBuffer | None = None,
    file_name: str | None = None,
    sheet_progress: SheetProgressIndicator | None = None,
) -> WorkbookResult:
    """Open ``path`` and extract it. The source is always closed.

    Raises:
        WorkbookOpenError: the container cannot be opened (fatal for the file)
    """
    settings = settings or ExtractionConfig()
    label = file_name or path.name
    try:
        source = open_workbook(path, mode or settings.reader_mode, settings.allowed_extensions)
    except WorkbookOpenError as e:
        if error_log is not None:
            error_log.workbook_failed(label, str(e))
        raise
    with source:
        result = extract_workbook(
            source, settings, error_log=error_log, file_name=label, sheet_progress=sheet_progress,
        )
    return replace(result, path=path)


def scan_input_files(directory: Path, extensions: Iterable[str]) -> list[Path]:
    """List supported files in ``directory`` (non-recursive, sorted by name).

    Raises:
        ProcessingError: directory missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    allowed = {e.lower() for e in extensions}
    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in allowed and not p.name.startswith("~$")),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def process_all(
    paths: list[Path],
    settings: ExtractionConfig | None = None,
    *,
    mode: str | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Extract every file in ``paths`` in order.

    Files whose workbook cannot be opened are counted as failed; they never
    abort the batch.
    """
    settings = settings or ExtractionConfig()
    start_time = datetime.now(UTC)

    rows: list[OutputRow] = []
    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_sheets = 0
    skipped_sheets = 0

    with ProgressTracker(len(paths), description="Extracting files") as progress:
        for path in paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                result = extract_file(
                    path, settings, mode=mode, error_log=error_log,
                    sheet_progress=SheetProgressIndicator(path.name),
                )
            except WorkbookOpenError as e:
                logger.error(f"file failed: {path.name}: {e}")
                failed_count += 1
                file_stats.append(FileStat(
                    file_name=path.name,
                    status=FileStatus.FAILED.value,
                    extracted_rows=0,
                    sheets=0,
                    skipped_sheets=0,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                    error=str(e),
                ))
                progress.finish_file(success=False)
                continue

            success_count += 1
            rows.extend(result.rows)
            total_sheets += len(result.sheets)
            skipped_sheets += result.skipped_sheets
            logger.info(
                f"file={path.name} sheets={len(result.sheets)} skipped_sheets={result.skipped_sheets} "
                f"rows={result.total_rows}"
            )
            file_stats.append(FileStat(
                file_name=path.name,
                status=FileStatus.SUCCESS.value,
                extracted_rows=result.total_rows,
                sheets=len(result.sheets),
                skipped_sheets=result.skipped_sheets,
                elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
            ))
            progress.set_postfix(success=success_count, failed=failed_count, rows=len(rows))
            progress.finish_file(success=True)

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=len(rows),
        total_sheets=total_sheets,
        skipped_sheets=skipped_sheets,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        rows=rows,
        file_stats=file_stats,
    )
