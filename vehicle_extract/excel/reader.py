from __future__ import annotations

import csv
import math
from collections.abc import Iterator
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Protocol

import openpyxl
import pandas as pd

"""Workbook sources.

A workbook source reports its sheet names and yields, per sheet, a forward-only
sequence of rows where every cell is already text. Two variants exist:

- MaterializedWorkbook: pandas reads every sheet up front.
- StreamingWorkbook: openpyxl read-only mode (csv: pandas chunked reader).

Both share stringify_cell and drop trailing empty rows so they produce the
same rows for the same file.
"""

__all__ = [
    "CSV_SHEET_NAME",
    "MaterializedWorkbook",
    "ReaderError",
    "SheetReadError",
    "StreamingWorkbook",
    "WorkbookOpenError",
    "WorkbookSource",
    "open_workbook",
    "stringify_cell",
]

EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
CSV_EXTENSIONS = {".csv"}
CSV_SHEET_NAME = "csv"
CSV_CHUNK_ROWS = 1000


class ReaderError(Exception):
    """Base class for workbook source failures."""


class WorkbookOpenError(ReaderError):
    """Raised when the workbook container itself cannot be opened (fatal)."""


class SheetReadError(ReaderError):
    """Raised when rows of one sheet cannot be read (sheet is skipped)."""


class WorkbookSource(Protocol):
    def sheet_names(self) -> list[str]: ...

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]: ...

    def close(self) -> None: ...


def stringify_cell(value: Any) -> str:
    """Convert a decoded cell value to the text the extraction engine sees.

    None/NaN -> "", integral floats -> "1500", booleans -> TRUE/FALSE,
    midnight date-times -> ISO date, other date-times -> "YYYY-MM-DD HH:MM:SS".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):  # pd.Timestamp included
        if pd.isna(value):
            return ""
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        return str(value)
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if hasattr(value, "item"):  # numpy scalar
        return stringify_cell(value.item())
    return str(value)


def _row_is_empty(row: list[str]) -> bool:
    return all(cell == "" for cell in row)


def _drop_trailing_empty(rows: Iterator[list[str]]) -> Iterator[list[str]]:
    """Hold back empty rows until a non-empty row follows them."""
    pending: list[list[str]] = []
    for row in rows:
        if _row_is_empty(row):
            pending.append(row)
            continue
        if pending:
            yield from pending
            pending.clear()
        yield row


def _extension(path: Path) -> str:
    return path.suffix.lower()


def _csv_width(path: Path) -> int:
    """Field count of the widest line."""
    with path.open(newline="", encoding="utf-8-sig") as f:
        return max((len(row) for row in csv.reader(f)), default=0)


def _read_csv(path: Path, chunksize: int | None = None) -> Any:
    """Ragged-tolerant read: short lines are padded, title lines may be narrower than the header.

    Returns None for a file without any fields.
    """
    width = _csv_width(path)
    if width == 0:
        return None
    return pd.read_csv(
        path, header=None, names=list(range(width)), dtype=str, keep_default_na=False,
        skip_blank_lines=False, encoding="utf-8-sig", engine="python", chunksize=chunksize,
    )


class MaterializedWorkbook:
    """All sheets parsed by pandas when first requested."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._xls: pd.ExcelFile | None = None
        ext = _extension(path)
        try:
            if ext in CSV_EXTENSIONS:
                if not path.is_file():
                    raise FileNotFoundError(path)
                self._sheet_names = [CSV_SHEET_NAME]
            else:
                self._xls = pd.ExcelFile(path, engine="openpyxl")
                self._sheet_names = [str(n) for n in self._xls.sheet_names]
        except Exception as e:
            raise WorkbookOpenError(f"error opening file: {e}") from e

    def sheet_names(self) -> list[str]:
        return list(self._sheet_names)

    def _frame(self, sheet_name: str) -> pd.DataFrame:
        if self._xls is None:
            df = _read_csv(self.path)
            return pd.DataFrame() if df is None else df
        return self._xls.parse(sheet_name, header=None, dtype=object, keep_default_na=False, na_values=[])

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        try:
            df = self._frame(sheet_name)
        except Exception as e:
            raise SheetReadError(f"sheet '{sheet_name}': {e}") from e
        rows = ([stringify_cell(v) for v in raw] for raw in df.itertuples(index=False, name=None))
        yield from _drop_trailing_empty(rows)

    def close(self) -> None:
        if self._xls is not None:
            self._xls.close()
            self._xls = None

    def __enter__(self) -> MaterializedWorkbook:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class StreamingWorkbook:
    """Rows pulled lazily; never holds a whole sheet in memory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._wb: Any = None
        ext = _extension(path)
        try:
            if ext in CSV_EXTENSIONS:
                if not path.is_file():
                    raise FileNotFoundError(path)
                self._sheet_names = [CSV_SHEET_NAME]
            else:
                self._wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
                self._sheet_names = list(self._wb.sheetnames)
        except Exception as e:
            raise WorkbookOpenError(f"error opening file: {e}") from e

    def sheet_names(self) -> list[str]:
        return list(self._sheet_names)

    def _raw_rows(self, sheet_name: str) -> Iterator[list[str]]:
        if self._wb is None:
            reader = _read_csv(self.path, chunksize=CSV_CHUNK_ROWS)
            if reader is None:
                return
            with reader:
                for chunk in reader:
                    for raw in chunk.itertuples(index=False, name=None):
                        yield [stringify_cell(v) for v in raw]
            return
        ws = self._wb[sheet_name]
        for raw in ws.iter_rows(values_only=True):
            yield [stringify_cell(v) for v in raw]

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        try:
            yield from _drop_trailing_empty(self._raw_rows(sheet_name))
        except Exception as e:
            raise SheetReadError(f"sheet '{sheet_name}': {e}") from e

    def close(self) -> None:
        if self._wb is not None:
            self._wb.close()
            self._wb = None

    def __enter__(self) -> StreamingWorkbook:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def open_workbook(
    path: Path, mode: str = "streaming", allowed_extensions: tuple[str, ...] | None = None
) -> MaterializedWorkbook | StreamingWorkbook:
    """Open ``path`` as a workbook source.

    Parameters
    ----------
    path: staged or local file path
    mode: "streaming" (openpyxl read-only) or "materialized" (pandas)
    allowed_extensions: declared extension whitelist (None = all supported)

    Raises
    ------
    WorkbookOpenError: unsupported extension, missing file or corrupt container
    """
    ext = _extension(path)
    supported = EXCEL_EXTENSIONS | CSV_EXTENSIONS
    if ext not in supported or (allowed_extensions is not None and ext not in allowed_extensions):
        raise WorkbookOpenError(f"unsupported file type: {ext or '<none>'}")
    if mode == "materialized":
        return MaterializedWorkbook(path)
    if mode == "streaming":
        return StreamingWorkbook(path)
    raise ValueError(f"unknown reader mode: {mode}")
