from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import numpy as np
import pytest

from vehicle_extract.excel.reader import (
    CSV_SHEET_NAME,
    MaterializedWorkbook,
    StreamingWorkbook,
    WorkbookOpenError,
    open_workbook,
    stringify_cell,
)
from vehicle_extract.models.sheet_result import SheetStatus
from vehicle_extract.services.orchestrator import extract_file


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        (float("nan"), ""),
        ("  text ", "  text "),
        (1500.0, "1500"),
        (1500.25, "1500.25"),
        (42, "42"),
        (True, "TRUE"),
        (False, "FALSE"),
        (datetime(2024, 3, 1), "2024-03-01"),
        (datetime(2024, 3, 1, 13, 5), "2024-03-01 13:05:00"),
        (date(2024, 3, 1), "2024-03-01"),
        (np.int64(7), "7"),
        (np.float64(2.0), "2"),
    ],
)
def test_stringify_cell(value, expected):
    assert stringify_cell(value) == expected


@pytest.mark.parametrize("mode", ["streaming", "materialized"])
def test_sheets_in_workbook_order(tmp_path: Path, make_excel, mode):
    path = make_excel(tmp_path / "wb.xlsx", {"Zeta": [["a"]], "Alpha": [["b"]], "Mid": [["c"]]})
    with open_workbook(path, mode) as wb:
        assert wb.sheet_names() == ["Zeta", "Alpha", "Mid"]


@pytest.mark.parametrize("mode", ["streaming", "materialized"])
def test_rows_are_text(tmp_path: Path, make_excel, mode):
    path = make_excel(tmp_path / "wb.xlsx", {"S": [["Plate", "Saldo"], ["B 1", 1500.0], ["B 2", 10.5]]})
    with open_workbook(path, mode) as wb:
        rows = [r[:2] for r in wb.iter_rows("S")]
    assert rows == [["Plate", "Saldo"], ["B 1", "1500"], ["B 2", "10.5"]]


def test_streaming_and_materialized_agree(tmp_path: Path, make_excel, collections_rows):
    path = make_excel(tmp_path / "wb.xlsx", {"S": collections_rows, "Empty": [[None]]})
    with StreamingWorkbook(path) as s, MaterializedWorkbook(path) as m:
        for name in s.sheet_names():
            streamed = [r for r in s.iter_rows(name)]
            loaded = [r for r in m.iter_rows(name)]
            assert len(streamed) == len(loaded)
            for a, b in zip(streamed, loaded):
                width = max(len(a), len(b))
                assert a + [""] * (width - len(a)) == b + [""] * (width - len(b))


def test_csv_source(tmp_path: Path):
    path = tmp_path / "data.csv"
    path.write_text("title,,\nPlate,Unit,Saldo\nB 1,Avanza,\"1500,6\"\n,,\n", encoding="utf-8")
    for cls in (StreamingWorkbook, MaterializedWorkbook):
        with cls(path) as wb:
            assert wb.sheet_names() == [CSV_SHEET_NAME]
            rows = list(wb.iter_rows(CSV_SHEET_NAME))
        # trailing empty row dropped
        assert rows == [["title", "", ""], ["Plate", "Unit", "Saldo"], ["B 1", "Avanza", "1500,6"]]


@pytest.mark.parametrize("mode", ["streaming", "materialized"])
def test_csv_title_row_narrower_than_header(tmp_path: Path, mode):
    path = tmp_path / "tunggakan.csv"
    path.write_text(
        "Laporan Juni\n"
        "Plate,Unit,Saldo\n"
        "B 1,Avanza,\"1500,6\"\n"
        "B 2,Xenia\n"
        "B 3,Brio,10,extra\n"
        "B 4,Jazz,7\n",
        encoding="utf-8",
    )
    with open_workbook(path, mode) as wb:
        rows = list(wb.iter_rows(CSV_SHEET_NAME))
    assert rows[0] == ["Laporan Juni", "", "", ""]
    assert rows[3] == ["B 2", "Xenia", "", ""]
    assert rows[4] == ["B 3", "Brio", "10", "extra"]

    result = extract_file(path, mode=mode)
    assert result.sheets[0].status is SheetStatus.EXTRACTED
    assert [r[:2] + (r[4],) for r in result.rows] == [
        ("B1", "Avanza", "1501"),
        ("B2", "Xenia", ""),
        ("B3", "Brio", "10"),
        ("B4", "Jazz", "7"),
    ]


def test_empty_csv_yields_no_rows(tmp_path: Path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    for cls in (StreamingWorkbook, MaterializedWorkbook):
        with cls(path) as wb:
            assert list(wb.iter_rows(CSV_SHEET_NAME)) == []


def test_unsupported_extension(tmp_path: Path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    with pytest.raises(WorkbookOpenError, match="unsupported file type"):
        open_workbook(path)


def test_extension_not_allowed_by_config(tmp_path: Path):
    path = tmp_path / "data.csv"
    path.write_text("a\n")
    with pytest.raises(WorkbookOpenError):
        open_workbook(path, allowed_extensions=(".xlsx",))


@pytest.mark.parametrize("mode", ["streaming", "materialized"])
def test_corrupt_container(tmp_path: Path, mode):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"definitely not a zip archive")
    with pytest.raises(WorkbookOpenError, match="error opening file"):
        open_workbook(path, mode)


@pytest.mark.parametrize("mode", ["streaming", "materialized"])
def test_missing_file(tmp_path: Path, mode):
    with pytest.raises(WorkbookOpenError):
        open_workbook(tmp_path / "nope.csv", mode)


def test_unknown_mode(tmp_path: Path, make_excel):
    path = make_excel(tmp_path / "wb.xlsx", {"S": [["a"]]})
    with pytest.raises(ValueError):
        open_workbook(path, "mmap")
