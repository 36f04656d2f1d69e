from __future__ import annotations

import json
from pathlib import Path

from vehicle_extract.logging.error_log import ErrorLogBuffer, ErrorRecord
from vehicle_extract.models.error_record import FILE_LEVEL_SHEET

FIELDS = {"timestamp", "file", "sheet", "row", "error_type", "message"}


def test_error_record_json_line():
    rec = ErrorRecord.create("file.xlsx", "Sheet1", -1, "SHEET_READ_ERROR", "bad zip entry")
    data = json.loads(rec.to_json_line())
    assert set(data) == FIELDS
    assert data["row"] == -1
    assert data["timestamp"].endswith("Z")


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create("f.xlsx", "<FILE_LEVEL>", -1, "WORKBOOK_OPEN_ERROR", "not a zip"))
    buf.append(ErrorRecord.create("f.xlsx", "S", -1, "SHEET_READ_ERROR", "truncated"))
    path = buf.flush()
    assert path is not None and path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["error_type"] for line in lines] == ["WORKBOOK_OPEN_ERROR", "SHEET_READ_ERROR"]
    assert len(buf) == 0


def test_flush_empty_buffer_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_multiple_flushes_append_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("f.xlsx", "S", -1, "SHEET_READ_ERROR", "one"))
    first = buf.flush()
    buf.append(ErrorRecord.create("f.xlsx", "S", -1, "SHEET_READ_ERROR", "two"))
    second = buf.flush()
    assert first == second
    assert len(second.read_text(encoding="utf-8").splitlines()) == 2


def test_failure_helpers_fill_fixed_columns(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.workbook_failed("rusak.xlsx", "File is not a zip file")
    buf.sheet_failed("data.xlsx", "Juni", "truncated row")
    buf.sheet_failed("data.xlsx", "Juli", "truncated row")
    assert buf.counts() == {"WORKBOOK_OPEN_ERROR": 1, "SHEET_READ_ERROR": 2}

    first, second, _ = buf.records
    assert (first.file, first.sheet, first.row) == ("rusak.xlsx", FILE_LEVEL_SHEET, -1)
    assert (second.sheet, second.error_type) == ("Juni", "SHEET_READ_ERROR")


def test_log_path_fixed_by_first_flush(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.file_path is None
    buf.sheet_failed("f.xlsx", "S", "bad")
    path = buf.flush()
    assert buf.file_path == path
    assert buf.counts() == {}
