# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pandas as pd
import pytest

from vehicle_extract.excel.reader import SheetReadError
from vehicle_extract.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout/sys.stderr at setup; capsys swaps them per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VEHICLE_EXTRACT_CONFIG", raising=False)
    return tmp_path


def _write_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


class FakeWorkbook:
    """In-memory WorkbookSource; ``broken`` sheets fail after ``fail_after`` rows."""

    def __init__(
        self,
        sheets: dict[str, list[list[str]]],
        broken: set[str] | None = None,
        fail_after: int = 0,
    ) -> None:
        self.sheets = sheets
        self.broken = broken or set()
        self.fail_after = fail_after
        self.closed = False
        self.rows_pulled: dict[str, int] = {}

    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        self.rows_pulled[sheet_name] = 0
        for i, row in enumerate(self.sheets[sheet_name]):
            if sheet_name in self.broken and i >= self.fail_after:
                raise SheetReadError(f"sheet '{sheet_name}': corrupt row {i}")
            self.rows_pulled[sheet_name] += 1
            yield list(row)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeWorkbook:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


@pytest.fixture()
def collections_rows() -> list[list[object]]:
    """Typical source layout: title, blank, header, five data rows."""
    return [
        ["LAPORAN TUNGGAKAN KENDARAAN", None, None, None, None, None],
        [None, None, None, None, None, None],
        ["No Polisi", "Jenis Kendaraan", "Leasing", "OVD", "Saldo", "Cabang"],
        ["B 1234 XYZ", "Avanza", "BCA Finance", 30, "1500,6", "Jakarta"],
        ["D 55 AB", "Xenia", "Adira", 12, 2500000, "Bandung"],
        [None, "Brio", "Adira", 3, 100, "Bogor"],
        ["F 9 QQ", "Jazz", None, None, "n/a", None],
        ["L 1 A", "Civic", "Mandiri", 90, 1234.5, "Surabaya"],
    ]


@pytest.fixture()
def make_excel():
    """Factory writing each sheet's rows verbatim (no header row, no index)."""
    return _write_excel


@pytest.fixture()
def fake_workbook():
    return FakeWorkbook
