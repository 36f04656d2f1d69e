from __future__ import annotations

import pytest

from vehicle_extract.models.fields import OUTPUT_ORDER
from vehicle_extract.services.orchestrator import extract_workbook

"""Output table contract: nine string fields, canonical order, every row."""

CANONICAL = ["plate", "vehicleType", "financier", "daysOverdue", "balance",
             "branch", "remarks", "chassisNumber", "engineNumber"]


def test_canonical_order_is_fixed():
    assert [k.value for k in OUTPUT_ORDER] == CANONICAL


@pytest.mark.parametrize(
    "header",
    [
        ["Plate"],
        ["Nomor Mesin", "Keterangan", "Nopol"],
        ["Engine", "Chassis", "Branch", "Balance", "Overdue", "Finance", "Type", "Plate", "Remarks"],
    ],
)
def test_any_layout_yields_nine_wide_rows(fake_workbook, header):
    data = [[f"v{i}" for i in range(len(header))] for _ in range(5)]
    result = extract_workbook(fake_workbook({"S": [header] + data}))
    assert len(result.rows) == 5
    for row in result.rows:
        assert len(row) == len(CANONICAL)
        assert all(isinstance(v, str) for v in row)


def test_columns_land_in_canonical_positions(fake_workbook):
    header = ["Engine No", "Chassis", "Office", "Amount", "Days Late", "Financing", "Merk", "Plate", "Catatan"]
    row = ["E", "C", "O", "12", "7", "F", "M", "P 1", "note"]
    result = extract_workbook(fake_workbook({"S": [header] + [row] * 4}))
    assert result.rows[0] == ("P1", "M", "F", "7", "12", "O", "note", "C", "E")
