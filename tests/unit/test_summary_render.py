from __future__ import annotations

from datetime import UTC, datetime

import pytest

from vehicle_extract.models.processing_result import ProcessingResult
from vehicle_extract.services.summary import render_summary_line


def _result(elapsed: float, **kw) -> ProcessingResult:
    t = datetime(2024, 1, 1, tzinfo=UTC)
    base = dict(
        success_files=2, failed_files=1, total_rows=120, total_sheets=5, skipped_sheets=2,
        start_time=t, end_time=t, elapsed_seconds=elapsed,
    )
    base.update(kw)
    return ProcessingResult(**base)


def test_summary_fields_in_order():
    line = render_summary_line(3, _result(1.5))
    assert line == "SUMMARY files=3/3 success=2 failed=1 rows=120 sheets=5 skipped_sheets=2 elapsed_sec=1.5"


@pytest.mark.parametrize(
    "elapsed, text",
    [(0.0, "0"), (2.0, "2"), (0.0012345, "0.001234"), (0.84, "0.84"), (12.34567, "12.346")],
)
def test_elapsed_formatting(elapsed, text):
    assert render_summary_line(1, _result(elapsed)).endswith(f"elapsed_sec={text}")


def test_no_scientific_notation():
    assert "e-" not in render_summary_line(1, _result(0.0000012))
