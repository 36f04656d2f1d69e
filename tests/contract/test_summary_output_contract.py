from __future__ import annotations

import re
from datetime import UTC, datetime

from vehicle_extract.models.processing_result import ProcessingResult
from vehicle_extract.services.summary import render_summary_line

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"rows=([0-9]+)\s+sheets=([0-9]+)\s+skipped_sheets=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = "SUMMARY files=1/1 success=1 failed=0 rows=4 sheets=2 skipped_sheets=1 elapsed_sec=0.84"
    assert SUMMARY_PATTERN.match(line)


def test_rendered_line_matches_contract():
    t = datetime(2024, 5, 1, tzinfo=UTC)
    result = ProcessingResult(
        success_files=4, failed_files=0, total_rows=9001, total_sheets=7, skipped_sheets=3,
        start_time=t, end_time=t, elapsed_seconds=0.000031,
    )
    assert SUMMARY_PATTERN.match(render_summary_line(4, result))
