from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .fields import FieldKey
from .record import OutputRow

"""Sheet-level extraction models.

HeaderMatch is produced by the header resolver; SheetResult is the outcome of
running one sheet through the sheet extraction driver.
"""

__all__ = [
    "ColumnMap",
    "HeaderMatch",
    "SheetResult",
    "SheetStatus",
]

ColumnMap = Mapping[FieldKey, int]


class SheetStatus(Enum):
    """Sheet outcome.

    - EXTRACTED: header found, data rows normalized (rows may still be empty)
    - NO_HEADER: header window exhausted without an accepted row
    - TOO_SMALL: fewer rows than the configured minimum
    - READ_ERROR: the container failed while reading this sheet
    """
    EXTRACTED = "extracted"
    NO_HEADER = "no_header"
    TOO_SMALL = "too_small"
    READ_ERROR = "read_error"


@dataclass(frozen=True)
class HeaderMatch:
    row_index: int  # zero-based index of the header row within the sheet
    column_map: ColumnMap  # read-only; canonical key -> zero-based column


@dataclass(frozen=True)
class SheetResult:
    """Processing result for a single sheet."""
    sheet_name: str
    status: SheetStatus
    rows: list[OutputRow] = field(default_factory=list)
    header_row_index: int | None = None
    column_map: ColumnMap | None = None
    rows_read: int = 0  # rows consumed from the source, header included
    rejected_rows: int = 0  # data rows dropped for a missing plate
    error: str | None = None

    @property
    def skipped(self) -> bool:
        return self.status is not SheetStatus.EXTRACTED
