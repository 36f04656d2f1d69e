from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from itertools import islice
from types import MappingProxyType

from ..models.fields import FIELD_DICTIONARY, FieldKey, FieldSpec, match_aliases, normalize_header_cell, required_field
from ..models.sheet_result import HeaderMatch

"""Header row detection.

Scans a bounded window of leading rows and picks the first row that looks like
a header: it either names the required field (plate) or at least
``min_header_matches`` distinct canonical fields. Cells are matched by alias
substring after lowercasing and removing whitespace.
"""

__all__ = [
    "HeaderResolver",
    "match_header_row",
]

logger = logging.getLogger(__name__)


def match_header_row(row: Sequence[str], dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY) -> dict[FieldKey, int]:
    """Build the candidate column map for one row.

    The first cell matching a key wins for that key; later cells matching the
    same key in the same row are ignored. A single cell may name several keys.
    Empty cells are skipped.
    """
    candidate: dict[FieldKey, int] = {}
    for col_idx, cell in enumerate(row):
        if not cell:
            continue
        cleaned = normalize_header_cell(cell)
        for key in match_aliases(cleaned, dictionary):
            if key not in candidate:
                candidate[key] = col_idx
    return candidate


class HeaderResolver:
    """Per-sheet header search over a fixed window of leading rows."""

    def __init__(
        self,
        dictionary: tuple[FieldSpec, ...] = FIELD_DICTIONARY,
        *,
        scan_rows: int = 10,
        min_matches: int = 3,
    ) -> None:
        if scan_rows < 1:
            raise ValueError("scan_rows must be >= 1")
        self.dictionary = dictionary
        self.scan_rows = scan_rows
        self.min_matches = min_matches
        spec = required_field(dictionary)
        self.required_key: FieldKey | None = spec.key if spec else None

    def is_header(self, candidate: dict[FieldKey, int]) -> bool:
        if self.required_key is not None and self.required_key in candidate:
            return True
        return len(candidate) >= self.min_matches

    def within_window(self, row_index: int) -> bool:
        return row_index < self.scan_rows

    def step(self, row_index: int, row: Sequence[str]) -> HeaderMatch | None:
        """Test one row; return a HeaderMatch when the row is accepted.

        Rows outside the window are never accepted.
        """
        if not self.within_window(row_index):
            return None
        candidate = match_header_row(row, self.dictionary)
        if not self.is_header(candidate):
            if candidate:
                logger.debug(
                    "header candidate rejected row=%d matched=%s",
                    row_index, [k.value for k in candidate],
                )
            return None
        logger.debug("header accepted row=%d map=%s", row_index, {k.value: v for k, v in candidate.items()})
        return HeaderMatch(row_index=row_index, column_map=MappingProxyType(candidate))

    def resolve(self, rows: Iterable[Sequence[str]]) -> HeaderMatch | None:
        """Scan at most ``scan_rows`` rows of ``rows`` (forward only)."""
        for row_index, row in enumerate(islice(rows, self.scan_rows)):
            match = self.step(row_index, row)
            if match is not None:
                return match
        return None
